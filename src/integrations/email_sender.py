#!/usr/bin/env python3
"""
Email delivery for lessons.

Sends one lesson to the configured recipient over SMTP with SSL, as a
multipart message with plain-text and HTML alternatives.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Callable, Optional

from core.exceptions import DeliveryError
from core.formatters import format_lesson_html, format_lesson_text, format_subject
from core.models.lesson import Lesson

logger = logging.getLogger(__name__)


class EmailSender:
    """Sends lessons by email."""

    def __init__(self,
                 host: str,
                 port: int,
                 username: str,
                 password: str,
                 sender: Optional[str],
                 recipient: str,
                 smtp_factory: Optional[Callable[..., Any]] = None):
        """
        Initialize email sender.

        Args:
            host: SMTP server host
            port: SMTP SSL port
            username: SMTP login
            password: SMTP password or app password
            sender: From address (defaults to the login)
            recipient: The single lesson recipient
            smtp_factory: Replacement for smtplib.SMTP_SSL (tests)
        """
        if not (username and password and recipient):
            raise ValueError("Email delivery needs SMTP credentials and a recipient")

        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.recipient = recipient
        self.smtp_factory = smtp_factory or smtplib.SMTP_SSL

    def build_message(self, lesson: Lesson) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = format_subject(lesson)
        msg['From'] = f"Daily Lesson <{self.sender}>"
        msg['To'] = self.recipient

        msg.attach(MIMEText(format_lesson_text(lesson), 'plain', 'utf-8'))
        msg.attach(MIMEText(format_lesson_html(lesson), 'html', 'utf-8'))
        return msg

    def send_lesson(self, lesson: Lesson) -> None:
        """
        Send a lesson.

        Raises:
            DeliveryError: If the message could not be sent
        """
        msg = self.build_message(lesson)
        try:
            context = ssl.create_default_context()
            with self.smtp_factory(self.host, self.port, context=context) as server:
                server.login(self.username, self.password)
                server.sendmail(self.sender, [self.recipient], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send lesson email: {e}")
            raise DeliveryError('email', e) from e

        logger.info(f"Lesson '{lesson.title}' sent to {self.recipient}")
