#!/usr/bin/env python3
"""
Slack integration for operator reports.

Sends generation failure reports and run summaries to an operator channel
via an incoming webhook.
"""

import logging
from datetime import date, datetime
from typing import Dict, Optional, Any

import requests

from core.models.metrics import RunRecord
from core.models.result import GenerationFailure

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Handles sending operator notifications to Slack."""

    def __init__(self, webhook_url: str, timeout: int = 10):
        """
        Initialize Slack notifier.

        Args:
            webhook_url: Slack incoming webhook URL
            timeout: Request timeout in seconds
        """
        if not webhook_url:
            raise ValueError("Slack webhook URL not provided")

        self.webhook_url = webhook_url
        self.timeout = timeout
        self.max_message_length = 4000

    def send_message(self, text: str, username: str = "LessonBot", icon_emoji: str = ":books:") -> bool:
        """
        Send a simple text message to Slack.

        Args:
            text: Message text
            username: Bot username for the message
            icon_emoji: Bot icon

        Returns:
            True if sent successfully, False otherwise
        """
        if len(text) > self.max_message_length:
            text = text[:self.max_message_length - 3] + "..."

        payload = {
            "text": text,
            "username": username,
            "icon_emoji": icon_emoji
        }
        return self._send_webhook_message(payload)

    def send_failure_report(self, failure: GenerationFailure, lesson_date: Optional[date] = None) -> bool:
        """
        Report a track whose lesson could not be generated.

        Both the live and the curated-content causes are included.
        """
        when = (lesson_date or datetime.now().date()).isoformat()
        fallback_text = failure.fallback.describe() if failure.fallback else "not attempted"
        payload = {
            "text": f"Lesson generation failed for {failure.track} on {when}",
            "username": "LessonBot",
            "icon_emoji": ":rotating_light:",
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": f"Lesson failed: {failure.track}"}
                },
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*Date:*\n{when}"},
                        {"type": "mrkdwn", "text": f"*Track:*\n{failure.track}"}
                    ]
                },
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": f"*Live content:*\n```{failure.primary.describe()}```"}
                },
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": f"*Curated content:*\n```{fallback_text}```"}
                }
            ]
        }
        return self._send_webhook_message(payload)

    def send_run_summary(self, record: RunRecord) -> bool:
        """Post a one-message summary of a run."""
        lines = [f"*Daily lessons* ({record.timestamp.strftime('%Y-%m-%d %H:%M')}, {record.processing_time:.1f}s)"]
        for outcome in record.outcomes:
            if outcome.success:
                flags = []
                if outcome.used_fallback:
                    flags.append("curated")
                if outcome.emailed:
                    flags.append("emailed")
                suffix = f" ({', '.join(flags)})" if flags else ""
                lines.append(f":white_check_mark: {outcome.track}: {outcome.title}{suffix}")
            else:
                lines.append(f":x: {outcome.track}: {outcome.error_message}")
        return self.send_message("\n".join(lines))

    def _send_webhook_message(self, payload: Dict[str, Any]) -> bool:
        """
        Send a message via Slack webhook.

        Args:
            payload: Slack message payload

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"}
            )

            if response.status_code == 200:
                logger.info("Slack message sent successfully")
                return True
            else:
                logger.error(f"Slack webhook failed with status {response.status_code}: {response.text}")
                return False

        except requests.RequestException as e:
            logger.error(f"Failed to send Slack message: {e}")
            return False

    def test_connection(self) -> bool:
        """Test Slack webhook connection."""
        success = self.send_message(
            f"Test message from the lesson pipeline - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            icon_emoji=":test_tube:"
        )

        if success:
            logger.info("Slack connection test successful")
        else:
            logger.error("Slack connection test failed")

        return success
