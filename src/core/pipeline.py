#!/usr/bin/env python3
"""
The daily lesson run.

For each track: pick today's subtopic and level, generate a lesson with
fallback, append it to the history and email it. A track that fails is
reported to the operator channel and the run moves on to the next one.
"""

import logging
import time
import uuid
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Optional

from .exceptions import DeliveryError, HistoryError
from .generation.orchestrator import LessonOrchestrator
from .history import HistoryStore
from .models.lesson import Lesson
from .models.metrics import RunRecord, TrackOutcome
from .scheduling import plan_lesson, today_in
from .tracks import Track

logger = logging.getLogger(__name__)


class DailyLessonRun:
    """Sequential lesson generation and delivery across tracks."""

    def __init__(self,
                 orchestrator: LessonOrchestrator,
                 history: HistoryStore,
                 email_sender=None,
                 notifier=None,
                 timezone_name: str = "UTC"):
        """
        Initialize the run.

        Args:
            orchestrator: Two-tier lesson generator
            history: Lesson history store
            email_sender: EmailSender, or None to skip email
            notifier: SlackNotifier, or None to skip operator reports
            timezone_name: Timezone that decides what "today" is
        """
        self.orchestrator = orchestrator
        self.history = history
        self.email_sender = email_sender
        self.notifier = notifier
        self.timezone_name = timezone_name

    def run(self,
            tracks: Iterable[Track],
            lesson_date: Optional[date] = None,
            send_email: bool = True,
            dry_run: bool = False,
            command_used: str = "lesson generate",
            on_lesson: Optional[Callable[[Lesson], None]] = None) -> RunRecord:
        """
        Generate one lesson per track.

        Args:
            tracks: Tracks to process, in order
            lesson_date: Date to generate for (defaults to today in the configured timezone)
            send_email: Email each lesson when a sender is configured
            dry_run: Generate only; no history write, email or operator report
            command_used: Recorded on the RunRecord
            on_lesson: Called with each generated lesson

        Returns:
            RunRecord with one outcome per track
        """
        start_time = time.time()
        lesson_date = lesson_date or today_in(self.timezone_name)
        record = RunRecord(
            run_id=uuid.uuid4().hex[:12],
            timestamp=datetime.now(timezone.utc),
            command_used=command_used
        )

        for track in tracks:
            outcome = self._run_track(track, lesson_date, send_email and not dry_run, dry_run, on_lesson)
            record.outcomes.append(outcome)

        record.processing_time = time.time() - start_time
        logger.info(
            f"Run {record.run_id} finished: {record.lessons_generated} lessons, "
            f"{record.failures} failures in {record.processing_time:.1f}s"
        )

        if self.notifier is not None and not dry_run:
            self.notifier.send_run_summary(record)
        return record

    def _run_track(self,
                   track: Track,
                   lesson_date: date,
                   send_email: bool,
                   dry_run: bool,
                   on_lesson: Optional[Callable[[Lesson], None]]) -> TrackOutcome:
        plan = plan_lesson(track, lesson_date)
        logger.info(f"Generating '{track.name}': {plan.subtopic} ({plan.level})")

        result = self.orchestrator.generate(track, plan.subtopic, plan.level, lesson_date)
        if not result.ok:
            if self.notifier is not None and not dry_run:
                self.notifier.send_failure_report(result, lesson_date)
            return TrackOutcome(track=track.name, success=False, error_message=result.describe())

        lesson: Lesson = result.value
        outcome = TrackOutcome(
            track=track.name,
            success=True,
            title=lesson.title,
            used_fallback=lesson.used_fallback
        )
        if on_lesson is not None:
            on_lesson(lesson)
        if dry_run:
            return outcome

        errors: List[str] = []
        try:
            self.history.append(lesson)
        except HistoryError as e:
            logger.error(f"Could not record lesson for '{track.name}': {e.message}")
            errors.append(e.message)

        if send_email and self.email_sender is not None:
            try:
                self.email_sender.send_lesson(lesson)
                outcome.emailed = True
            except DeliveryError as e:
                errors.append(e.message)
                if self.notifier is not None:
                    self.notifier.send_message(f":warning: Lesson email for {track.name} failed: {e.message}")

        if errors:
            outcome.error_message = "; ".join(errors)
        return outcome
