#!/usr/bin/env python3
"""
Lesson command endpoints for generating and previewing daily lessons.
"""

import logging
from argparse import Namespace
from datetime import date
from typing import Optional

from dateutil import parser as date_parser

from .base import BaseCommand
from core.formatters import format_lesson_html, format_lesson_text
from core.models.lesson import Lesson
from core.scheduling import plan_lesson, today_in

logger = logging.getLogger(__name__)


class LessonCommand(BaseCommand):
    """Generate, deliver and preview daily lessons."""

    subcommands = ['generate', 'preview']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute lesson subcommand."""
        try:
            if subcommand == "generate":
                return self.generate(args)
            elif subcommand == "preview":
                return self.preview(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"lesson {subcommand}")

    def generate(self, args: Namespace) -> int:
        """Generate today's lessons, record them and email them."""
        tracks = self.resolve_tracks(getattr(args, 'track', None))
        dry_run = getattr(args, 'dry_run', False)
        send_email = not getattr(args, 'no_email', False)
        lesson_date = self._lesson_date(args)

        if send_email and not dry_run and not self.config.has_email():
            self.logger.warning("Email delivery not configured; lessons will only be recorded")

        config = self.config
        self.logger.info(
            f"Integrations: openai={config.has_openai()}, email={config.has_email()}, slack={config.has_slack()}"
        )
        daily_run = self._container.get('daily_run')
        record = daily_run.run(
            tracks,
            lesson_date=lesson_date,
            send_email=send_email,
            dry_run=dry_run,
            command_used="lesson generate",
            on_lesson=self._print_lesson if dry_run else None
        )

        print(f"\n=== Lesson Run {record.run_id} ===")
        for outcome in record.outcomes:
            if outcome.success:
                notes = []
                if outcome.used_fallback:
                    notes.append("curated content")
                if outcome.emailed:
                    notes.append("emailed")
                suffix = f" ({', '.join(notes)})" if notes else ""
                print(f"✅ {outcome.track}: {outcome.title}{suffix}")
                if outcome.error_message:
                    print(f"   ⚠️  {outcome.error_message}")
            else:
                print(f"❌ {outcome.track}: {outcome.error_message}")
        print(f"⏱️  {record.processing_time:.1f}s, {record.lessons_generated} generated, {record.failures} failed")

        return 0 if record.success else 1

    def preview(self, args: Namespace) -> int:
        """Generate one lesson without recording or sending it."""
        tracks = self.resolve_tracks([args.track])
        orchestrator = self._container.get('orchestrator')
        lesson_date = self._lesson_date(args) or self._today()

        plan = plan_lesson(tracks[0], lesson_date)
        result = orchestrator.generate(plan.track, plan.subtopic, plan.level, lesson_date)
        if not result.ok:
            print(f"❌ {result.describe()}")
            return 1

        if getattr(args, 'html', False):
            print(format_lesson_html(result.value))
        else:
            self._print_lesson(result.value)
        return 0

    @staticmethod
    def _print_lesson(lesson: Lesson) -> None:
        print()
        print(format_lesson_text(lesson))

    def _today(self) -> date:
        return today_in(self.config.app.timezone)

    @staticmethod
    def _lesson_date(args: Namespace) -> Optional[date]:
        raw = getattr(args, 'date', None)
        if not raw:
            return None
        return date_parser.parse(raw).date()
