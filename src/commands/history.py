#!/usr/bin/env python3
"""
History command endpoints for the lesson log and dashboard data.
"""

import json
import logging
from argparse import Namespace

from .base import BaseCommand
from core.history import summarize_history
from core.scheduling import today_in

logger = logging.getLogger(__name__)


class HistoryCommand(BaseCommand):
    """Read the lesson history."""

    subcommands = ['stats', 'dashboard', 'recent']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute history subcommand."""
        try:
            if subcommand == "stats":
                return self.stats(args)
            elif subcommand == "dashboard":
                return self.dashboard(args)
            elif subcommand == "recent":
                return self.recent(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"history {subcommand}")

    def _summary(self):
        lessons = self.history.read_all()
        return summarize_history(lessons, today=today_in(self.config.app.timezone))

    def stats(self, args: Namespace) -> int:
        """Show lesson history statistics."""
        summary = self._summary()

        print(f"\n=== Lesson History ===")
        print(f"📚 Total lessons: {summary['total_lessons']}")
        if not summary['total_lessons']:
            return 0

        print(f"📝 Total words: {summary['total_words']} (avg {summary['average_words']})")
        print(f"🔥 Current streak: {summary['current_streak']} days")
        print(f"🗓️  {summary['first_date']} → {summary['last_date']}")
        print(f"🛟 Curated-content lessons: {summary['fallback_lessons']}")

        print(f"📈 By track:")
        for track, count in summary['tracks'].items():
            print(f"  • {track}: {count}")

        print(f"🎚️  By level:")
        for level, count in summary['levels'].items():
            print(f"  • {level}: {count}")

        if summary['top_tags']:
            tags = ", ".join(f"{item['tag']} ({item['count']})" for item in summary['top_tags'])
            print(f"🏷️  Top tags: {tags}")
        return 0

    def dashboard(self, args: Namespace) -> int:
        """Write the dashboard view as JSON (stdout or --output)."""
        payload = json.dumps(self._summary(), ensure_ascii=False, indent=2)
        output = getattr(args, 'output', None)
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(payload + "\n")
            print(f"✅ Dashboard data written to {output}")
        else:
            print(payload)
        return 0

    def recent(self, args: Namespace) -> int:
        """Show the most recent lessons."""
        limit = getattr(args, 'limit', 5)
        lessons = self.history.recent(limit)

        print(f"\n=== Recent Lessons (Last {limit}) ===")
        if not lessons:
            print("No lessons recorded yet")
            return 0
        for lesson in lessons:
            marker = " 🛟" if lesson.used_fallback else ""
            print(f"[{lesson.date.isoformat()}] {lesson.track} ({lesson.level}): {lesson.title}{marker}")
        return 0
