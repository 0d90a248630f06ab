#!/usr/bin/env python3
"""
Lesson history.

An append-only CSV log with one row per generated lesson, plus the
aggregate view the dashboard reads.
"""

import csv
import logging
import os
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Any, Optional

from .exceptions import HistoryError
from .models.lesson import Lesson, HISTORY_COLUMNS

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Append-only lesson history backed by a CSV file.

    Rows are never rewritten; a row that cannot be parsed is skipped on
    read so one bad line does not hide the rest of the history.
    """

    def __init__(self, path: str):
        self.path = path

    def append(self, lesson: Lesson) -> None:
        """
        Append one lesson.

        Raises:
            HistoryError: If the file cannot be written
        """
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            write_header = not os.path.exists(self.path) or os.path.getsize(self.path) == 0
            with open(self.path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.DictWriter(f, fieldnames=HISTORY_COLUMNS)
                if write_header:
                    writer.writeheader()
                writer.writerow(lesson.to_row())
        except OSError as e:
            raise HistoryError('append', self.path, e) from e
        logger.debug(f"Appended lesson '{lesson.title}' to {self.path}")

    def read_all(self) -> List[Lesson]:
        """
        All lessons in file order.

        Raises:
            HistoryError: If the file exists but cannot be read
        """
        if not os.path.exists(self.path):
            return []

        lessons = []
        try:
            with open(self.path, 'r', newline='', encoding='utf-8') as f:
                for line_number, row in enumerate(csv.DictReader(f), start=2):
                    try:
                        lessons.append(Lesson.from_row(row))
                    except ValueError as e:
                        logger.warning(f"Skipping history row {line_number} in {self.path}: {e}")
        except (OSError, csv.Error) as e:
            raise HistoryError('read', self.path, e) from e
        return lessons

    def recent(self, limit: int = 5) -> List[Lesson]:
        """Most recent lessons, newest first."""
        lessons = self.read_all()
        return list(reversed(lessons))[:limit]


def current_streak(lesson_dates: List[date], today: Optional[date] = None) -> int:
    """
    Consecutive days with at least one lesson, counting back from today.

    A streak that ended yesterday still counts, so the number does not drop
    to zero before today's run.
    """
    if not lesson_dates:
        return 0
    days = set(lesson_dates)
    cursor = today or max(days)
    if cursor not in days:
        cursor -= timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def summarize_history(lessons: List[Lesson], today: Optional[date] = None, recent_limit: int = 5) -> Dict[str, Any]:
    """
    Aggregate view of the lesson history for the dashboard.

    Args:
        lessons: Lessons in file order
        today: Reference date for the streak (defaults to the latest lesson date)
        recent_limit: Number of recent lessons to include

    Returns:
        Dictionary of totals, breakdowns and recent lessons
    """
    if not lessons:
        return {
            'total_lessons': 0,
            'total_words': 0,
            'average_words': 0,
            'fallback_lessons': 0,
            'tracks': {},
            'levels': {},
            'current_streak': 0,
            'top_tags': [],
            'first_date': None,
            'last_date': None,
            'recent': []
        }

    total_words = sum(lesson.word_count for lesson in lessons)
    tag_counts = Counter(tag for lesson in lessons for tag in lesson.tags)
    dates = [lesson.date for lesson in lessons]

    return {
        'total_lessons': len(lessons),
        'total_words': total_words,
        'average_words': round(total_words / len(lessons)),
        'fallback_lessons': sum(1 for lesson in lessons if lesson.used_fallback),
        'tracks': dict(Counter(lesson.track for lesson in lessons)),
        'levels': dict(Counter(lesson.level for lesson in lessons)),
        'current_streak': current_streak(dates, today),
        'top_tags': [{'tag': tag, 'count': count} for tag, count in tag_counts.most_common(5)],
        'first_date': min(dates).isoformat(),
        'last_date': max(dates).isoformat(),
        'recent': [
            {
                'date': lesson.date.isoformat(),
                'track': lesson.track,
                'title': lesson.title,
                'level': lesson.level,
                'word_count': lesson.word_count
            }
            for lesson in list(reversed(lessons))[:recent_limit]
        ]
    }
