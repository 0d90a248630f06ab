#!/usr/bin/env python3
"""
Daily topic selection.

Subtopics rotate by day of year and difficulty cycles by ISO week, so a
given date always maps to the same lesson plan.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import pytz

from .tracks import Track

LEVELS = ("Beginner", "Intermediate", "Advanced")


@dataclass(frozen=True)
class LessonPlan:
    """What to teach for one track on one day."""
    track: Track
    subtopic: str
    level: str
    lesson_date: date


def today_in(timezone_name: str = "UTC", now: Optional[datetime] = None) -> date:
    """
    Current date in the given timezone.

    Args:
        timezone_name: IANA timezone name
        now: Aware datetime to convert instead of the current time
    """
    tz = pytz.timezone(timezone_name)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz).date()


def select_subtopic(track: Track, lesson_date: date) -> str:
    day_of_year = lesson_date.timetuple().tm_yday
    return track.subtopics[day_of_year % len(track.subtopics)]


def select_level(lesson_date: date) -> str:
    iso_week = lesson_date.isocalendar()[1]
    return LEVELS[iso_week % len(LEVELS)]


def plan_lesson(track: Track, lesson_date: date) -> LessonPlan:
    """Subtopic and level for a track on a date."""
    return LessonPlan(
        track=track,
        subtopic=select_subtopic(track, lesson_date),
        level=select_level(lesson_date),
        lesson_date=lesson_date
    )
