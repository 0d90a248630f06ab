#!/usr/bin/env python3
"""
Lesson data model.

A lesson is created once per successful generation, appended to the
history log, and never mutated afterwards.
"""

import json
from datetime import date
from typing import Dict, Any, List, Tuple
from dataclasses import dataclass, field

from dateutil import parser as date_parser

HISTORY_COLUMNS = [
    'date', 'track', 'subtopic', 'level', 'title', 'hook',
    'sections', 'action_item', 'tags', 'word_count', 'used_fallback'
]


@dataclass(frozen=True)
class LessonSection:
    """One headed block of lesson content."""
    heading: str
    body: str

    def to_dict(self) -> Dict[str, str]:
        return {'heading': self.heading, 'body': self.body}


@dataclass(frozen=True)
class Lesson:
    """A generated micro-lesson for one track and day."""
    date: date
    track: str
    subtopic: str
    level: str
    title: str
    hook: str
    sections: Tuple[LessonSection, ...] = field(default_factory=tuple)
    action_item: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    word_count: int = 0
    used_fallback: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'sections', tuple(self.sections))
        object.__setattr__(self, 'tags', tuple(self.tags))

    def to_row(self) -> Dict[str, str]:
        """Flatten into a history row (all string values)."""
        return {
            'date': self.date.isoformat(),
            'track': self.track,
            'subtopic': self.subtopic,
            'level': self.level,
            'title': self.title,
            'hook': self.hook,
            'sections': json.dumps([s.to_dict() for s in self.sections], ensure_ascii=False),
            'action_item': self.action_item,
            'tags': json.dumps(list(self.tags), ensure_ascii=False),
            'word_count': str(self.word_count),
            'used_fallback': 'true' if self.used_fallback else 'false'
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Lesson':
        """
        Rebuild a lesson from a history row.

        Raises:
            ValueError: If the row cannot be parsed
        """
        try:
            sections_data: List[Dict[str, Any]] = json.loads(row.get('sections') or '[]')
            tags = json.loads(row.get('tags') or '[]')
            return cls(
                date=date_parser.parse(row['date']).date(),
                track=row.get('track', ''),
                subtopic=row.get('subtopic', ''),
                level=row.get('level', ''),
                title=row.get('title', ''),
                hook=row.get('hook', ''),
                sections=tuple(
                    LessonSection(heading=str(s.get('heading', '')), body=str(s.get('body', '')))
                    for s in sections_data
                ),
                action_item=row.get('action_item', ''),
                tags=tuple(str(tag) for tag in tags),
                word_count=int(row.get('word_count') or 0),
                used_fallback=str(row.get('used_fallback', '')).lower() == 'true'
            )
        except (KeyError, TypeError, json.JSONDecodeError, OverflowError) as e:
            raise ValueError(f"Invalid history row: {e}") from e

    def __repr__(self):
        return f"Lesson(date={self.date}, track='{self.track}', title='{self.title[:50]}')"
