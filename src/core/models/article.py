#!/usr/bin/env python3
"""
Article data model.

Represents a normalized article produced by any source adapter.
"""

from datetime import datetime
from typing import Dict, Any, Optional
from dataclasses import dataclass

from dateutil import parser as date_parser


def parse_datetime_safe(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return None


@dataclass(frozen=True)
class Article:
    """
    A single fetched article in the common shape shared by all sources.

    The canonical URL is the identity key used for deduplication.
    """
    title: str
    url: str
    source: str = ""
    summary: str = ""
    published: Optional[datetime] = None

    def __post_init__(self):
        """Strip whitespace from text fields."""
        object.__setattr__(self, 'title', (self.title or "").strip())
        object.__setattr__(self, 'url', (self.url or "").strip())
        object.__setattr__(self, 'source', (self.source or "").strip())
        object.__setattr__(self, 'summary', (self.summary or "").strip())

    @property
    def search_text(self) -> str:
        """Lowercased title and summary used for trend matching."""
        return f"{self.title} {self.summary}".lower()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'title': self.title,
            'url': self.url,
            'source': self.source,
            'summary': self.summary,
            'published': self.published.isoformat() if self.published else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """Create Article from dictionary."""
        return cls(
            title=data.get('title', ''),
            url=data.get('url', ''),
            source=data.get('source', ''),
            summary=data.get('summary', ''),
            published=parse_datetime_safe(data.get('published'))
        )

    def __repr__(self):
        return f"Article(title='{self.title[:50]}...', source='{self.source}', url='{self.url}')"
