#!/usr/bin/env python3
"""
Aggregated content models.

AggregatedContent is what the aggregation engine hands to lesson
generation, and what gets cached per track.
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field

MAX_TRENDS = 5
MAX_INSIGHTS = 3


@dataclass(frozen=True)
class Insight:
    """A headline worth mentioning in a lesson, with its takeaway."""
    headline: str
    takeaway: str = ""
    source: str = "Web"

    def to_dict(self) -> Dict[str, str]:
        return {
            'headline': self.headline,
            'takeaway': self.takeaway,
            'source': self.source
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Insight':
        return cls(
            headline=str(data.get('headline', '')),
            takeaway=str(data.get('takeaway', '') or ''),
            source=str(data.get('source') or 'Web')
        )


@dataclass(frozen=True)
class AggregatedContent:
    """
    Trend keywords and insight records for one track.

    Live and curated-fallback content have the same shape. ``is_fallback``
    is left out of ``to_dict`` and travels only in the cache entry, so a
    cached curated result is still reported as curated.
    """
    trends: List[str] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    is_fallback: bool = False

    def __post_init__(self):
        """Enforce the size bounds."""
        object.__setattr__(self, 'trends', list(self.trends)[:MAX_TRENDS])
        object.__setattr__(self, 'insights', list(self.insights)[:MAX_INSIGHTS])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the cacheable ``{"trends", "insights"}`` shape."""
        return {
            'trends': list(self.trends),
            'insights': [insight.to_dict() for insight in self.insights]
        }

    def to_cache_dict(self) -> Dict[str, Any]:
        """Serialized shape plus the ``is_fallback`` flag, for the content cache."""
        data = self.to_dict()
        data['is_fallback'] = self.is_fallback
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AggregatedContent':
        """
        Rebuild from the serialized shape.

        Raises:
            ValueError: If the data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected dict, got {type(data).__name__}")
        trends = data.get('trends')
        insights = data.get('insights')
        if not isinstance(trends, list) or not isinstance(insights, list):
            raise ValueError("Aggregated content requires 'trends' and 'insights' lists")
        return cls(
            trends=[str(trend) for trend in trends],
            insights=[Insight.from_dict(item) for item in insights if isinstance(item, dict)],
            is_fallback=data.get('is_fallback') is True
        )
