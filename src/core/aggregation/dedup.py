#!/usr/bin/env python3
"""
URL-based article deduplication.

The canonical URL is the identity key: one article per URL survives, and
when several sources return the same URL the last one seen wins.
"""

import logging
from typing import Dict, Iterable, List, Any

from ..models.article import Article

logger = logging.getLogger(__name__)


class DeduplicationResult:
    """Counts from a deduplication pass, for logging."""

    def __init__(self, original_count: int = 0, unique_count: int = 0):
        self.original_count = original_count
        self.unique_count = unique_count

    @property
    def duplicates_found(self) -> int:
        return self.original_count - self.unique_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original_count': self.original_count,
            'unique_count': self.unique_count,
            'duplicates_found': self.duplicates_found
        }


def deduplicate_by_url(articles: Iterable[Article]) -> List[Article]:
    """
    Keep exactly one article per URL, the last one encountered.

    Output order follows each URL's first appearance; callers must not
    rely on it beyond that.
    """
    by_url: Dict[str, Article] = {}
    original_count = 0
    for article in articles:
        original_count += 1
        by_url[article.url] = article

    unique = list(by_url.values())
    result = DeduplicationResult(original_count, len(unique))
    if result.duplicates_found:
        logger.debug(f"Removed {result.duplicates_found} duplicate articles ({result.to_dict()})")
    return unique
