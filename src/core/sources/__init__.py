#!/usr/bin/env python3
"""
Article sources for content aggregation.

Three adapters share one capability: fetch articles for a query and return
them normalized, or None when the source could not contribute.
"""

from .base import ArticleSource, QuerySource
from .keyword_search import KeywordSearchSource
from .web_search import WebSearchSource
from .feed import FeedSource, detect_dialect

__all__ = [
    'ArticleSource', 'QuerySource', 'KeywordSearchSource', 'WebSearchSource',
    'FeedSource', 'detect_dialect'
]
