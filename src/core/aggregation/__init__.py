#!/usr/bin/env python3
"""
Aggregation and fallback engine.
"""

from .aggregator import ContentAggregator, content_cache_key, articles_to_insights
from .dedup import deduplicate_by_url, DeduplicationResult
from .fallback import curated_content, curated_trends, CURATED_TRENDS, DEFAULT_CURATED_TRENDS, GENERIC_INSIGHTS
from .trends import TrendExtractor, extract_trends, TREND_VOCABULARY

__all__ = [
    'ContentAggregator', 'content_cache_key', 'articles_to_insights',
    'deduplicate_by_url', 'DeduplicationResult',
    'curated_content', 'curated_trends', 'CURATED_TRENDS', 'DEFAULT_CURATED_TRENDS', 'GENERIC_INSIGHTS',
    'TrendExtractor', 'extract_trends', 'TREND_VOCABULARY'
]
