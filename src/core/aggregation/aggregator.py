#!/usr/bin/env python3
"""
Content aggregation for a track.

Collects articles from the keyword search, web search and feed sources,
deduplicates them, derives trends and insights, and falls back to curated
content when nothing usable came back. Results are cached per track.
"""

import logging
from typing import List, Optional

from ..cache import TTLCache
from ..models.article import Article
from ..models.content import AggregatedContent, Insight, MAX_INSIGHTS
from ..sources.base import ArticleSource
from ..tracks import Track
from .dedup import deduplicate_by_url
from .fallback import curated_content
from .trends import TrendExtractor

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TTL = 21600  # 6 hours


def content_cache_key(track: Track) -> str:
    """Cache key for a track's aggregated content."""
    return f"content:{track.slug}"


def articles_to_insights(articles: List[Article], limit: int = MAX_INSIGHTS) -> List[Insight]:
    """First ``limit`` articles as insight records."""
    return [
        Insight(
            headline=article.title,
            takeaway=article.summary or "",
            source=article.source or "Web"
        )
        for article in articles[:limit]
    ]


class ContentAggregator:
    """Builds AggregatedContent for a track from all configured sources."""

    def __init__(self,
                 cache: TTLCache,
                 keyword_source: ArticleSource,
                 web_source: ArticleSource,
                 feed_source: ArticleSource,
                 ttl_seconds: int = DEFAULT_CONTENT_TTL,
                 max_queries: int = 2,
                 max_feeds: int = 2,
                 trend_extractor: Optional[TrendExtractor] = None):
        """
        Initialize the aggregator.

        Args:
            cache: Cache for aggregated content
            keyword_source: Keyword search adapter
            web_source: Web search adapter
            feed_source: Syndication feed adapter
            ttl_seconds: How long aggregated content stays cached
            max_queries: Number of track queries sent to each search adapter
            max_feeds: Number of track feeds read
            trend_extractor: Trend extractor (default vocabulary if omitted)
        """
        self.cache = cache
        self.keyword_source = keyword_source
        self.web_source = web_source
        self.feed_source = feed_source
        self.ttl_seconds = ttl_seconds
        self.max_queries = max_queries
        self.max_feeds = max_feeds
        self.trend_extractor = trend_extractor or TrendExtractor()

    def get_content(self, track: Track) -> AggregatedContent:
        """
        Aggregated content for a track, from cache when fresh.

        Args:
            track: Track to aggregate content for

        Returns:
            Live content, or curated content if no source contributed
        """
        key = content_cache_key(track)
        cached = self._cached_content(key)
        if cached is not None:
            logger.info(f"Using cached content for '{track.name}'")
            return cached

        articles = deduplicate_by_url(self.collect_articles(track))
        content = self.build_content(track, articles)

        try:
            self.cache.put(key, content.to_cache_dict(), self.ttl_seconds)
        except OSError as e:
            logger.warning(f"Could not cache content for '{track.name}': {e}")
        return content

    def collect_articles(self, track: Track) -> List[Article]:
        """
        Query every source in order and concatenate what they return.

        Order: for each of the first queries, keyword search then web
        search; then each of the first feeds.
        """
        collected: List[Article] = []

        for query in track.queries[:self.max_queries]:
            collected.extend(self._fetch(self.keyword_source, query))
            collected.extend(self._fetch(self.web_source, query))

        for feed_url in track.feeds[:self.max_feeds]:
            collected.extend(self._fetch(self.feed_source, feed_url))

        logger.info(f"Collected {len(collected)} articles for '{track.name}'")
        return collected

    def build_content(self, track: Track, articles: List[Article]) -> AggregatedContent:
        """Trends and insights from deduplicated articles, or curated fallback."""
        if not articles:
            logger.warning(f"No articles for '{track.name}', using curated content")
            return curated_content(track.name)

        return AggregatedContent(
            trends=self.trend_extractor.extract(articles),
            insights=articles_to_insights(articles)
        )

    def _fetch(self, source: ArticleSource, query: str) -> List[Article]:
        # A source that raises is treated like one that returned nothing.
        try:
            articles = source.fetch_articles(query)
        except Exception as e:
            logger.error(f"Source '{source.name}' failed for '{query}': {e}", exc_info=True)
            return []
        if articles is None:
            logger.debug(f"Source '{source.name}' returned no response for '{query}'")
            return []
        return list(articles)

    def _cached_content(self, key: str) -> Optional[AggregatedContent]:
        raw = self.cache.get(key)
        if raw is None:
            return None
        try:
            return AggregatedContent.from_dict(raw)
        except ValueError as e:
            logger.warning(f"Discarding unusable cache entry '{key}': {e}")
            return None
