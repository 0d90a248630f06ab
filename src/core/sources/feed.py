#!/usr/bin/env python3
"""
Syndication feed source.

Fetches an RSS or Atom document and turns its newest entries into
articles. The query passed to fetch_articles is the feed URL.
"""

import calendar
import logging
import warnings
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import feedparser
from bs4 import BeautifulSoup
from urllib3.exceptions import InsecureRequestWarning

from ..exceptions import SourceParseError
from ..http_client import RetryingHttpClient
from ..models.article import Article
from .base import ArticleSource

logger = logging.getLogger(__name__)

DIALECT_RSS = "rss"    # <rss>/<rdf:RDF> root, <item> children
DIALECT_ATOM = "atom"  # <feed> root, <entry> children


def detect_dialect(feed: feedparser.FeedParserDict) -> Optional[str]:
    """
    Feed dialect from the parsed document's root element.

    feedparser records the root element it recognised in ``version``
    ('rss20', 'rss10', 'atom10', ...); an empty version means the root
    was not a feed element at all.
    """
    version = getattr(feed, 'version', '') or ''
    if version.startswith('rss'):
        return DIALECT_RSS
    if version.startswith('atom'):
        return DIALECT_ATOM
    return None


def strip_html(text: str) -> str:
    """Plain text of an HTML fragment, whitespace collapsed."""
    if not text:
        return ""
    if '<' not in text:
        return ' '.join(text.split())
    return ' '.join(BeautifulSoup(text, 'html.parser').get_text(' ').split())


class FeedSource(ArticleSource):
    """RSS/Atom feed reader."""

    name = "feed"

    def __init__(self,
                 http_client: RetryingHttpClient,
                 entry_limit: int = 5,
                 verify_tls: bool = False):
        """
        Initialize feed source.

        Args:
            http_client: Retrying HTTP client
            entry_limit: Maximum entries returned per feed
            verify_tls: Whether to verify certificates (many small blogs
                serve broken chains, so this is off by default)
        """
        super().__init__(http_client)
        self.entry_limit = entry_limit
        self.verify_tls = verify_tls

    def fetch_articles(self, query: str) -> Optional[List[Article]]:
        feed_url = query
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', InsecureRequestWarning)
            response = self.http.get(feed_url, allow_redirects=True, verify=self.verify_tls)

        if response is None:
            logger.warning(f"Feed {feed_url}: no response")
            return None

        return self.parse_document(response.content, feed_url)

    def parse_document(self, document: Any, feed_url: str) -> Optional[List[Article]]:
        """
        Parse a feed document into at most ``entry_limit`` articles.

        Returns:
            Articles (newest first), or None for a malformed document
        """
        try:
            feed = feedparser.parse(document)
        except Exception as e:
            error = SourceParseError(self.name, f"feed {feed_url}", e)
            logger.error(error.message, extra={'error': error.to_dict()})
            return None

        dialect = detect_dialect(feed)
        if dialect is None:
            cause = getattr(feed, 'bozo_exception', None) or ValueError("unrecognised root element")
            error = SourceParseError(self.name, f"feed {feed_url}", cause)
            logger.error(error.message, extra={'error': error.to_dict()})
            return None

        if feed.bozo:
            logger.warning(f"Feed parsing warning for {feed_url}: {feed.bozo_exception}")

        source_label = self._feed_label(feed, feed_url)
        entries = [entry for entry in feed.entries if str(entry.get('title') or '').strip()]
        entries = self._newest_first(entries)[:self.entry_limit]

        articles = []
        for entry in entries:
            article = self.normalize_article(self._entry_to_raw(entry, source_label))
            if article is not None:
                articles.append(article)

        logger.info(f"Feed {feed_url} ({dialect}): {len(articles)} articles")
        return articles

    def _entry_to_raw(self, entry: Any, source_label: str) -> Dict[str, Any]:
        summary = entry.get('summary') or ''
        if not summary and entry.get('content'):
            summary = entry['content'][0].get('value', '')
        return {
            'title': strip_html(entry.get('title', '')),
            'url': entry.get('link') or entry.get('id') or '',
            'source': source_label,
            'summary': strip_html(summary),
            'published': self._entry_datetime(entry)
        }

    @staticmethod
    def _entry_datetime(entry: Any) -> Optional[datetime]:
        parsed = entry.get('published_parsed') or entry.get('updated_parsed')
        if not parsed:
            return None
        try:
            return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
        except (OverflowError, ValueError, TypeError):
            return None

    def _newest_first(self, entries: List[Any]) -> List[Any]:
        """Sort by date, newest first; undated entries keep document order at the end."""
        dated = [(self._entry_datetime(entry), index, entry) for index, entry in enumerate(entries)]
        dated.sort(key=lambda item: (
            item[0] is None,
            -(item[0].timestamp()) if item[0] else 0,
            item[1]
        ))
        return [entry for _, _, entry in dated]

    @staticmethod
    def _feed_label(feed: Any, feed_url: str) -> str:
        title = strip_html(feed.feed.get('title', '')) if hasattr(feed, 'feed') else ''
        if title:
            return title
        host = urlparse(feed_url).netloc
        return host[4:] if host.startswith('www.') else host
