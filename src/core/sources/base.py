#!/usr/bin/env python3
"""
Base classes for article sources.

Defines the single capability every source adapter provides: fetch
articles for a query (a search term or a feed URL) and return them in the
common Article shape, or None when the source could not contribute.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Dict, Any, Optional

import requests

from ..exceptions import SourceParseError
from ..http_client import RetryingHttpClient
from ..models.article import Article, parse_datetime_safe

logger = logging.getLogger(__name__)


class ArticleSource(ABC):
    """
    Abstract base class for all article sources.

    Implementations must never raise for network or parse problems; they
    log the problem and return None so other sources can still contribute.
    """

    name = "source"

    def __init__(self, http_client: RetryingHttpClient):
        """
        Initialize article source.

        Args:
            http_client: Retrying HTTP client shared by all sources
        """
        self.http = http_client

    @abstractmethod
    def fetch_articles(self, query: str) -> Optional[List[Article]]:
        """
        Fetch articles for a query.

        Args:
            query: Search term, or feed URL for feed-based sources

        Returns:
            Normalized articles, or None if the source was skipped or failed
        """
        pass

    def normalize_article(self, raw_article: Dict[str, Any]) -> Optional[Article]:
        """
        Normalize raw article data to the common shape.

        Args:
            raw_article: Source-specific article data

        Returns:
            Article, or None if the record has no title or URL
        """
        title = self._extract_title(raw_article)
        url = self._extract_url(raw_article)
        if not title or not url:
            return None
        return Article(
            title=title,
            url=url,
            source=self._extract_source(raw_article),
            summary=self._extract_summary(raw_article),
            published=self._extract_published_date(raw_article)
        )

    def normalize_all(self, raw_articles: List[Any]) -> List[Article]:
        """Normalize a list of raw records, skipping unusable ones."""
        articles = []
        for raw_article in raw_articles:
            if not isinstance(raw_article, dict):
                logger.debug(f"{self.name}: skipping non-object result {raw_article!r}")
                continue
            article = self.normalize_article(raw_article)
            if article is not None:
                articles.append(article)
        return articles

    def _extract_title(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('title') or '').strip()

    def _extract_url(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('url') or '').strip()

    def _extract_source(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('source') or '').strip()

    def _extract_summary(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('summary') or '').strip()

    def _extract_published_date(self, raw_article: Dict[str, Any]) -> Optional[datetime]:
        return parse_datetime_safe(raw_article.get('published'))

    def _parse_json(self, response: requests.Response, stage: str) -> Optional[Any]:
        """Decode a JSON body, logging and returning None when malformed."""
        try:
            return response.json()
        except ValueError as e:
            error = SourceParseError(self.name, stage, e)
            logger.error(error.message, extra={'error': error.to_dict()})
            return None


class QuerySource(ArticleSource):
    """
    Base for keyword-driven API sources that need a credential.

    Without a credential the source is skipped: it logs a warning and
    returns None without touching the network.
    """

    def __init__(self, http_client: RetryingHttpClient, api_key: Optional[str]):
        super().__init__(http_client)
        self.api_key = api_key

    def fetch_articles(self, query: str) -> Optional[List[Article]]:
        if not self.api_key:
            logger.warning(f"{self.name}: no API key configured, skipping query '{query}'")
            return None

        response = self.http.get(self.endpoint, params=self.build_params(query))
        if response is None:
            logger.warning(f"{self.name}: no response for query '{query}'")
            return None

        payload = self._parse_json(response, "search response")
        if payload is None:
            return None

        raw_articles = self.extract_results(payload)
        if raw_articles is None:
            return None

        articles = self.normalize_all(raw_articles)
        logger.info(f"{self.name}: {len(articles)} articles for '{query}'")
        return articles

    @property
    @abstractmethod
    def endpoint(self) -> str:
        pass

    @abstractmethod
    def build_params(self, query: str) -> Dict[str, Any]:
        """Query-string parameters for one search request."""
        pass

    @abstractmethod
    def extract_results(self, payload: Any) -> Optional[List[Any]]:
        """Pull the raw result list out of a decoded body, or None if malformed."""
        pass
