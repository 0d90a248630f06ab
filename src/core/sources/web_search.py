#!/usr/bin/env python3
"""
Web search source (SerpAPI organic results).

Docs: https://serpapi.com/search-api
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..exceptions import SourceParseError
from ..http_client import RetryingHttpClient
from ..models.article import parse_datetime_safe
from .base import QuerySource

logger = logging.getLogger(__name__)


class WebSearchSource(QuerySource):
    """Search-results API adapter."""

    name = "serpapi"

    def __init__(self,
                 http_client: RetryingHttpClient,
                 api_key: Optional[str],
                 url: str = "https://serpapi.com/search.json",
                 num_results: int = 5):
        super().__init__(http_client, api_key)
        self.url = url
        self.num_results = num_results

    @property
    def endpoint(self) -> str:
        return self.url

    def build_params(self, query: str) -> Dict[str, Any]:
        return {
            'q': query,
            'api_key': self.api_key,
            'num': self.num_results,
            'engine': 'google'
        }

    def extract_results(self, payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, dict):
            error = SourceParseError(self.name, "search response", ValueError("body is not an object"))
            logger.error(error.message, extra={'error': error.to_dict()})
            return None
        if payload.get('error'):
            logger.error(f"{self.name}: API error: {payload['error']}")
            return None
        # A query with no hits simply omits organic_results
        results = payload.get('organic_results', [])
        if not isinstance(results, list):
            error = SourceParseError(self.name, "organic_results", ValueError("not a list"))
            logger.error(error.message, extra={'error': error.to_dict()})
            return None
        return results

    def _extract_url(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('link') or '').strip()

    def _extract_summary(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('snippet') or '').strip()

    def _extract_source(self, raw_article: Dict[str, Any]) -> str:
        source = str(raw_article.get('source') or '').strip()
        if source:
            return source
        host = urlparse(self._extract_url(raw_article)).netloc
        return host[4:] if host.startswith('www.') else host

    def _extract_published_date(self, raw_article: Dict[str, Any]) -> Optional[datetime]:
        # SerpAPI dates are display strings ("3 days ago", "Mar 4, 2025"); keep what parses.
        return parse_datetime_safe(raw_article.get('date'))
