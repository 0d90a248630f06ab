#!/usr/bin/env python3
"""
Keyword search source (NewsAPI "everything" endpoint).

Docs: https://newsapi.org/docs/endpoints/everything
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..exceptions import SourceParseError
from ..http_client import RetryingHttpClient
from ..models.article import parse_datetime_safe
from .base import QuerySource

logger = logging.getLogger(__name__)


class KeywordSearchSource(QuerySource):
    """Articles-by-keyword API adapter."""

    name = "newsapi"

    def __init__(self,
                 http_client: RetryingHttpClient,
                 api_key: Optional[str],
                 url: str = "https://newsapi.org/v2/everything",
                 language: str = "en",
                 page_size: int = 5):
        super().__init__(http_client, api_key)
        self.url = url
        self.language = language
        self.page_size = page_size

    @property
    def endpoint(self) -> str:
        return self.url

    def build_params(self, query: str) -> Dict[str, Any]:
        return {
            'q': query,
            'language': self.language,
            'pageSize': self.page_size,
            'sortBy': 'publishedAt',
            'apiKey': self.api_key
        }

    def extract_results(self, payload: Any) -> Optional[List[Any]]:
        # Error bodies look like {"status": "error", "code": ..., "message": ...}
        articles = payload.get('articles') if isinstance(payload, dict) else None
        if not isinstance(articles, list):
            detail = payload.get('message') if isinstance(payload, dict) else type(payload).__name__
            error = SourceParseError(self.name, "articles array", ValueError(f"missing articles: {detail}"))
            logger.error(error.message, extra={'error': error.to_dict()})
            return None
        return articles

    def _extract_summary(self, raw_article: Dict[str, Any]) -> str:
        return str(raw_article.get('description') or '').strip()

    def _extract_source(self, raw_article: Dict[str, Any]) -> str:
        source = raw_article.get('source')
        if isinstance(source, dict):
            return str(source.get('name') or '').strip()
        return str(source or '').strip()

    def _extract_published_date(self, raw_article: Dict[str, Any]) -> Optional[datetime]:
        return parse_datetime_safe(raw_article.get('publishedAt'))
