#!/usr/bin/env python3
"""
Trend keyword extraction.

Scans a fixed vocabulary of domain terms against article text and ranks
the terms by how many articles mention them. The vocabulary's declared
order breaks ties, so the result is fully deterministic.
"""

import re
from typing import Dict, Iterable, List, Pattern, Sequence, Tuple

from ..models.article import Article
from ..models.content import MAX_TRENDS

TREND_VOCABULARY: Tuple[str, ...] = (
    "AI",
    "Generative AI",
    "LLM",
    "Agents",
    "Machine Learning",
    "Deep Learning",
    "MLOps",
    "Data",
    "Analytics",
    "Python",
    "Open Source",
    "Cloud",
    "Kubernetes",
    "Serverless",
    "DevOps",
    "Automation",
    "Security",
    "Privacy",
    "API",
    "Microservices",
    "Testing",
    "Rust",
    "Regulation",
)


def _term_pattern(term: str) -> Pattern:
    # Whole-word match with an optional plural, so "AI" does not hit "said"
    # but "LLM" still hits "LLMs".
    return re.compile(r'(?<![a-z0-9])' + re.escape(term.lower()) + r's?(?![a-z0-9])')


class TrendExtractor:
    """Counts vocabulary terms across a set of articles."""

    def __init__(self, vocabulary: Sequence[str] = TREND_VOCABULARY, limit: int = MAX_TRENDS):
        self.vocabulary = tuple(vocabulary)
        self.limit = limit
        self._patterns = [(term, _term_pattern(term)) for term in self.vocabulary]

    def count_terms(self, articles: Iterable[Article]) -> Dict[str, int]:
        """Number of articles whose title+summary mentions each term."""
        counts = {term: 0 for term in self.vocabulary}
        for article in articles:
            text = article.search_text
            for term, pattern in self._patterns:
                if pattern.search(text):
                    counts[term] += 1
        return counts

    def extract(self, articles: Iterable[Article]) -> List[str]:
        """
        Top terms by descending count, ties broken by vocabulary order.

        Terms no article mentions are never returned.
        """
        counts = self.count_terms(articles)
        ranked = sorted(
            ((term, counts[term], position) for position, term in enumerate(self.vocabulary) if counts[term] > 0),
            key=lambda item: (-item[1], item[2])
        )
        return [term for term, _, _ in ranked[:self.limit]]


def extract_trends(articles: Iterable[Article], vocabulary: Sequence[str] = TREND_VOCABULARY) -> List[str]:
    """Convenience wrapper around TrendExtractor with the default limit."""
    return TrendExtractor(vocabulary).extract(articles)
