#!/usr/bin/env python3
"""
Curated fallback content.

Hand-authored trends and insights used when live acquisition yields no
articles, and by the orchestrator's second generation tier.
"""

from typing import Dict, List, Tuple

from ..models.content import AggregatedContent, Insight

CURATED_TRENDS: Dict[str, Tuple[str, ...]] = {
    "Data Science & ML": ("AutoML", "Explainable AI (XAI)", "Edge ML"),
    "Software Engineering": ("AI pair programming", "Platform engineering", "Memory-safe languages"),
    "Cloud & DevOps": ("FinOps", "GitOps", "Serverless containers"),
}

DEFAULT_CURATED_TRENDS: Tuple[str, ...] = ("Automation", "AI assistants", "Open source tooling")

GENERIC_INSIGHTS: Tuple[Insight, ...] = (
    Insight(
        headline="Fundamentals outlast tooling trends",
        takeaway="Frameworks change every year; the concepts underneath them transfer from one to the next.",
        source="Curated"
    ),
    Insight(
        headline="Small daily practice compounds",
        takeaway="Ten focused minutes a day builds more lasting skill than an occasional marathon session.",
        source="Curated"
    ),
    Insight(
        headline="Learning sticks when you build something",
        takeaway="Applying a new idea to a tiny project is the fastest way to find the gaps in your understanding.",
        source="Curated"
    ),
)


def curated_trends(track_name: str) -> List[str]:
    """Static trend list for a track, or the generic default set."""
    return list(CURATED_TRENDS.get(track_name, DEFAULT_CURATED_TRENDS))


def curated_content(track_name: str) -> AggregatedContent:
    """Fallback content with the same shape as live aggregated content."""
    return AggregatedContent(
        trends=curated_trends(track_name),
        insights=list(GENERIC_INSIGHTS),
        is_fallback=True
    )
