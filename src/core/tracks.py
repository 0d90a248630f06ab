#!/usr/bin/env python3
"""
Learning tracks.

A track is a named subject area with its own subtopics, search queries and
feed sources. Tracks are defined once at configuration time and never
change during a run.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Track:
    """A subject area that gets one lesson per run."""
    name: str
    subtopics: Tuple[str, ...]
    queries: Tuple[str, ...]
    feeds: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'subtopics', tuple(self.subtopics))
        object.__setattr__(self, 'queries', tuple(self.queries))
        object.__setattr__(self, 'feeds', tuple(self.feeds))
        if not self.name.strip():
            raise ValueError("Track name must not be empty")
        if not self.subtopics:
            raise ValueError(f"Track '{self.name}' needs at least one subtopic")

    @property
    def slug(self) -> str:
        """Lowercase identifier used in cache keys and CLI arguments."""
        return re.sub(r'[^a-z0-9]+', '-', self.name.lower()).strip('-')


DEFAULT_TRACKS: Tuple[Track, ...] = (
    Track(
        name="Data Science & ML",
        subtopics=(
            "Feature engineering",
            "Model evaluation metrics",
            "Gradient boosting",
            "Neural network basics",
            "Data cleaning pipelines",
            "Experiment tracking",
            "Time series forecasting",
        ),
        queries=("machine learning", "data science", "artificial intelligence"),
        feeds=(
            "https://machinelearningmastery.com/feed/",
            "https://www.kdnuggets.com/feed",
        ),
    ),
    Track(
        name="Software Engineering",
        subtopics=(
            "Writing testable code",
            "Code review practices",
            "Refactoring legacy code",
            "API design",
            "Dependency management",
            "Observability basics",
        ),
        queries=("software engineering", "programming best practices"),
        feeds=(
            "https://martinfowler.com/feed.atom",
            "https://stackoverflow.blog/feed/",
        ),
    ),
    Track(
        name="Cloud & DevOps",
        subtopics=(
            "Infrastructure as code",
            "Container orchestration",
            "CI/CD pipelines",
            "Cost optimization",
            "Incident response",
        ),
        queries=("cloud computing", "devops", "kubernetes"),
        feeds=(
            "https://aws.amazon.com/blogs/devops/feed/",
            "https://kubernetes.io/feed.xml",
        ),
    ),
)


def find_track(name_or_slug: str, tracks: Iterable[Track] = DEFAULT_TRACKS) -> Optional[Track]:
    """Look a track up by display name or slug (case-insensitive)."""
    wanted = name_or_slug.strip().lower()
    for track in tracks:
        if track.name.lower() == wanted or track.slug == wanted:
            return track
    return None


def select_tracks(names: Optional[List[str]], tracks: Iterable[Track] = DEFAULT_TRACKS) -> List[Track]:
    """
    Resolve CLI track names to Track objects.

    Raises:
        KeyError: If a name does not match any configured track
    """
    tracks = list(tracks)
    if not names or 'all' in names:
        return tracks
    selected = []
    for name in names:
        track = find_track(name, tracks)
        if track is None:
            available = ', '.join(t.slug for t in tracks)
            raise KeyError(f"Track '{name}' not found. Available: {available}")
        selected.append(track)
    return selected
