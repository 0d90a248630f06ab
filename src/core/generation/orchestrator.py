#!/usr/bin/env python3
"""
Two-tier lesson generation.

Tier one composes from live aggregated content. If anything in that tier
fails, tier two composes once from curated content, bypassing the cache
and every source. If that fails too the track is given up for the run.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Union

from ..aggregation.aggregator import ContentAggregator
from ..aggregation.fallback import curated_content
from ..models.lesson import Lesson
from ..models.result import Success, Failure, GenerationFailure, Result
from ..tracks import Track
from .composer import LessonComposer

logger = logging.getLogger(__name__)

GenerationResult = Union[Success, GenerationFailure]


class LessonOrchestrator:
    """Runs live generation with a single curated-content retry."""

    def __init__(self, aggregator: ContentAggregator, composer: LessonComposer):
        self.aggregator = aggregator
        self.composer = composer

    def generate(self, track: Track, subtopic: str, level: str, lesson_date: date) -> GenerationResult:
        """
        Generate a lesson for one track.

        Args:
            track: Track to generate for
            subtopic: Today's subtopic
            level: Difficulty level
            lesson_date: Date the lesson is for

        Returns:
            Success(Lesson), or GenerationFailure carrying both tiers' causes
        """
        primary = self._live_tier(track, subtopic, level, lesson_date)
        if primary.ok:
            return primary

        logger.warning(f"Live generation failed for '{track.name}' ({primary.describe()}), retrying with curated content")
        fallback = self.composer.compose(track, subtopic, level, lesson_date, curated_content(track.name))
        if fallback.ok:
            return Success(self._mark_fallback(fallback.value))

        failure = GenerationFailure(track=track.name, primary=primary, fallback=fallback)
        logger.error(f"Lesson generation abandoned for '{track.name}': {failure.describe()}")
        return failure

    def _live_tier(self, track: Track, subtopic: str, level: str, lesson_date: date) -> Result:
        try:
            content = self.aggregator.get_content(track)
        except Exception as e:
            logger.error(f"Content aggregation failed for '{track.name}': {e}", exc_info=True)
            return Failure(cause=e, stage="aggregation")
        return self.composer.compose(track, subtopic, level, lesson_date, content)

    @staticmethod
    def _mark_fallback(lesson: Lesson) -> Lesson:
        return lesson if lesson.used_fallback else replace(lesson, used_fallback=True)
