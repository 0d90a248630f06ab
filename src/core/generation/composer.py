#!/usr/bin/env python3
"""
Lesson composition.

Sends the lesson prompt to the composition API and validates what comes
back. Every outcome is returned as a Success or Failure value.
"""

import logging
from datetime import date
from typing import Any, Dict

from ..models.content import AggregatedContent
from ..models.result import Success, Failure, Result
from ..tracks import Track
from .prompts import LessonPrompts
from .schemas import get_schema_by_type
from .validator import LessonValidator

logger = logging.getLogger(__name__)


class LessonComposer:
    """Turns aggregated content into a Lesson via a structured-output client."""

    def __init__(self, client: Any):
        """
        Initialize composer.

        Args:
            client: Object with ``complete_structured(messages, schema, schema_name) -> str``
                (see integrations.openai_client.OpenAIClient)
        """
        self.client = client

    def build_messages(self, track: Track, subtopic: str, level: str, content: AggregatedContent) -> list:
        prompt = LessonPrompts.get_lesson_prompt(track.name, subtopic, level, content)
        return [
            {"role": "system", "content": LessonPrompts.SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

    def compose(self,
                track: Track,
                subtopic: str,
                level: str,
                lesson_date: date,
                content: AggregatedContent) -> Result:
        """
        Compose one lesson.

        Args:
            track: Track the lesson belongs to
            subtopic: Today's subtopic
            level: Difficulty level
            lesson_date: Date the lesson is for
            content: Trends and insights to ground the lesson in

        Returns:
            Success(Lesson) or Failure with the cause
        """
        messages = self.build_messages(track, subtopic, level, content)
        schema: Dict[str, Any] = get_schema_by_type("lesson")

        try:
            raw_output = self.client.complete_structured(messages, schema, "lesson")
        except Exception as e:
            logger.error(f"Composition failed for '{track.name}': {e}")
            return Failure(cause=e, stage="composition")

        try:
            data = LessonValidator.validate_and_parse(raw_output)
        except Exception as e:
            logger.error(f"Composed lesson for '{track.name}' is invalid: {e}")
            return Failure(cause=e, stage="validation")

        lesson = LessonValidator.build_lesson(
            data,
            lesson_date=lesson_date,
            track=track.name,
            subtopic=subtopic,
            level=level,
            used_fallback=content.is_fallback
        )
        logger.info(f"Composed '{lesson.title}' ({lesson.word_count} words) for '{track.name}'")
        return Success(lesson)
