#!/usr/bin/env python3
"""
JSON validation for composed lessons.

Validates composition API output against the expected lesson shape and
turns it into a Lesson.
"""

import json
import logging
from datetime import date
from typing import Dict, Any, List

from ..exceptions import CompositionValidationError
from ..models.lesson import Lesson, LessonSection

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ('title', 'hook', 'sections', 'tags')


def count_words(*texts: str) -> int:
    """Total whitespace-separated words across the given texts."""
    return sum(len(text.split()) for text in texts if text)


class LessonValidator:
    """Validates lesson JSON output from the composition API."""

    @staticmethod
    def validate_and_parse(raw_output: str) -> Dict[str, Any]:
        """
        Parse and validate raw model output.

        Args:
            raw_output: Raw string output from the model

        Returns:
            Validated lesson dict

        Raises:
            CompositionValidationError: If the output is not a usable lesson
        """
        if raw_output is None or not str(raw_output).strip():
            raise CompositionValidationError(["empty response"])

        try:
            data = json.loads(raw_output.strip())
        except json.JSONDecodeError:
            json_str = LessonValidator._extract_json(raw_output)
            try:
                data = json.loads(json_str)
            except json.JSONDecodeError as e:
                logger.error(f"JSON parsing failed: {e}")
                logger.error(f"First 300 chars: {repr(json_str[:300])}")
                raise CompositionValidationError([f"invalid JSON: {e}"])

        problems = LessonValidator._check_shape(data)
        if problems:
            raise CompositionValidationError(problems)
        return data

    @staticmethod
    def _extract_json(raw_output: str) -> str:
        """Extract a JSON object from mixed text or a fenced code block."""
        text = raw_output.replace('```json', '').replace('```', '')
        start_idx = text.find('{')
        end_idx = text.rfind('}')
        if start_idx != -1 and end_idx > start_idx:
            return text[start_idx:end_idx + 1].strip()
        return text.strip()

    @staticmethod
    def _check_shape(data: Any) -> List[str]:
        if not isinstance(data, dict):
            return [f"expected a JSON object, got {type(data).__name__}"]

        problems = [f"missing key '{key}'" for key in REQUIRED_KEYS if key not in data]
        if problems:
            return problems

        if not isinstance(data['title'], str) or not data['title'].strip():
            problems.append("'title' must be a non-empty string")
        if not isinstance(data['hook'], str):
            problems.append("'hook' must be a string")
        if 'action_item' in data and not isinstance(data['action_item'], str):
            problems.append("'action_item' must be a string")

        sections = data['sections']
        if not isinstance(sections, list) or not sections:
            problems.append("'sections' must be a non-empty list")
        else:
            for i, section in enumerate(sections):
                if not isinstance(section, dict):
                    problems.append(f"section {i} must be an object")
                elif not isinstance(section.get('heading'), str) or not isinstance(section.get('body'), str):
                    problems.append(f"section {i} needs string 'heading' and 'body'")

        tags = data['tags']
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            problems.append("'tags' must be a list of strings")

        return problems

    @staticmethod
    def build_lesson(data: Dict[str, Any],
                     lesson_date: date,
                     track: str,
                     subtopic: str,
                     level: str,
                     used_fallback: bool = False) -> Lesson:
        """Build a Lesson from validated output."""
        sections = tuple(
            LessonSection(heading=section['heading'].strip(), body=section['body'].strip())
            for section in data['sections']
        )
        action_item = (data.get('action_item') or '').strip()
        word_count = count_words(
            data['title'], data['hook'], action_item,
            *[f"{section.heading} {section.body}" for section in sections]
        )
        return Lesson(
            date=lesson_date,
            track=track,
            subtopic=subtopic,
            level=level,
            title=data['title'].strip(),
            hook=data['hook'].strip(),
            sections=sections,
            action_item=action_item,
            tags=tuple(tag.strip().lower() for tag in data['tags'] if tag.strip()),
            word_count=word_count,
            used_fallback=used_fallback
        )
