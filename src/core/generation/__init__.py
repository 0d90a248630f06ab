#!/usr/bin/env python3
"""
Lesson generation: prompts, schema, validation, composition and the
two-tier orchestrator.
"""

from .composer import LessonComposer
from .orchestrator import LessonOrchestrator, GenerationResult
from .prompts import LessonPrompts
from .schemas import LESSON_SCHEMA, get_schema_by_type
from .validator import LessonValidator, count_words

__all__ = [
    'LessonComposer', 'LessonOrchestrator', 'GenerationResult', 'LessonPrompts',
    'LESSON_SCHEMA', 'get_schema_by_type', 'LessonValidator', 'count_words'
]
