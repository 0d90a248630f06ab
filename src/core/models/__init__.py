#!/usr/bin/env python3
"""
Core data models for the lesson pipeline.

Contains all data structures used throughout the application.
"""

from .article import Article
from .content import AggregatedContent, Insight
from .lesson import Lesson, LessonSection
from .metrics import RunRecord, TrackOutcome
from .result import Success, Failure, GenerationFailure

__all__ = [
    'Article', 'AggregatedContent', 'Insight', 'Lesson', 'LessonSection',
    'RunRecord', 'TrackOutcome', 'Success', 'Failure', 'GenerationFailure'
]
