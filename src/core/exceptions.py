#!/usr/bin/env python3
"""
Standardized exception hierarchy for the lesson pipeline.

Provides specific exception types for different error conditions with
error context. Most pipeline tiers report these as failure causes inside
result values rather than raising them across component boundaries.
"""

from typing import Optional, Dict, Any


class LessonPipelineError(Exception):
    """Base exception for all lesson pipeline errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Source-related exceptions
class SourceError(LessonPipelineError):
    """Base exception for article source errors."""
    pass


class SourceParseError(SourceError):
    """Failed to parse a response body from an article source."""

    def __init__(self, source_name: str, parse_stage: str, original_error: Exception):
        message = f"Failed to parse {parse_stage} from {source_name}"
        context = {
            'source_name': source_name,
            'parse_stage': parse_stage,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Composition-related exceptions
class CompositionError(LessonPipelineError):
    """The composition API call failed."""

    def __init__(self, provider: str, model: str, original_error: Exception):
        message = f"Composition error from {provider} ({model}): {original_error}"
        context = {
            'provider': provider,
            'model': model,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class CompositionValidationError(LessonPipelineError):
    """The composition API returned an unusable structured response."""

    def __init__(self, problems: list):
        message = f"Lesson response validation failed: {'; '.join(problems)}"
        context = {'problems': list(problems)}
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(LessonPipelineError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


# Delivery and persistence exceptions
class DeliveryError(LessonPipelineError):
    """Sending a lesson or a report failed."""

    def __init__(self, channel: str, original_error: Exception):
        message = f"Delivery via {channel} failed: {original_error}"
        context = {
            'channel': channel,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class HistoryError(LessonPipelineError):
    """Reading or appending the lesson history failed."""

    def __init__(self, operation: str, path: str, original_error: Exception):
        message = f"History {operation} failed for {path}"
        context = {
            'operation': operation,
            'path': path,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


def describe_error(error: Optional[BaseException]) -> str:
    """Short one-line description of a failure cause for reports."""
    if error is None:
        return "unknown error"
    if isinstance(error, LessonPipelineError):
        return f"{error.error_code}: {error.message}"
    return f"{error.__class__.__name__}: {error}"
