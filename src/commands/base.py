#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Services come from the dependency injection container.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from argparse import Namespace

from core.container import get_container
from core.exceptions import LessonPipelineError
from core.tracks import Track, select_tracks

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """Base class for all command endpoints."""

    subcommands: List[str] = []

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def cache(self):
        """Get aggregated content cache from container."""
        return self._container.get('cache')

    @property
    def history(self):
        """Get lesson history store from container."""
        return self._container.get('history')

    def resolve_tracks(self, names: Optional[List[str]]) -> List[Track]:
        """Tracks selected on the command line (all tracks when none given)."""
        return select_tracks(names, self.config.tracks)

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def unknown_subcommand(self, subcommand: str) -> int:
        available = ", ".join(self.subcommands)
        self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
        return 1

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        if isinstance(error, LessonPipelineError):
            self.logger.error(error_msg, extra={'error': error.to_dict()})
        else:
            self.logger.error(error_msg, exc_info=True)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130
        elif isinstance(error, FileNotFoundError):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        elif isinstance(error, (ValueError, KeyError)):
            return 22
        else:
            return 1
