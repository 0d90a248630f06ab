#!/usr/bin/env python3
"""
Command endpoints for the lesson pipeline.

Each major functionality is handled by a dedicated command class.
"""

from typing import Dict, Type
from .base import BaseCommand
from .lesson import LessonCommand
from .history import HistoryCommand
from .cache import CacheCommand
from .integrations import IntegrationsCommand

# Command registry for easy extension
COMMANDS: Dict[str, Type[BaseCommand]] = {
    'lesson': LessonCommand,
    'history': HistoryCommand,
    'cache': CacheCommand,
    'integrations': IntegrationsCommand,
}


def get_command(command_name: str, container=None) -> BaseCommand:
    """Get a command instance by name."""
    if command_name not in COMMANDS:
        available = ', '.join(COMMANDS.keys())
        raise ValueError(f"Unknown command '{command_name}'. Available: {available}")

    command_class = COMMANDS[command_name]
    return command_class(container)

