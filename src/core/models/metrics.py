#!/usr/bin/env python3
"""
Run metrics data models.

Contains data structures for tracking what a scheduled run produced.
"""

from datetime import datetime
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field


@dataclass
class TrackOutcome:
    """What happened to one track during a run."""
    track: str
    success: bool
    title: Optional[str] = None
    used_fallback: bool = False
    emailed: bool = False
    error_message: Optional[str] = None


@dataclass
class RunRecord:
    """Represents a single scheduled execution run."""
    run_id: str
    timestamp: datetime
    command_used: str
    outcomes: List[TrackOutcome] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def lessons_generated(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failures(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.success)

    @property
    def success(self) -> bool:
        return self.failures == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'run_id': self.run_id,
            'timestamp': self.timestamp.isoformat(),
            'command_used': self.command_used,
            'lessons_generated': self.lessons_generated,
            'failures': self.failures,
            'processing_time': self.processing_time,
            'outcomes': [outcome.__dict__.copy() for outcome in self.outcomes]
        }
