#!/usr/bin/env python3
"""
Explicit success/failure result values.

Each tier of lesson generation returns one of these instead of raising,
so the orchestrator can decide whether to escalate to the next fallback
tier by inspecting the value.
"""

from typing import Any, Generic, Optional, TypeVar, Union
from dataclasses import dataclass

from ..exceptions import describe_error

T = TypeVar('T')


@dataclass(frozen=True)
class Success(Generic[T]):
    """A tier produced a value."""
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Failure:
    """A tier failed; ``cause`` says why."""
    cause: BaseException
    stage: str = ""
    ok: bool = False

    def describe(self) -> str:
        prefix = f"[{self.stage}] " if self.stage else ""
        return prefix + describe_error(self.cause)


Result = Union[Success[Any], Failure]


@dataclass(frozen=True)
class GenerationFailure:
    """Both generation tiers failed for a track."""
    track: str
    primary: Failure
    fallback: Optional[Failure] = None
    ok: bool = False

    def describe(self) -> str:
        fallback_text = self.fallback.describe() if self.fallback else "not attempted"
        return f"primary: {self.primary.describe()} | fallback: {fallback_text}"
