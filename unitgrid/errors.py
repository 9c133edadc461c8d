"""Exceptions raised by the targeting engine."""
from __future__ import annotations

from typing import Iterable, Optional


class TargetingError(Exception):
    """Base class for every targeting engine failure."""


class InvalidCoordinate(TargetingError, ValueError):
    """A catalog lookup fell outside the declared building layout."""

    def __init__(self, message: str, section: Optional[int] = None,
                 floor: Optional[int] = None, riser: Optional[int] = None) -> None:
        super().__init__(message)
        self.section = section
        self.floor = floor
        self.riser = riser


class DevelopmentNotActive(TargetingError, RuntimeError):
    """A selection mutation targeted a development that was never activated."""

    def __init__(self, development_id: str) -> None:
        super().__init__(f"development {development_id!r} is not active; activate it first")
        self.development_id = development_id


class UnknownUnitReference(TargetingError, ValueError):
    """A persisted rule references unit ids missing from the catalog."""

    def __init__(self, development_id: str, unit_ids: Iterable[str]) -> None:
        self.development_id = development_id
        self.unit_ids = sorted(unit_ids)
        super().__init__(
            f"unknown unit ids for development {development_id!r}: {', '.join(self.unit_ids)}"
        )


class UnknownDevelopment(TargetingError, KeyError):
    """A development has no catalog or is outside the session's browsable set."""

    def __init__(self, development_id: str, reason: str = "is not available in this session") -> None:
        self.development_id = development_id
        self.message = f"development {development_id!r} {reason}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
