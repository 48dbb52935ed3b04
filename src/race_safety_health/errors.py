"""Error taxonomy for the race safety engine."""

from __future__ import annotations


class RaceSafetyError(Exception):
    """Base class for engine errors."""


class ValidationError(RaceSafetyError, ValueError):
    """Input that cannot be clamped into a valid value (unknown domain, status, segment)."""


class NotFoundError(RaceSafetyError, KeyError):
    """An explicit lookup referenced a missing record."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"Unknown {kind} {key!r}")
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return self.args[0]


class PersistenceError(RaceSafetyError):
    """State could not be loaded or saved."""
