"""Typed errors surfaced to callers of the resolution core.

Expected "does not apply" situations never raise: handlers return ``None``.
The classes below cover the genuine failure modes, which abort the whole hit
so that nothing is partially committed.
"""

from __future__ import annotations

__all__ = [
    "ResolutionError",
    "UnknownWeaponError",
    "UnknownModError",
    "UnknownEntityError",
    "InvalidStatStateError",
]


class ResolutionError(Exception):
    """Base class for every error raised while resolving a hit."""


class _UnknownNameError(ResolutionError, KeyError):
    kind = "entry"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown {self.kind} '{self.name}' in static tables"


class UnknownWeaponError(_UnknownNameError):
    """Raised when a weapon name is missing from the weapon table."""

    kind = "weapon"


class UnknownModError(_UnknownNameError):
    """Raised when an installed modification is missing from the mod table."""

    kind = "modification"


class UnknownEntityError(_UnknownNameError):
    """Raised when an entity name is missing from the table or the roster."""

    kind = "entity"


class InvalidStatStateError(ResolutionError, ValueError):
    """Raised when an entity record holds contradictory values."""

    def __init__(self, entity: str, reason: str) -> None:
        self.entity = entity
        self.reason = reason
        super().__init__(f"Invalid state for '{entity}': {reason}")
