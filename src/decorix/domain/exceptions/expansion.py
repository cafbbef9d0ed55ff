"""Expansion pass exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from decorix.domain.exceptions.base import DecorixError

if TYPE_CHECKING:
    from pathlib import Path

    from decorix.domain.model.location import Location


class ExpansionError(DecorixError):
    """Error while expanding a module.

    Attributes:
        path: Source file being expanded
        reason: Why expansion failed
    """

    def __init__(self, path: Path, reason: str) -> None:
        # FAIL-FIRST: validate required parameters
        if path is None:
            raise TypeError("path must not be None")
        if not reason:
            raise ValueError("reason must be non-empty string")

        self.path = path
        self.reason = reason
        super().__init__(f"Failed to expand {path}: {reason}")


class AnnotationError(ExpansionError):
    """Marker used where the expansion pass cannot honour it.

    Attributes:
        path: Source file being expanded
        location: Location of the offending marker
        reason: What is wrong with it
    """

    def __init__(self, path: Path, location: Location, reason: str) -> None:
        if location is None:
            raise TypeError("location must not be None")

        self.location = location
        super().__init__(path, f"{reason} at {location}")


class ClauseDefinitionError(ExpansionError):
    """Clauses of one function cannot be combined into a single dispatcher.

    Attributes:
        path: Source file being expanded
        location: Location of the offending clause
        reason: Why the clause group is invalid
    """

    def __init__(self, path: Path, location: Location, reason: str) -> None:
        if location is None:
            raise TypeError("location must not be None")

        self.location = location
        super().__init__(path, f"{reason} at {location}")
