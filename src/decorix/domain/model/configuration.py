"""Expansion pass configuration."""

from __future__ import annotations

import keyword
from dataclasses import dataclass

DEFAULT_REFLECTION_FUNCTION = "__decorated_functions__"


@dataclass(frozen=True, slots=True)
class ExpansionConfig:
    """Configuration of one expansion pass.

    Immutable configuration object with FAIL-FIRST validation.
    All fields have defaults; the plugin and the import hook build one
    from their own settings.

    Attributes:
        reflection_function: Name of the zero-argument query function
            added to modules that decorate at least one function.
        emit_override_boundaries: Emit a separator function between
            consecutive override declarations of one signature.
    """

    reflection_function: str = DEFAULT_REFLECTION_FUNCTION
    emit_override_boundaries: bool = True

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.reflection_function.isidentifier():
            raise ValueError(
                f"reflection_function must be an identifier, got {self.reflection_function!r}"
            )
        if keyword.iskeyword(self.reflection_function):
            raise ValueError(
                f"reflection_function must not be a keyword: {self.reflection_function}"
            )
        if not isinstance(self.emit_override_boundaries, bool):
            raise TypeError("emit_override_boundaries must be bool")
