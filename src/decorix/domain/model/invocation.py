"""Decorator declaration and invocation value objects."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from decorix.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class DecoratorDeclaration:
    """Valid decorator of a defining module.

    Attributes:
        name: Decorator name (Python identifier)
        arity: Number of compile-time arguments (>= 0)
    """

    name: str
    arity: int

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.name.isidentifier():
            raise ValueError(f"decorator name must be an identifier, got {self.name!r}")
        if not isinstance(self.arity, int) or isinstance(self.arity, bool):
            raise TypeError(f"arity must be int, got {type(self.arity).__name__}")
        if self.arity < 0:
            raise ValueError(f"arity must be >= 0, got {self.arity}")

    def __str__(self) -> str:
        """Format as name/arity."""
        return f"{self.name}/{self.arity}"


@dataclass(frozen=True, slots=True)
class DecoratorInvocation:
    """One decorator applied to a clause, as written in the annotation.

    Attributes:
        module: Decorator-defining module name
        name: Decorator name
        arguments: Compile-time argument nodes, in source order
        location: Annotation site
        stub: Resolved decorator stub that performs the expansion
    """

    module: str
    name: str
    arguments: tuple[ast.expr, ...]
    location: Location
    stub: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.module:
            raise ValueError("invocation module must not be empty")
        if not self.name:
            raise ValueError("invocation name must not be empty")
        if self.location is None:
            raise TypeError("location must not be None")

    @property
    def arity(self) -> int:
        """Number of compile-time arguments."""
        return len(self.arguments)

    @property
    def signature(self) -> str:
        """Fully qualified signature, e.g. "pkg.tracing.tag/1"."""
        return f"{self.module}.{self.name}/{self.arity}"
