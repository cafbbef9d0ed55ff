"""Function context handed to every decorator implementation."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING

from decorix.domain.model.enums import FunctionKind, Visibility

if TYPE_CHECKING:
    from decorix.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class FunctionContext:
    """Read-only description of the clause being wrapped.

    Built fresh for every clause and passed unchanged to each decorator
    of its chain.

    Attributes:
        module: Name of the module defining the function
        name: Function name
        arity: Number of parameters (including *args/**kwargs)
        kind: FUNCTION or ASYNC_FUNCTION
        args: Parameter nodes in signature order
        visibility: Underscore-convention visibility of the name
        class_name: Enclosing class path ("Outer.Inner"), None at module level
        guard: Expression of the when() guard, None if unguarded
        location: Position of the definition
    """

    module: str
    name: str
    arity: int
    kind: FunctionKind
    args: tuple[ast.arg, ...]
    visibility: Visibility = Visibility.PUBLIC
    class_name: str | None = None
    guard: ast.expr | None = None
    location: Location | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.module:
            raise ValueError("context module must not be empty")
        if not self.name:
            raise ValueError("context name must not be empty")
        if self.arity != len(self.args):
            raise ValueError(f"arity {self.arity} does not match {len(self.args)} parameter nodes")

    @property
    def qualified_name(self) -> str:
        """module[.Class].name"""
        if self.class_name:
            return f"{self.module}.{self.class_name}.{self.name}"
        return f"{self.module}.{self.name}"

    @property
    def arg_names(self) -> tuple[str, ...]:
        """Parameter names in signature order."""
        return tuple(arg.arg for arg in self.args)

    @property
    def is_private(self) -> bool:
        return self.visibility is not Visibility.PUBLIC

    @property
    def is_guarded(self) -> bool:
        return self.guard is not None

    @property
    def is_method(self) -> bool:
        return self.class_name is not None

    @property
    def is_async(self) -> bool:
        return self.kind is FunctionKind.ASYNC_FUNCTION
