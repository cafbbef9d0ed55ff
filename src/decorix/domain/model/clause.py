"""Clause and clause group entities collected by the interceptor."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decorix.domain.model.invocation import DecoratorInvocation
    from decorix.domain.model.location import Location


@dataclass(frozen=True, slots=True)
class Pattern:
    """Literal pattern on one parameter (from a Literal[...] annotation).

    Attributes:
        param: Parameter name the pattern applies to
        values: Accepted constant values (matches if any is equal)
    """

    param: str
    values: tuple[object, ...]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.param:
            raise ValueError("pattern param must not be empty")
        if not self.values:
            raise ValueError("pattern must accept at least one value")


@dataclass(frozen=True, slots=True)
class Clause:
    """One function definition and the annotations collected for it.

    Attributes:
        node: The definition statement (annotations already stripped)
        explicit: Invocations from @decorate(...), top to bottom
        scoped: Invocations of the decorate_all chain active at the definition
        guard: Expression of @when(...), None if absent
        patterns: Literal patterns of the parameters; only read for groups
            that dispatch (several clauses, a head or a guard)
        location: Position of the definition
        class_name: Enclosing class path, None at module level
        is_head: Body-less head carrying the signature of a clause group
    """

    node: ast.FunctionDef | ast.AsyncFunctionDef
    explicit: tuple[DecoratorInvocation, ...]
    scoped: tuple[DecoratorInvocation, ...]
    guard: ast.expr | None
    patterns: tuple[Pattern, ...]
    location: Location
    class_name: str | None = None
    is_head: bool = False

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def arity(self) -> int:
        """Number of parameters, *args and **kwargs included."""
        args = self.node.args
        count = len(args.posonlyargs) + len(args.args) + len(args.kwonlyargs)
        if args.vararg is not None:
            count += 1
        if args.kwarg is not None:
            count += 1
        return count

    @property
    def chain(self) -> tuple[DecoratorInvocation, ...]:
        """Scope chain followed by the explicit annotations."""
        return self.scoped + self.explicit

    @property
    def is_async(self) -> bool:
        return isinstance(self.node, ast.AsyncFunctionDef)

    @property
    def is_conditional(self) -> bool:
        """Clause only matches some arguments (guard or patterns)."""
        return self.guard is not None or bool(self.patterns)

    @property
    def params_text(self) -> str:
        """Literal parameter text, e.g. "(n: Literal[0])"."""
        return f"({ast.unparse(self.node.args)})"


@dataclass(frozen=True, slots=True)
class ClauseGroup:
    """Consecutive definitions sharing one name and arity.

    Attributes:
        clauses: Clauses with a body, in source order
        head: Optional head preceding the clauses
    """

    clauses: tuple[Clause, ...]
    head: Clause | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.clauses:
            raise ValueError("clause group must contain at least one clause")

        signature = (self.clauses[0].name, self.clauses[0].arity)
        members = self.clauses if self.head is None else (self.head, *self.clauses)
        for clause in members:
            if (clause.name, clause.arity) != signature:
                raise ValueError(
                    f"clause {clause.name}/{clause.arity} does not belong to "
                    f"group {signature[0]}/{signature[1]}"
                )

        if any(clause.is_head for clause in self.clauses):
            raise ValueError("head must not be listed among clauses")

    @property
    def name(self) -> str:
        return self.clauses[0].name

    @property
    def arity(self) -> int:
        return self.clauses[0].arity

    @property
    def is_decorated(self) -> bool:
        """Any member carries a decorator chain."""
        if self.head is not None and self.head.chain:
            return True
        return any(clause.chain for clause in self.clauses)

    @property
    def needs_dispatch(self) -> bool:
        """Group must be emitted as guarded branches instead of in place."""
        return (
            len(self.clauses) > 1
            or self.head is not None
            or any(clause.is_conditional for clause in self.clauses)
        )

    @property
    def is_passthrough(self) -> bool:
        """Nothing to expand: emitted exactly as written."""
        if self.is_decorated:
            return False
        return not any(clause.is_conditional for clause in self.clauses)
