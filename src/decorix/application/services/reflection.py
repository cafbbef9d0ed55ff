"""Reflection accumulator: which decorators were applied to which clause."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, cast

from decorix.domain.model.reflection import AppliedDecorator
from decorix.infrastructure.analyzers.base import literal_value

if TYPE_CHECKING:
    from collections.abc import Iterable

    from decorix.domain.model.invocation import DecoratorInvocation
    from decorix.domain.model.reflection import ReflectionKey, ReflectionTable


@dataclass(slots=True)
class ReflectionAccumulator:
    """Module-scoped compile-time table of applied decorators.

    Keys are (function name, literal parameter text); clauses whose text
    differs never share an entry. Clauses of one signature written with
    identical text, such as a when() clause and its unguarded fallback both
    declared as ``(n)``, share one key: the later clause's chain replaces
    the earlier one's entry. Insertion order follows source order,
    so identical sources produce identical tables.

    Mutable - filled by the expansion engine, frozen at module end.

    Attributes:
        _entries: Key → applied decorators in chain order
    """

    _entries: dict[ReflectionKey, list[AppliedDecorator]] = field(default_factory=dict)

    def record(
        self,
        name: str,
        params_text: str,
        chain: Iterable[DecoratorInvocation],
    ) -> None:
        """Record the chain of an expanded clause.

        Raises:
            ValueError: If name is empty (FAIL-FIRST)
        """
        if not name:
            raise ValueError("name must not be empty")

        applied = [
            AppliedDecorator(
                module=invocation.module,
                name=invocation.name,
                arguments=tuple(literal_value(arg) for arg in invocation.arguments),
            )
            for invocation in chain
        ]
        if not applied:
            return
        # a later clause with identical parameter text replaces the earlier one
        self._entries[(name, params_text)] = applied

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def size(self) -> int:
        """Number of recorded clauses."""
        return len(self._entries)

    def freeze(self) -> ReflectionTable:
        """Immutable snapshot of the table."""
        return MappingProxyType({key: tuple(value) for key, value in self._entries.items()})

    def emit(self, function_name: str) -> ast.FunctionDef:
        """Zero-argument query function returning the table.

        Emitted as:

            def __decorated_functions__():
                from types import MappingProxyType
                return MappingProxyType({("f", "()"): (("mod", "tag", ("a",)),)})

        One entry per distinct (name, parameter text); see the class
        docstring for clauses declared with identical text.
        """
        keys: list[ast.expr | None] = []
        values: list[ast.expr] = []
        for (name, params_text), applied in self._entries.items():
            keys.append(_literal_node((name, params_text)))
            values.append(_literal_node(tuple(tuple(entry) for entry in applied)))

        node = ast.parse(
            f"def {function_name}():\n"
            "    from types import MappingProxyType\n"
            "    return MappingProxyType(__table__)\n"
        ).body[0]
        function = cast(ast.FunctionDef, node)
        query = cast(ast.Call, cast(ast.Return, function.body[-1]).value)
        query.args = [ast.Dict(keys=keys, values=values)]
        return function


def _literal_node(value: object) -> ast.expr:
    """Expression rebuilding a literal value (as produced by ast.literal_eval)."""
    match value:
        case tuple():
            return ast.Tuple(elts=[_literal_node(item) for item in value], ctx=ast.Load())
        case list():
            return ast.List(elts=[_literal_node(item) for item in value], ctx=ast.Load())
        case set() if not value:
            return ast.Call(func=ast.Name(id="set", ctx=ast.Load()), args=[], keywords=[])
        case set():
            return ast.Set(elts=[_literal_node(item) for item in value])
        case dict():
            return ast.Dict(
                keys=[_literal_node(k) for k in value],
                values=[_literal_node(v) for v in value.values()],
            )
    return ast.Constant(value=value)
