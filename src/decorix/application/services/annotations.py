"""Recognize markers and turn annotation expressions into invocations."""

from __future__ import annotations

import ast
import logging
from typing import TYPE_CHECKING

from decorix.application.markers import MARKERS, decorate, decorate_all, use_decorators, when
from decorix.application.registry import DecoratorStub, find_registry
from decorix.domain.exceptions.expansion import AnnotationError, ClauseDefinitionError
from decorix.domain.exceptions.registry import UndeclaredDecoratorError
from decorix.domain.model.clause import Pattern
from decorix.domain.model.invocation import DecoratorInvocation
from decorix.infrastructure.analyzers.base import (
    dotted_name,
    is_literal_annotation,
    iter_params,
    make_location,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from decorix.application.services.state import ModuleState

logger = logging.getLogger(__name__)

_MARKER_NAMES = frozenset(marker.__name__ for marker in MARKERS)

# Literal values a pattern may compare against
_PATTERN_TYPES = (str, bytes, int, float, complex, bool, type(None))
_NOT_CONSTANT = object()


class AnnotationCollector:
    """Reads markers and decorator invocations of one module.

    Every name is resolved through the module's imports, so markers and
    stubs are recognized by identity whatever alias they were imported as.
    """

    def __init__(self, state: ModuleState) -> None:
        self._state = state

    def marker(self, node: ast.expr) -> Callable[..., object] | None:
        """Marker a Name/Attribute expression refers to, None otherwise."""
        name = dotted_name(node)
        if name is None:
            return None
        qualified = self._state.resolver.imports.resolve(name)
        if qualified is None or qualified.rsplit(".", 1)[-1] not in _MARKER_NAMES:
            return None

        resolution = self._state.resolver.resolve_name(name)
        if resolution is None or not resolution.found:
            return None
        for marker in MARKERS:
            if resolution.value is marker:
                return marker
        return None

    def marker_call(self, node: ast.expr) -> tuple[Callable[..., object], ast.Call] | None:
        """(marker, call) if node calls a marker, None otherwise."""
        if not isinstance(node, ast.Call):
            return None
        marker = self.marker(node.func)
        if marker is None:
            return None
        return marker, node

    def is_opt_in(self, stmt: ast.stmt) -> bool:
        """Statement is ``use_decorators()``."""
        match stmt:
            case ast.Expr(value=ast.Call() as call):
                found = self.marker_call(call)
                if found is None or found[0] is not use_decorators:
                    return False
                if call.args or call.keywords:
                    raise self._error(call, "use_decorators() takes no arguments")
                return True
        return False

    def chain_statement(self, stmt: ast.stmt) -> tuple[DecoratorInvocation, ...] | None:
        """Chain of a bare ``decorate_all(...)`` statement, None for other statements."""
        match stmt:
            case ast.Expr(value=ast.Call() as call):
                found = self.marker_call(call)
                if found is not None and found[0] is decorate_all:
                    return self.invocations(call)
        return None

    def chain_region(self, stmt: ast.stmt) -> tuple[DecoratorInvocation, ...] | None:
        """Chain of a ``with decorate_all(...):`` block, None for other statements.

        Raises:
            AnnotationError: If decorate_all shares the with statement or is bound with as
        """
        if not isinstance(stmt, ast.With):
            return None

        chains: list[tuple[DecoratorInvocation, ...]] = []
        for item in stmt.items:
            found = self.marker_call(item.context_expr)
            if found is None or found[0] is not decorate_all:
                continue
            if item.optional_vars is not None:
                raise self._error(item.context_expr, "decorate_all(...) cannot be bound with 'as'")
            chains.append(self.invocations(found[1]))

        if not chains:
            return None
        if len(stmt.items) > 1:
            raise self._error(stmt, "decorate_all(...) must be the only item of its with statement")
        return chains[0]

    def split_decorators(
        self,
        node: ast.FunctionDef | ast.AsyncFunctionDef,
    ) -> tuple[tuple[DecoratorInvocation, ...], ast.expr | None, list[ast.expr]]:
        """Separate decorix annotations from the other decorators of a definition.

        Returns:
            (explicit invocations top to bottom, guard, remaining decorators)

        Raises:
            AnnotationError: For misused markers
        """
        explicit: list[DecoratorInvocation] = []
        guard: ast.expr | None = None
        remaining: list[ast.expr] = []

        for decorator in node.decorator_list:
            found = self.marker_call(decorator)
            if found is None:
                if self.marker(decorator) is not None:
                    raise self._error(decorator, f"@{ast.unparse(decorator)} must be called")
                remaining.append(decorator)
                continue

            marker, call = found
            if marker is decorate:
                if not call.args:
                    raise self._error(call, "decorate() needs at least one decorator")
                explicit.extend(self.invocations(call))
            elif marker is when:
                if guard is not None:
                    raise self._error(call, f"{node.name} has more than one when() guard")
                if len(call.args) != 1 or call.keywords or isinstance(call.args[0], ast.Starred):
                    raise self._error(call, "when() takes exactly one guard expression")
                guard = call.args[0]
            else:
                raise self._error(call, f"{marker.__name__}() cannot annotate a definition")

        return tuple(explicit), guard, remaining

    def invocations(self, call: ast.Call) -> tuple[DecoratorInvocation, ...]:
        """Invocations listed by a decorate(...)/decorate_all(...) call."""
        if call.keywords:
            raise self._error(call, "decorator invocations cannot be passed by keyword")
        return tuple(self.invocation(arg) for arg in call.args)

    def invocation(self, node: ast.expr) -> DecoratorInvocation:
        """Resolve one invocation such as ``tag("a")`` or ``trace``.

        Raises:
            AnnotationError: If node is not an invocation of a decorator
            UndeclaredDecoratorError: If (name, arity) is not declared
        """
        match node:
            case ast.Call(func=target, args=args, keywords=[]):
                if any(isinstance(arg, ast.Starred) for arg in args):
                    raise self._error(node, "decorator arguments cannot be unpacked")
                arguments = tuple(args)
            case ast.Call():
                raise self._error(node, "decorator arguments cannot be passed by keyword")
            case ast.Name() | ast.Attribute():
                target = node
                arguments = ()
            case _:
                raise self._error(node, f"expected a decorator invocation, got {ast.unparse(node)}")

        location = make_location(node, self._state.path)
        source = ast.unparse(target)
        resolution = self._state.resolver.resolve(target)
        if resolution is None:
            raise self._error(node, f"{source} is not imported from a decorator-defining module")

        if not resolution.found:
            registry = find_registry(resolution.module)
            if registry is None:
                raise self._error(node, f"{source} is not a decorator")
            name = resolution.qualified_name.rsplit(".", 1)[-1]
            raise UndeclaredDecoratorError(registry.module, name, len(arguments), location)

        stub = resolution.value
        if not isinstance(stub, DecoratorStub):
            raise self._error(node, f"{source} is not a decorator")
        if not stub.registry.is_declared(stub.name, len(arguments)):
            raise UndeclaredDecoratorError(stub.module, stub.name, len(arguments), location)

        logger.debug("resolved %s to %s.%s/%d", source, stub.module, stub.name, len(arguments))
        return DecoratorInvocation(
            module=stub.module,
            name=stub.name,
            arguments=arguments,
            location=location,
            stub=stub,
        )

    def patterns(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> tuple[Pattern, ...]:
        """Literal patterns declared by the parameter annotations.

        Raises:
            ClauseDefinitionError: If a Literal value is not a constant
        """
        patterns: list[Pattern] = []
        for param in iter_params(node.args):
            annotation = param.annotation
            if not isinstance(annotation, ast.Subscript) or not is_literal_annotation(annotation):
                continue

            match annotation.slice:
                case ast.Tuple(elts=elts):
                    elements = list(elts)
                case single:
                    elements = [single]

            values: list[object] = []
            for element in elements:
                try:
                    value = ast.literal_eval(element)
                except ValueError:
                    value = _NOT_CONSTANT
                if not isinstance(value, _PATTERN_TYPES):
                    raise ClauseDefinitionError(
                        self._state.path,
                        make_location(element, self._state.path),
                        f"Literal value {ast.unparse(element)} of {node.name}({param.arg}) "
                        "is not a constant",
                    )
                values.append(value)
            patterns.append(Pattern(param=param.arg, values=tuple(values)))

        return tuple(patterns)

    def find_stray(self, tree: ast.AST) -> ast.expr | None:
        """First marker reference left anywhere in a tree."""
        for node in ast.walk(tree):
            if isinstance(node, ast.Name | ast.Attribute) and self.marker(node) is not None:
                return node
        return None

    def _error(self, node: ast.stmt | ast.expr, reason: str) -> AnnotationError:
        return AnnotationError(self._state.path, make_location(node, self._state.path), reason)
