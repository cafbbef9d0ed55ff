"""Definition interceptor: walks an opted-in module and groups its clauses."""

from __future__ import annotations

import ast
import dataclasses
from typing import TYPE_CHECKING

from decorix.application.services.annotations import AnnotationCollector
from decorix.domain.exceptions.expansion import AnnotationError, ClauseDefinitionError
from decorix.domain.model.clause import Clause, ClauseGroup
from decorix.infrastructure.analyzers.base import dotted_name, is_head_body, make_location
from decorix.infrastructure.analyzers.context import ScopeType
from decorix.infrastructure.boundary import is_separator_name

if TYPE_CHECKING:
    from decorix.application.services.expander import ExpansionEngine
    from decorix.application.services.state import ModuleState

_Item = ast.stmt | Clause


class DefinitionInterceptor:
    """Routes every definition below ``use_decorators()`` to the expansion engine.

    Statement lists handled:
    - the module body after the opt-in statement
    - bodies of classes defined there (recursively)
    - ``with decorate_all(...):`` blocks, flattened into the enclosing list

    Consecutive definitions with the same name and arity form one clause
    group. Any other statement ends the group.
    """

    def __init__(self, state: ModuleState, engine: ExpansionEngine) -> None:
        self._state = state
        self._engine = engine
        self._annotations = AnnotationCollector(state)

    def intercept(self, tree: ast.Module) -> bool:
        """Rewrite the module in place.

        Returns:
            True if the module opted in and was expanded

        Raises:
            AnnotationError: For markers the pass cannot honour
            ClauseDefinitionError: For clause groups that cannot be combined
            UndeclaredDecoratorError: For annotations naming undeclared decorators
        """
        opt_in = next(
            (i for i, stmt in enumerate(tree.body) if self._annotations.is_opt_in(stmt)),
            None,
        )
        if opt_in is None:
            return False

        before = tree.body[:opt_in]
        for stmt in before:
            stray = self._annotations.find_stray(stmt)
            if stray is not None:
                raise self._error(stray, f"{ast.unparse(stray)} used before use_decorators()")

        scopes = self._state.scopes
        scopes.push(ScopeType.MODULE)
        after = self._process(tree.body[opt_in + 1 :])
        scopes.pop()

        tree.body = [*before, *after]

        stray = self._annotations.find_stray(tree)
        if stray is not None:
            raise self._error(
                stray,
                f"{ast.unparse(stray)} is only supported on module-level and class-level "
                "definitions",
            )
        return True

    def _process(self, statements: list[ast.stmt]) -> list[ast.stmt]:
        return self._emit(self._linearize(statements))

    def _linearize(self, statements: list[ast.stmt]) -> list[_Item]:
        """Collect clauses and plain statements, applying decorate_all changes."""
        scopes = self._state.scopes
        items: list[_Item] = []

        for stmt in statements:
            if self._annotations.is_opt_in(stmt):
                raise self._error(stmt, "use_decorators() may appear only once per module")

            chain = self._annotations.chain_statement(stmt)
            if chain is not None:
                scopes.redefine(chain)
                continue

            match stmt:
                case ast.With() if (region := self._annotations.chain_region(stmt)) is not None:
                    scopes.push(ScopeType.REGION, region)
                    items.extend(self._linearize(stmt.body))
                    scopes.pop()
                case ast.FunctionDef() | ast.AsyncFunctionDef():
                    items.append(self._collect(stmt))
                case ast.ClassDef():
                    items.append(self._visit_class(stmt))
                case _:
                    items.append(stmt)

        return items

    def _collect(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> _Item:
        explicit, guard, remaining = self._annotations.split_decorators(node)

        if any(_is_overload(decorator) for decorator in remaining):
            # typing.overload stubs never join a clause group
            if explicit or guard is not None:
                raise self._error(
                    node, f"@overload stub {node.name} cannot carry decorix annotations"
                )
            return node

        if is_separator_name(node.name):
            raise ClauseDefinitionError(
                self._state.path,
                make_location(node, self._state.path),
                f"{node.name} is reserved for override boundaries",
            )

        node.decorator_list = remaining
        return Clause(
            node=node,
            explicit=explicit,
            scoped=self._state.scopes.active_chain,
            guard=guard,
            patterns=(),
            location=make_location(node, self._state.path),
            class_name=self._state.scopes.class_path,
        )

    def _visit_class(self, node: ast.ClassDef) -> ast.ClassDef:
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            marker = self._annotations.marker(target)
            if marker is not None:
                raise self._error(
                    decorator, f"class {node.name} cannot be annotated with {marker.__name__}()"
                )

        scopes = self._state.scopes
        scopes.push(ScopeType.CLASS, name=node.name)
        node.body = self._process(node.body) or [ast.Pass()]
        scopes.pop()
        return node

    def _emit(self, items: list[_Item]) -> list[ast.stmt]:
        """Group consecutive clauses and expand each group."""
        output: list[ast.stmt] = []
        run: list[Clause] = []

        for item in items:
            if isinstance(item, Clause):
                if run and (run[-1].name, run[-1].arity) != (item.name, item.arity):
                    output.extend(self._flush(run))
                    run = []
                run.append(item)
                continue

            output.extend(self._flush(run))
            run = []
            output.append(item)

        output.extend(self._flush(run))
        return output

    def _flush(self, run: list[Clause]) -> list[ast.stmt]:
        if not run:
            return []

        head = None
        clauses = run
        if len(run) > 1 and is_head_body(run[0].node.body):
            head = dataclasses.replace(run[0], is_head=True)
            clauses = run[1:]

        # a lone unguarded clause keeps its Literal annotations as plain type hints
        if len(clauses) > 1 or head is not None or any(c.guard is not None for c in clauses):
            clauses = [
                dataclasses.replace(clause, patterns=self._annotations.patterns(clause.node))
                for clause in clauses
            ]

        return self._engine.expand(ClauseGroup(clauses=tuple(clauses), head=head))

    def _error(self, node: ast.stmt | ast.expr, reason: str) -> AnnotationError:
        return AnnotationError(self._state.path, make_location(node, self._state.path), reason)


def _is_overload(decorator: ast.expr) -> bool:
    name = dotted_name(decorator)
    return name is not None and name.split(".")[-1] == "overload"
