"""Expansion engine: folds decorator chains over clause bodies."""

from __future__ import annotations

import ast
import copy
import logging
from typing import TYPE_CHECKING, cast

from decorix.domain.exceptions.expansion import ClauseDefinitionError
from decorix.domain.model.context import FunctionContext
from decorix.domain.model.enums import FunctionKind
from decorix.infrastructure.analyzers.base import (
    get_visibility,
    has_defaults,
    is_generator,
    iter_params,
    param_shape,
    split_docstring,
)
from decorix.infrastructure.templates import template

if TYPE_CHECKING:
    from decorix.application.services.state import ModuleState
    from decorix.domain.model.clause import Clause, ClauseGroup
    from decorix.domain.model.invocation import DecoratorInvocation

logger = logging.getLogger(__name__)

# (clause, implementation name, matcher name or None)
_Branch = tuple["Clause", str, str | None]


class ExpansionEngine:
    """Emits the rewritten definitions of one clause group.

    A single unconditional clause is rewritten in place. Any other group
    becomes one implementation function per clause, a matcher per
    conditional clause and a public dispatcher trying the clauses in
    source order.
    """

    def __init__(self, state: ModuleState) -> None:
        self._state = state

    def expand(self, group: ClauseGroup) -> list[ast.stmt]:
        """Expand a clause group.

        Returns:
            Statements replacing the group's definitions

        Raises:
            ClauseDefinitionError: If the clauses cannot be combined
            InvalidExpansionError: If a decorator returns something that is not a body
        """
        members = _members(group)
        if group.is_passthrough:
            return [clause.node for clause in members]

        self._validate(group)

        if not group.needs_dispatch:
            statements = self._expand_in_place(group.clauses[0])
        else:
            statements = self._expand_clauses(group)

        logger.debug(
            "expanded %s.%s/%d: %d clause(s)",
            self._state.module_name,
            group.name,
            group.arity,
            len(group.clauses),
        )
        return statements

    def _validate(self, group: ClauseGroup) -> None:
        members = _members(group)
        first = members[0]
        signature = f"{group.name}/{group.arity}"

        if group.needs_dispatch and first.class_name is not None:
            raise self._error(
                first,
                f"{first.class_name}.{signature} needs clause dispatch (several clauses, "
                "a head or a guard), which is only supported at module level",
            )

        shape = param_shape(first.node.args)
        for clause in members[1:]:
            if param_shape(clause.node.args) != shape:
                raise self._error(clause, f"clauses of {signature} differ in parameter shape")
            if clause.is_async != first.is_async:
                raise self._error(clause, f"clauses of {signature} mix def and async def")
            if clause.node.decorator_list:
                raise self._error(
                    clause,
                    f"only the first definition of {signature} may carry other decorators",
                )

        if first.is_async:
            kinds = {is_generator(clause.node) for clause in group.clauses}
            if len(kinds) > 1:
                raise self._error(
                    first, f"clauses of {signature} mix async generators and coroutines"
                )

        if group.head is not None and group.head.guard is not None:
            raise self._error(group.head, f"head of {signature} cannot have a when() guard")

        if group.needs_dispatch:
            for clause in group.clauses:
                if has_defaults(clause.node.args):
                    raise self._error(
                        clause,
                        f"clause of {signature} declares defaults; declare them on a head "
                        f"(a '...' bodied def {group.name} above the clauses)",
                    )

    def _expand_in_place(self, clause: Clause) -> list[ast.stmt]:
        _, separator = self._register(clause)
        chain = clause.chain
        if chain:
            clause.node.body = self._wrap(clause, chain)
        self._record(clause, chain)
        return [*separator, clause.node]

    def _expand_clauses(self, group: ClauseGroup) -> list[ast.stmt]:
        name, arity = group.name, group.arity
        head = group.head
        head_chain = head.chain if head is not None else ()
        # scope chain entries already contributed by the head
        inherited = {id(invocation) for invocation in head.scoped} if head is not None else set()

        statements: list[ast.stmt] = []
        branches: list[_Branch] = []
        for clause in group.clauses:
            index, separator = self._register(clause)
            statements.extend(separator)

            chain = (
                *head_chain,
                *(invocation for invocation in clause.scoped if id(invocation) not in inherited),
                *clause.explicit,
            )

            matcher = None
            if clause.is_conditional:
                matcher = f"__decorix_{name}_{arity}_match_{index}"
                statements.append(self._matcher(clause, matcher))

            implementation = f"__decorix_{name}_{arity}_clause_{index}"
            statements.append(self._implementation(clause, implementation, chain))
            self._record(clause, chain)
            branches.append((clause, implementation, matcher))

        statements.append(self._dispatcher(group, branches))
        return statements

    def _register(self, clause: Clause) -> tuple[int, list[ast.stmt]]:
        """Register a clause in the override chain.

        Returns:
            (clause index within its signature, separator statements)
        """
        if clause.class_name is not None:
            return 0, []

        overrides = self._state.overrides
        is_override = overrides.is_overridable(clause.name, clause.arity)
        index = overrides.register(clause.name, clause.arity)
        if not is_override or not self._state.config.emit_override_boundaries:
            return index, []
        return index, [self._state.boundary.emit()]

    def _wrap(self, clause: Clause, chain: tuple[DecoratorInvocation, ...]) -> list[ast.stmt]:
        """Fold the chain right to left over a copy of the clause body."""
        docstring, body = split_docstring(clause.node.body)
        body = copy.deepcopy(body)
        context = self._context(clause)

        for invocation in reversed(chain):
            arguments = copy.deepcopy(invocation.arguments)
            try:
                body = invocation.stub.expand(arguments, body, context)
            except Exception:
                logger.debug(
                    "decorator %s failed on %s",
                    invocation.signature,
                    context.qualified_name,
                )
                raise

        return [*docstring, *body]

    def _context(self, clause: Clause) -> FunctionContext:
        node = clause.node
        params = tuple(copy.deepcopy(param) for param in iter_params(node.args))
        return FunctionContext(
            module=self._state.module_name,
            name=node.name,
            arity=len(params),
            kind=FunctionKind.ASYNC_FUNCTION if clause.is_async else FunctionKind.FUNCTION,
            args=params,
            visibility=get_visibility(node.name),
            class_name=clause.class_name,
            guard=clause.guard,
            location=clause.location,
        )

    def _record(self, clause: Clause, chain: tuple[DecoratorInvocation, ...]) -> None:
        if not chain:
            return
        name = f"{clause.class_name}.{clause.name}" if clause.class_name else clause.name
        self._state.reflection.record(name, clause.params_text, chain)

    def _implementation(
        self,
        clause: Clause,
        name: str,
        chain: tuple[DecoratorInvocation, ...],
    ) -> ast.stmt:
        implementation = copy.copy(clause.node)
        implementation.name = name
        implementation.decorator_list = []
        if chain:
            implementation.body = self._wrap(clause, chain)
        return implementation

    def _matcher(self, clause: Clause, name: str) -> ast.stmt:
        matcher = cast(ast.FunctionDef, ast.parse(f"def {name}(): pass").body[0])
        matcher.args = _bare_arguments(clause.node.args)
        matcher.body = [ast.Return(value=_condition(clause))]
        return matcher

    def _dispatcher(self, group: ClauseGroup, branches: list[_Branch]) -> ast.stmt:
        first = group.head if group.head is not None else group.clauses[0]
        is_async = first.is_async

        dispatcher: ast.FunctionDef | ast.AsyncFunctionDef = copy.copy(first.node)
        if is_async and is_generator(group.clauses[0].node):
            # async generators are returned as they are, not awaited
            fields = {field: getattr(first.node, field, None) for field in first.node._fields}
            dispatcher = ast.copy_location(ast.FunctionDef(**fields), first.node)
            is_async = False

        if group.head is not None:
            dispatcher.args = copy.deepcopy(first.node.args)
        else:
            dispatcher.args = _bare_arguments(first.node.args)
        dispatcher.decorator_list = list(first.node.decorator_list)

        docstring, _ = split_docstring(first.node.body)
        body: list[ast.stmt] = [*docstring]
        for clause, implementation, matcher in branches:
            call = _forward(implementation, dispatcher.args, clause.node.args, is_async)
            if matcher is None:
                body.append(ast.Return(value=call))
                break
            test = _forward(matcher, dispatcher.args, clause.node.args, False)
            body.append(ast.If(test=test, body=[ast.Return(value=call)], orelse=[]))
        else:
            body.extend(
                template(
                    "raise TypeError(__message__)",
                    message=f"no clause of {group.name}/{group.arity} matches the given arguments",
                )
            )

        dispatcher.body = body
        return dispatcher

    def _error(self, clause: Clause, reason: str) -> ClauseDefinitionError:
        return ClauseDefinitionError(self._state.path, clause.location, reason)


def _members(group: ClauseGroup) -> tuple[Clause, ...]:
    if group.head is None:
        return group.clauses
    return (group.head, *group.clauses)


def _bare_arguments(args: ast.arguments) -> ast.arguments:
    """Copy of a signature without annotations and defaults."""
    bare = copy.deepcopy(args)
    for param in iter_params(bare):
        param.annotation = None
    bare.defaults = []
    bare.kw_defaults = [None] * len(bare.kwonlyargs)
    return bare


def _condition(clause: Clause) -> ast.expr:
    """Conjunction of the clause's Literal checks and its guard."""
    tests: list[ast.expr] = []
    for pattern in clause.patterns:
        checks = [_literal_check(pattern.param, value) for value in pattern.values]
        tests.append(checks[0] if len(checks) == 1 else ast.BoolOp(op=ast.Or(), values=checks))
    if clause.guard is not None:
        tests.append(copy.deepcopy(clause.guard))

    if len(tests) == 1:
        return tests[0]
    return ast.BoolOp(op=ast.And(), values=tests)


def _literal_check(param: str, value: object) -> ast.expr:
    # singletons compare by identity, everything else by equality
    op: ast.cmpop = ast.Is() if value is None or isinstance(value, bool) else ast.Eq()
    return ast.Compare(
        left=ast.Name(id=param, ctx=ast.Load()),
        ops=[op],
        comparators=[ast.Constant(value=value)],
    )


def _forward(
    target: str,
    source: ast.arguments,
    destination: ast.arguments,
    is_async: bool,
) -> ast.expr:
    """Call target with the parameters of one signature bound to another.

    Positional parameters are passed by position, keyword-only ones by
    the destination's names, *args and **kwargs unpacked.
    """
    args: list[ast.expr] = [
        ast.Name(id=param.arg, ctx=ast.Load()) for param in (*source.posonlyargs, *source.args)
    ]
    if source.vararg is not None:
        vararg = ast.Name(id=source.vararg.arg, ctx=ast.Load())
        args.append(ast.Starred(value=vararg, ctx=ast.Load()))

    keywords = [
        ast.keyword(arg=theirs.arg, value=ast.Name(id=ours.arg, ctx=ast.Load()))
        for ours, theirs in zip(source.kwonlyargs, destination.kwonlyargs, strict=True)
    ]
    if source.kwarg is not None:
        keywords.append(ast.keyword(arg=None, value=ast.Name(id=source.kwarg.arg, ctx=ast.Load())))

    func = ast.Name(id=target, ctx=ast.Load())
    call: ast.expr = ast.Call(func=func, args=args, keywords=keywords)
    if is_async:
        return ast.Await(value=call)
    return call
