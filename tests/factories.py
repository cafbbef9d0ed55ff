"""Test factories for creating domain objects.

Centralized factory functions to avoid duplication across test modules.
All factories follow the same pattern: accept simplified parameters,
return fully constructed domain objects.
"""

import ast
import textwrap
from pathlib import Path
from types import ModuleType

from decorix.application.services.compiler import ExpansionResult, ModuleCompiler
from decorix.domain.model.clause import Clause, Pattern
from decorix.domain.model.configuration import ExpansionConfig
from decorix.domain.model.context import FunctionContext
from decorix.domain.model.enums import FunctionKind
from decorix.domain.model.invocation import DecoratorInvocation
from decorix.domain.model.location import Location
from decorix.infrastructure.analyzers.base import iter_params
from decorix.infrastructure.templates import constant

# Default test file path - consistent across all tests
DEFAULT_TEST_FILE = Path("/test/module.py")

# Imports shared by expanded snippets
PRELUDE = """\
from typing import Literal

from decorix import decorate, decorate_all, use_decorators, when
from tests.decorators import capture, double, explode, invalid, label, pair, suffix, tag, trace
"""


def make_location(line: int = 1, column: int = 0, file: Path = DEFAULT_TEST_FILE) -> Location:
    """Create a Location for tests."""
    return Location(file=file, line=line, column=column)


def parse_def(source: str) -> ast.FunctionDef | ast.AsyncFunctionDef:
    """Parse a single (async) function definition."""
    node = ast.parse(textwrap.dedent(source)).body[0]
    assert isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef)
    return node


def parse_expr(source: str) -> ast.expr:
    """Parse a single expression."""
    return ast.parse(source, mode="eval").body


def make_invocation(
    name: str = "tag",
    arguments: tuple[object, ...] = ("a",),
    module: str = "tests.decorators",
    line: int = 1,
) -> DecoratorInvocation:
    """Create a DecoratorInvocation with constant arguments (no stub)."""
    return DecoratorInvocation(
        module=module,
        name=name,
        arguments=tuple(constant(value) for value in arguments),
        location=make_location(line),
    )


def make_context(
    source: str = "def f(): pass",
    module: str = "tests.module",
    class_name: str | None = None,
) -> FunctionContext:
    """Create a FunctionContext describing a parsed definition."""
    node = parse_def(source)
    params = iter_params(node.args)
    return FunctionContext(
        module=module,
        name=node.name,
        arity=len(params),
        kind=(
            FunctionKind.ASYNC_FUNCTION
            if isinstance(node, ast.AsyncFunctionDef)
            else FunctionKind.FUNCTION
        ),
        args=params,
        class_name=class_name,
    )


def make_clause(
    source: str = "def f(): return []",
    explicit: tuple[DecoratorInvocation, ...] = (),
    scoped: tuple[DecoratorInvocation, ...] = (),
    guard: str | None = None,
    patterns: tuple[Pattern, ...] = (),
    class_name: str | None = None,
    is_head: bool = False,
) -> Clause:
    """Create a Clause from definition source."""
    return Clause(
        node=parse_def(source),
        explicit=explicit,
        scoped=scoped,
        guard=parse_expr(guard) if guard is not None else None,
        patterns=patterns,
        location=make_location(),
        class_name=class_name,
        is_head=is_head,
    )


def snippet(body: str) -> str:
    """Module source: shared imports, opt-in, then body."""
    return f"{PRELUDE}\nuse_decorators()\n\n{textwrap.dedent(body)}"


def expand(
    source: str,
    module_name: str = "snippet",
    config: ExpansionConfig | None = None,
) -> ExpansionResult:
    """Expand dedented source."""
    return ModuleCompiler(config).expand_source(textwrap.dedent(source), module_name)


def load(
    source: str,
    module_name: str = "snippet",
    config: ExpansionConfig | None = None,
) -> ModuleType:
    """Expand, compile and execute dedented source."""
    return ModuleCompiler(config).load_module(textwrap.dedent(source), module_name)
