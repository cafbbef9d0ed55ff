"""Base utilities for AST analysis."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from decorix.domain.model.enums import Visibility

if TYPE_CHECKING:
    from pathlib import Path

    from decorix.domain.model.location import Location


def make_location(node: ast.stmt | ast.expr, path: Path) -> Location:
    """Create Location from AST node.

    Args:
        node: AST node with position info (statement or expression)
        path: Source file path

    Returns:
        Location pointing to node; line 1 for synthesized nodes
    """
    from decorix.domain.model.location import Location

    lineno = getattr(node, "lineno", None) or 1
    col_offset = getattr(node, "col_offset", None) or 0
    return Location(file=path, line=lineno, column=col_offset)


def get_visibility(name: str) -> Visibility:
    """Determine visibility from Python naming convention.

    Rules:
        __name__ (dunder) → PUBLIC (special methods)
        __name (not __name__) → PRIVATE (mangled)
        _name → PROTECTED
        name → PUBLIC
    """
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if name.startswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def resolve_relative_import(
    node_module: str | None,
    node_level: int,
    current_module: str,
    is_package: bool = False,
) -> str:
    """Resolve relative import to absolute module path.

    Args:
        node_module: Module part of import (after dots)
        node_level: Number of dots (0=absolute, 1=., 2=..)
        current_module: Current module's fully qualified name
        is_package: Current module is a package __init__

    Returns:
        Absolute module path

    Raises:
        ValueError: If relative import escapes package (FAIL-FIRST)
    """
    if node_level == 0:
        if node_module is None:
            raise ValueError("absolute import must have module")
        return node_module

    parts = current_module.split(".")
    if is_package:
        parts.append("__init__")

    if node_level > len(parts) - 1:
        raise ValueError(
            f"relative import level {node_level} exceeds package depth of module '{current_module}'"
        )

    base_parts = parts[:-node_level]

    if node_module:
        return ".".join([*base_parts, node_module])

    return ".".join(base_parts)


def dotted_name(node: ast.expr) -> str | None:
    """Dotted source name of a Name/Attribute chain, None for anything else.

    Example:
        tracing.tag → "tracing.tag"
        tag("a")    → None (call, not a name)
    """
    match node:
        case ast.Name(id=name):
            return name
        case ast.Attribute(value=value, attr=attr):
            prefix = dotted_name(value)
            if prefix is None:
                return None
            return f"{prefix}.{attr}"
    return None


def iter_params(args: ast.arguments) -> tuple[ast.arg, ...]:
    """All parameter nodes in signature order.

    Order: positional-only, regular, *args, keyword-only, **kwargs.
    """
    params: list[ast.arg] = [*args.posonlyargs, *args.args]
    if args.vararg is not None:
        params.append(args.vararg)
    params.extend(args.kwonlyargs)
    if args.kwarg is not None:
        params.append(args.kwarg)
    return tuple(params)


def param_shape(args: ast.arguments) -> tuple[int, int, int, bool, bool]:
    """Structural shape of a signature, independent of names and defaults."""
    return (
        len(args.posonlyargs),
        len(args.args),
        len(args.kwonlyargs),
        args.vararg is not None,
        args.kwarg is not None,
    )


def has_defaults(args: ast.arguments) -> bool:
    """Signature declares at least one default value."""
    return bool(args.defaults) or any(default is not None for default in args.kw_defaults)


def split_docstring(body: list[ast.stmt]) -> tuple[list[ast.stmt], list[ast.stmt]]:
    """Split a function body into (docstring statements, remaining statements)."""
    match body:
        case [ast.Expr(value=ast.Constant(value=str())) as doc, *rest] if rest:
            return [doc], list(rest)
    return [], list(body)


def is_head_body(body: list[ast.stmt]) -> bool:
    """Body consists of `...` only, optionally after a docstring."""
    _, rest = split_docstring(body)
    match rest:
        case [ast.Expr(value=ast.Constant(value=value))] if value is Ellipsis:
            return True
    return False


def literal_value(node: ast.expr) -> object:
    """Literal value of an argument node, its source text if not a literal."""
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return ast.unparse(node)


def is_literal_annotation(node: ast.expr | None) -> bool:
    """Annotation is Literal[...] (bare, typing.Literal or any alias ending in Literal)."""
    match node:
        case ast.Subscript(value=value):
            name = dotted_name(value)
            return name is not None and name.split(".")[-1] == "Literal"
    return False


def is_generator(node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
    """Body contains yield or yield from outside nested scopes."""
    pending: list[ast.AST] = list(node.body)
    while pending:
        current = pending.pop()
        match current:
            case ast.Yield() | ast.YieldFrom():
                return True
            case ast.FunctionDef() | ast.AsyncFunctionDef() | ast.Lambda() | ast.ClassDef():
                continue
        pending.extend(ast.iter_child_nodes(current))
    return False
