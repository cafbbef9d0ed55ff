"""Body templates for decorator implementations.

Decorator authors write the replacement body as Python source and mark
the holes with dunder placeholders:

    template('''
        def __inner__():
            __body__
        return [__label__, *__inner__()]
    ''', body=body, label=label)

``__body__`` standing alone as a statement is spliced with a statement
list; any other placeholder is replaced by an expression. Dunder names
without a substitution (``__inner__`` above) are left alone.
"""

from __future__ import annotations

import ast
import copy
import textwrap
from collections.abc import Sequence

_LOCATION_ATTRS = ("lineno", "col_offset", "end_lineno", "end_col_offset")
_CONSTANT_TYPES = (str, bytes, int, float, complex, bool, type(None), type(Ellipsis))


def template(source: str, **substitutions: object) -> list[ast.stmt]:
    """Parse a statement template and fill its placeholders.

    Args:
        source: Python statements (dedented automatically)
        **substitutions: name → statement list, statement, expression node
            or Python constant, filling placeholder ``__name__``

    Returns:
        Statement list without source positions of its own, so the
        expansion pass places it at the decorated definition

    Raises:
        SyntaxError: If the template is not valid Python
        TypeError: If a substitution cannot fill its placeholder
    """
    tree = ast.parse(textwrap.dedent(source))
    for node in ast.walk(tree):
        for attr in _LOCATION_ATTRS:
            if hasattr(node, attr):
                delattr(node, attr)

    filled = _Substitute(substitutions).visit(tree)
    return list(filled.body)


def constant(value: object) -> ast.expr:
    """Expression node for a Python constant or a tuple/list of constants."""
    match value:
        case tuple() | list():
            elts = [constant(item) for item in value]
            if isinstance(value, tuple):
                return ast.Tuple(elts=elts, ctx=ast.Load())
            return ast.List(elts=elts, ctx=ast.Load())
        case _ if isinstance(value, _CONSTANT_TYPES):
            return ast.Constant(value=value)
    raise TypeError(f"cannot express {type(value).__name__} as a constant node")


def _placeholder(name: str) -> str | None:
    """Substitution key of a placeholder name, None for ordinary names."""
    if len(name) > 4 and name.startswith("__") and name.endswith("__"):
        return name[2:-2]
    return None


class _Substitute(ast.NodeTransformer):
    """Replaces placeholder names by their substitutions."""

    def __init__(self, substitutions: dict[str, object]) -> None:
        self._substitutions = substitutions

    def visit_Expr(self, node: ast.Expr) -> ast.AST | list[ast.stmt]:
        match node.value:
            case ast.Name(id=name) if (key := _placeholder(name)) in self._substitutions:
                value = self._substitutions[key]
                if isinstance(value, ast.stmt):
                    return copy.deepcopy(value)
                if _is_statement_list(value):
                    return [copy.deepcopy(stmt) for stmt in value]  # type: ignore[union-attr]
        return self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> ast.AST:
        key = _placeholder(node.id)
        if key is None or key not in self._substitutions:
            return node

        value = self._substitutions[key]
        if isinstance(node.ctx, ast.Store):
            if not isinstance(value, ast.Name):
                raise TypeError(f"placeholder {node.id} is assigned to; substitute an ast.Name")
            return ast.Name(id=value.id, ctx=ast.Store())
        if isinstance(value, ast.expr):
            return copy.deepcopy(value)
        if isinstance(value, ast.stmt) or _is_statement_list(value):
            raise TypeError(f"placeholder {node.id} is used as an expression; got statements")
        return constant(value)


def _is_statement_list(value: object) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, str | bytes)
        and bool(value)
        and all(isinstance(item, ast.stmt) for item in value)
    )
