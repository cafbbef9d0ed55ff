"""AST analysis helpers used by the expansion pass."""

from decorix.infrastructure.analyzers.base import (
    dotted_name,
    get_visibility,
    has_defaults,
    is_head_body,
    is_literal_annotation,
    iter_params,
    literal_value,
    make_location,
    param_shape,
    resolve_relative_import,
    split_docstring,
)
from decorix.infrastructure.analyzers.context import ScopeFrame, ScopeStack, ScopeType

__all__ = [
    "ScopeFrame",
    "ScopeStack",
    "ScopeType",
    "dotted_name",
    "get_visibility",
    "has_defaults",
    "is_head_body",
    "is_literal_annotation",
    "iter_params",
    "literal_value",
    "make_location",
    "param_shape",
    "resolve_relative_import",
    "split_docstring",
]
