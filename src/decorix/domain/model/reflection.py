"""Reflection table value objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple

# (function name, literal parameter text), e.g. ("fact", "(n: Literal[0])")
ReflectionKey = tuple[str, str]


class AppliedDecorator(NamedTuple):
    """Decorator applied to one clause, as recorded for reflection.

    A named tuple so entries compare equal to the plain tuples returned
    by an expanded module's query function.

    Attributes:
        module: Decorator-defining module
        name: Decorator name
        arguments: Literal argument values (source text for non-literals)
    """

    module: str
    name: str
    arguments: tuple[object, ...]


ReflectionTable = Mapping[ReflectionKey, tuple[AppliedDecorator, ...]]
