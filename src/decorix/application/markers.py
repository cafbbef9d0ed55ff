"""Compile-time markers used inside decorated modules.

The expansion pass recognizes these by identity (through the module's
imports) and strips them. Reaching one at run time means the module was
never expanded.
"""

from __future__ import annotations

from typing import Any

from decorix.domain.exceptions.runtime import NotExpandedError


def use_decorators() -> None:
    """Opt the module in: every definition below is intercepted."""
    raise NotExpandedError("use_decorators")


def decorate(*invocations: Any) -> Any:
    """Annotate the following definition: ``@decorate(tag("a"), trace())``."""
    raise NotExpandedError("decorate")


def decorate_all(*invocations: Any) -> Any:
    """Apply decorators to every following definition.

    As a statement the chain holds until redefined or the enclosing body
    ends; as ``with decorate_all(...):`` it holds for the block only.
    ``decorate_all()`` clears the chain.
    """
    raise NotExpandedError("decorate_all")


def when(guard: Any) -> Any:
    """Guard a clause: ``@when(n > 0)``; the expression uses the clause's parameters."""
    raise NotExpandedError("when")


MARKERS = frozenset({use_decorators, decorate, decorate_all, when})
