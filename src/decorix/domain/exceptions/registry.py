"""Decorator registry exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from decorix.domain.exceptions.base import DecorixError

if TYPE_CHECKING:
    from decorix.domain.model.location import Location


class UndeclaredDecoratorError(DecorixError):
    """Annotation references a (name, arity) pair its module never declared.

    Attributes:
        module: Decorator-defining module
        name: Referenced decorator name
        arity: Number of compile-time arguments in the annotation
        location: Annotation site, None when raised outside a compilation
    """

    def __init__(
        self,
        module: str,
        name: str,
        arity: int,
        location: Location | None = None,
    ) -> None:
        # FAIL-FIRST: validate required parameters
        if not module:
            raise ValueError("module must be non-empty string")
        if not name:
            raise ValueError("name must be non-empty string")

        self.module = module
        self.name = name
        self.arity = arity
        self.location = location

        message = f"decorator {module}.{name}/{arity} is not declared"
        if location is not None:
            message = f"{message} (at {location})"
        super().__init__(message)


class DecoratorDefinitionError(DecorixError):
    """Decorator-defining module is malformed.

    Raised for duplicate declarations, invalid arities, implementations
    of undeclared names, wrong implementation signatures and declared
    decorators without an implementation.

    Attributes:
        module: Decorator-defining module
        reason: What is wrong with the definition
    """

    def __init__(self, module: str, reason: str) -> None:
        if not module:
            raise ValueError("module must be non-empty string")
        if not reason:
            raise ValueError("reason must be non-empty string")

        self.module = module
        self.reason = reason
        super().__init__(f"Invalid decorator definition in {module}: {reason}")


class InvalidExpansionError(DecorixError):
    """Decorator implementation returned something that is not a body.

    Attributes:
        decorator: Decorator signature, e.g. "pkg.tracing.tag/1"
        reason: What was returned instead
    """

    def __init__(self, decorator: str, reason: str) -> None:
        if not decorator:
            raise ValueError("decorator must be non-empty string")
        if not reason:
            raise ValueError("reason must be non-empty string")

        self.decorator = decorator
        self.reason = reason
        super().__init__(f"Decorator {decorator} produced an invalid body: {reason}")
