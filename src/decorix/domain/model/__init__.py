"""Domain model: value objects describing decorators, clauses and contexts."""

from decorix.domain.model.clause import Clause, ClauseGroup, Pattern
from decorix.domain.model.configuration import DEFAULT_REFLECTION_FUNCTION, ExpansionConfig
from decorix.domain.model.context import FunctionContext
from decorix.domain.model.enums import FunctionKind, Visibility
from decorix.domain.model.invocation import DecoratorDeclaration, DecoratorInvocation
from decorix.domain.model.location import Location
from decorix.domain.model.reflection import (
    AppliedDecorator,
    ReflectionKey,
    ReflectionTable,
)

__all__ = [
    "AppliedDecorator",
    "Clause",
    "ClauseGroup",
    "DEFAULT_REFLECTION_FUNCTION",
    "DecoratorDeclaration",
    "DecoratorInvocation",
    "ExpansionConfig",
    "FunctionContext",
    "FunctionKind",
    "Location",
    "Pattern",
    "ReflectionKey",
    "ReflectionTable",
    "Visibility",
]
