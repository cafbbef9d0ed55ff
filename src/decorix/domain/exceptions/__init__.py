"""Domain exceptions."""

from decorix.domain.exceptions.base import DecorixError
from decorix.domain.exceptions.expansion import (
    AnnotationError,
    ClauseDefinitionError,
    ExpansionError,
)
from decorix.domain.exceptions.registry import (
    DecoratorDefinitionError,
    InvalidExpansionError,
    UndeclaredDecoratorError,
)
from decorix.domain.exceptions.runtime import InternalBoundaryMisuseError, NotExpandedError

__all__ = [
    "DecorixError",
    "ExpansionError",
    "AnnotationError",
    "ClauseDefinitionError",
    "DecoratorDefinitionError",
    "InvalidExpansionError",
    "UndeclaredDecoratorError",
    "InternalBoundaryMisuseError",
    "NotExpandedError",
]
