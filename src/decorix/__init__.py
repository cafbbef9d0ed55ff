"""decorix - compile-time decorators that rewrite function bodies."""

__version__ = "0.1.0"

from decorix.application.markers import decorate, decorate_all, use_decorators, when
from decorix.application.registry import DecoratorRegistry, DecoratorStub, define_decorators
from decorix.application.services.compiler import (
    ExpansionResult,
    ModuleCompiler,
    compile_source,
    expand_source,
    load_module,
)
from decorix.domain.exceptions import (
    AnnotationError,
    ClauseDefinitionError,
    DecoratorDefinitionError,
    DecorixError,
    ExpansionError,
    InternalBoundaryMisuseError,
    InvalidExpansionError,
    NotExpandedError,
    UndeclaredDecoratorError,
)
from decorix.domain.model import AppliedDecorator, ExpansionConfig, FunctionContext, FunctionKind
from decorix.infrastructure.templates import constant, template
from decorix.presentation.import_hook import install, uninstall

__all__ = [
    "AnnotationError",
    "AppliedDecorator",
    "ClauseDefinitionError",
    "DecoratorDefinitionError",
    "DecoratorRegistry",
    "DecoratorStub",
    "DecorixError",
    "ExpansionConfig",
    "ExpansionError",
    "ExpansionResult",
    "FunctionContext",
    "FunctionKind",
    "InternalBoundaryMisuseError",
    "InvalidExpansionError",
    "ModuleCompiler",
    "NotExpandedError",
    "UndeclaredDecoratorError",
    "__version__",
    "compile_source",
    "constant",
    "decorate",
    "decorate_all",
    "define_decorators",
    "expand_source",
    "install",
    "load_module",
    "template",
    "uninstall",
    "use_decorators",
    "when",
]
