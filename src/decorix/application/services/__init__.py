"""Expansion pass services."""

from decorix.application.services.annotations import AnnotationCollector
from decorix.application.services.compiler import (
    ExpansionResult,
    ModuleCompiler,
    compile_source,
    expand_source,
    load_module,
)
from decorix.application.services.expander import ExpansionEngine
from decorix.application.services.interceptor import DefinitionInterceptor
from decorix.application.services.overrides import OverrideChain
from decorix.application.services.reflection import ReflectionAccumulator
from decorix.application.services.state import ModuleState

__all__ = [
    "AnnotationCollector",
    "DefinitionInterceptor",
    "ExpansionEngine",
    "ExpansionResult",
    "ModuleCompiler",
    "ModuleState",
    "OverrideChain",
    "ReflectionAccumulator",
    "compile_source",
    "expand_source",
    "load_module",
]
