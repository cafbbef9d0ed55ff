"""Per-module compilation state threaded through the expansion pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from decorix.application.services.overrides import OverrideChain
from decorix.application.services.reflection import ReflectionAccumulator
from decorix.infrastructure.analyzers.context import ScopeStack
from decorix.infrastructure.boundary import OverrideBoundaryGuard
from decorix.infrastructure.resolution.import_table import ImportTable
from decorix.infrastructure.resolution.resolver import NameResolver

if TYPE_CHECKING:
    import ast

    from decorix.domain.model.configuration import ExpansionConfig


@dataclass(slots=True)
class ModuleState:
    """Everything mutable while one module is expanded.

    Created per compilation and never shared between modules.

    Attributes:
        module_name: Fully qualified name of the module being expanded
        path: Source file path
        config: Expansion configuration
        resolver: Resolves annotation names through the module's imports
        scopes: decorate_all scope stack
        reflection: Reflection accumulator
        overrides: Override chain
        boundary: Separator generator
    """

    module_name: str
    path: Path
    config: ExpansionConfig
    resolver: NameResolver
    scopes: ScopeStack = field(default_factory=ScopeStack)
    reflection: ReflectionAccumulator = field(default_factory=ReflectionAccumulator)
    overrides: OverrideChain = field(default_factory=OverrideChain)
    boundary: OverrideBoundaryGuard = field(default_factory=OverrideBoundaryGuard)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.module_name:
            raise ValueError("module_name must be non-empty string")
        if self.path is None:
            raise TypeError("path must not be None")

    @classmethod
    def create(
        cls,
        tree: ast.Module,
        module_name: str,
        path: Path,
        config: ExpansionConfig,
        is_package: bool = False,
    ) -> ModuleState:
        """Fresh state for a parsed module."""
        imports = ImportTable.from_module(tree, module_name, is_package)
        return cls(
            module_name=module_name,
            path=path,
            config=config,
            resolver=NameResolver(imports),
        )
