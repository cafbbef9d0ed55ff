"""Resolve names used in annotations to live objects."""

from __future__ import annotations

import ast
import importlib
import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import TYPE_CHECKING

from decorix.infrastructure.analyzers.base import dotted_name

if TYPE_CHECKING:
    from decorix.infrastructure.resolution.import_table import ImportTable

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel for an attribute that does not exist on its module."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one name.

    Attributes:
        qualified_name: Fully qualified name the local name refers to
        module: Deepest importable module on the qualified path
        value: Object the name refers to, MISSING if the module lacks it
    """

    qualified_name: str
    module: ModuleType
    value: object

    @property
    def found(self) -> bool:
        return self.value is not MISSING


@dataclass(slots=True)
class NameResolver:
    """Resolves Name/Attribute expressions through the module's imports.

    Imports the referenced modules at compile time (decorator-defining
    modules must be importable before the modules they decorate).

    Attributes:
        imports: Import table of the module being expanded
        _modules: Cache of modules imported so far
    """

    imports: ImportTable
    _modules: dict[str, ModuleType | None] = field(default_factory=dict)

    def resolve(self, node: ast.expr) -> Resolution | None:
        """Resolve a Name/Attribute expression.

        Args:
            node: Expression naming an imported object

        Returns:
            Resolution, None if the name is not imported or no prefix
            of its qualified name is an importable module.
        """
        name = dotted_name(node)
        if name is None:
            return None
        return self.resolve_name(name)

    def resolve_name(self, name: str) -> Resolution | None:
        """Resolve a dotted local name."""
        qualified = self.imports.resolve(name)
        if qualified is None:
            return None

        parts = qualified.split(".")
        for cut in range(len(parts), 0, -1):
            module = self._import(".".join(parts[:cut]))
            if module is None:
                continue

            value: object = module
            for attr in parts[cut:]:
                value = getattr(value, attr, MISSING)
                if value is MISSING:
                    break
            return Resolution(qualified_name=qualified, module=module, value=value)

        return None

    def _import(self, module_name: str) -> ModuleType | None:
        """Import a module once; None if it does not exist."""
        if module_name in self._modules:
            return self._modules[module_name]

        try:
            module: ModuleType | None = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # a missing dependency of an existing module propagates
            missing = e.name
            if missing is None or not (
                module_name == missing or module_name.startswith(f"{missing}.")
            ):
                raise
            module = None

        logger.debug("resolved module %s: %s", module_name, module is not None)
        self._modules[module_name] = module
        return module
