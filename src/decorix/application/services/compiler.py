"""Module compiler: drives the expansion pass over one module."""

from __future__ import annotations

import ast
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import CodeType, ModuleType
from typing import TYPE_CHECKING

from decorix.application.services.expander import ExpansionEngine
from decorix.application.services.interceptor import DefinitionInterceptor
from decorix.application.services.state import ModuleState
from decorix.domain.model.configuration import ExpansionConfig

if TYPE_CHECKING:
    from decorix.domain.model.reflection import ReflectionTable

logger = logging.getLogger(__name__)

_DEFAULT_FILENAME = "<string>"


@dataclass(frozen=True, slots=True)
class ExpansionResult:
    """Outcome of expanding one module.

    Attributes:
        tree: The rewritten module (the input tree, modified in place)
        reflection: Frozen reflection table, empty if nothing was decorated
        expanded: Module opted in with use_decorators()
    """

    tree: ast.Module
    reflection: ReflectionTable
    expanded: bool


class ModuleCompiler:
    """Parses, expands and compiles modules.

    Each call builds a fresh ModuleState, so one compiler can expand any
    number of modules, concurrently included.

    Usage:
        compiler = ModuleCompiler()
        module = compiler.load_module(source, "app.handlers")
    """

    def __init__(self, config: ExpansionConfig | None = None) -> None:
        self._config = config if config is not None else ExpansionConfig()

    @property
    def config(self) -> ExpansionConfig:
        return self._config

    def expand(
        self,
        tree: ast.Module,
        module_name: str,
        path: Path | str = _DEFAULT_FILENAME,
        is_package: bool = False,
    ) -> ExpansionResult:
        """Expand a parsed module in place.

        Args:
            tree: Module tree (modified in place)
            module_name: Fully qualified module name
            path: Source path used in error locations
            is_package: Module is a package __init__ (for relative imports)

        Returns:
            ExpansionResult; modules without use_decorators() come back untouched

        Raises:
            DecorixError: Subclasses for annotation, clause and registry errors
        """
        if not isinstance(tree, ast.Module):
            raise TypeError(f"tree must be ast.Module, got {type(tree).__name__}")

        state = ModuleState.create(tree, module_name, Path(path), self._config, is_package)
        interceptor = DefinitionInterceptor(state, ExpansionEngine(state))
        expanded = interceptor.intercept(tree)

        if expanded and not state.reflection.is_empty:
            tree.body.append(state.reflection.emit(self._config.reflection_function))
        ast.fix_missing_locations(tree)

        if expanded:
            logger.debug(
                "expanded module %s: %d decorated clause(s), %d separator(s)",
                module_name,
                state.reflection.size,
                state.boundary.emitted,
            )
        return ExpansionResult(tree=tree, reflection=state.reflection.freeze(), expanded=expanded)

    def expand_source(
        self,
        source: str,
        module_name: str,
        filename: str = _DEFAULT_FILENAME,
        is_package: bool = False,
    ) -> ExpansionResult:
        """Parse and expand source text.

        Raises:
            SyntaxError: If source does not parse
        """
        tree = ast.parse(source, filename=filename)
        return self.expand(tree, module_name, filename, is_package)

    def compile_source(
        self,
        source: str,
        module_name: str,
        filename: str = _DEFAULT_FILENAME,
        is_package: bool = False,
    ) -> CodeType:
        """Expand source text and compile it to a module code object."""
        result = self.expand_source(source, module_name, filename, is_package)
        return compile(result.tree, filename, "exec", dont_inherit=True)

    def load_module(
        self,
        source: str,
        module_name: str,
        filename: str = _DEFAULT_FILENAME,
        register: bool = False,
    ) -> ModuleType:
        """Expand, compile and execute source as a fresh module.

        Args:
            source: Module source
            module_name: Name of the new module
            filename: Reported as the module's __file__
            register: Also insert the module into sys.modules

        Returns:
            The executed module
        """
        code = self.compile_source(source, module_name, filename)
        module = ModuleType(module_name)
        module.__file__ = filename
        if register:
            sys.modules[module_name] = module
        try:
            exec(code, module.__dict__)
        except BaseException:
            if register:
                sys.modules.pop(module_name, None)
            raise
        return module


def expand_source(
    source: str,
    module_name: str,
    filename: str = _DEFAULT_FILENAME,
) -> ExpansionResult:
    """Expand source text with the default configuration."""
    return ModuleCompiler().expand_source(source, module_name, filename)


def compile_source(source: str, module_name: str, filename: str = _DEFAULT_FILENAME) -> CodeType:
    """Expand and compile source text with the default configuration."""
    return ModuleCompiler().compile_source(source, module_name, filename)


def load_module(source: str, module_name: str, filename: str = _DEFAULT_FILENAME) -> ModuleType:
    """Expand, compile and execute source text with the default configuration."""
    return ModuleCompiler().load_module(source, module_name, filename)
