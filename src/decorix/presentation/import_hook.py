"""Import hook: expands opted-in modules transparently on import.

Usage:
    import decorix
    decorix.install(packages=["myapp"])

    import myapp.handlers  # expanded if it calls use_decorators()

Modules imported before install() are not expanded.
"""

from __future__ import annotations

import importlib.abc
import importlib.machinery
import importlib.util
import logging
import sys
from collections.abc import Iterable, Sequence
from types import CodeType, ModuleType

from decorix.application.services.compiler import ModuleCompiler
from decorix.domain.model.configuration import ExpansionConfig

logger = logging.getLogger(__name__)

# cheap pre-check before a source file is parsed
_OPT_IN = b"use_decorators"


class DecorixLoader(importlib.machinery.SourceFileLoader):
    """Source loader running the expansion pass before compiling.

    Expanded code depends on the decorator modules at import time, so no
    bytecode is cached.
    """

    def __init__(self, fullname: str, path: str, compiler: ModuleCompiler) -> None:
        super().__init__(fullname, path)
        self._compiler = compiler

    def get_code(self, fullname: str) -> CodeType:
        path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(path), path)

    def source_to_code(  # type: ignore[override]
        self,
        data: bytes,
        path: str,
        *,
        _optimize: int = -1,
    ) -> CodeType:
        source = importlib.util.decode_source(data)
        result = self._compiler.expand_source(
            source,
            self.name,
            filename=path,
            is_package=self.is_package(self.name),
        )
        if result.expanded:
            logger.info("expanded %s (%d decorated clause(s))", self.name, len(result.reflection))
        return compile(result.tree, path, "exec", dont_inherit=True, optimize=_optimize)


class DecorixFinder(importlib.abc.MetaPathFinder):
    """Meta path finder handing opted-in source modules to DecorixLoader.

    Attributes:
        packages: Top-level names to expand, None for every module
    """

    def __init__(self, compiler: ModuleCompiler, packages: Iterable[str] | None = None) -> None:
        self._compiler = compiler
        self.packages = tuple(packages) if packages is not None else None

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None,
        target: ModuleType | None = None,
    ) -> importlib.machinery.ModuleSpec | None:
        if not self._accepts(fullname):
            return None

        spec = importlib.machinery.PathFinder.find_spec(fullname, path)
        if spec is None or not isinstance(spec.loader, importlib.machinery.SourceFileLoader):
            return None
        if spec.origin is None or not _mentions_opt_in(spec.origin):
            return None

        spec.loader = DecorixLoader(fullname, spec.origin, self._compiler)
        return spec

    def _accepts(self, fullname: str) -> bool:
        if self.packages is None:
            return True
        return any(fullname == p or fullname.startswith(f"{p}.") for p in self.packages)


def _mentions_opt_in(path: str) -> bool:
    try:
        with open(path, "rb") as source:
            return _OPT_IN in source.read()
    except OSError:
        return False


def install(
    packages: Iterable[str] | None = None,
    config: ExpansionConfig | None = None,
) -> DecorixFinder:
    """Install the import hook in front of sys.meta_path.

    Args:
        packages: Package names whose modules are expanded, None for all
        config: Expansion configuration, defaults if None

    Returns:
        The installed finder (replaces a previously installed one)
    """
    uninstall()
    finder = DecorixFinder(ModuleCompiler(config), packages)
    sys.meta_path.insert(0, finder)
    logger.debug("installed import hook for %s", finder.packages or "all modules")
    return finder


def uninstall() -> None:
    """Remove every installed DecorixFinder from sys.meta_path."""
    sys.meta_path[:] = [f for f in sys.meta_path if not isinstance(f, DecorixFinder)]
