"""Import table: local names of a module mapped to what they import."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field

from decorix.infrastructure.analyzers.base import resolve_relative_import


@dataclass(slots=True)
class ImportTable:
    """Tracks imported names of the module being expanded.

    Mutable - filled from the module's import statements.

    Handles:
    - import X / import X.Y (binds X)
    - import X as Y
    - from X import Y
    - from X import Y as Z
    - from X import * (recorded, never guessed)

    Names defined by the module itself are not in the table: they do not
    exist until the expanded module runs.

    Attributes:
        _direct: Local name → fully qualified name mapping
        _star_modules: Modules from which * was imported
    """

    _direct: dict[str, str] = field(default_factory=dict)
    _star_modules: list[str] = field(default_factory=list)

    def bind(self, local_name: str, qualified: str) -> None:
        """Bind a local name to a fully qualified name.

        Raises:
            ValueError: If either name is empty (FAIL-FIRST)
        """
        if not local_name:
            raise ValueError("local_name must not be empty")
        if not qualified:
            raise ValueError("qualified name must not be empty")
        self._direct[local_name] = qualified

    def add_star(self, module: str) -> None:
        self._star_modules.append(module)

    def resolve(self, name: str) -> str | None:
        """Resolve a (dotted) local name to its fully qualified name.

        Returns:
            Fully qualified name, None if the first component is not imported.
        """
        if not name:
            raise ValueError("name must not be empty")

        if name in self._direct:
            return self._direct[name]

        first, _, rest = name.partition(".")
        if rest and first in self._direct:
            return f"{self._direct[first]}.{rest}"

        return None

    @property
    def star_import_modules(self) -> tuple[str, ...]:
        return tuple(self._star_modules)

    @property
    def size(self) -> int:
        return len(self._direct)

    @classmethod
    def from_module(
        cls,
        tree: ast.Module,
        module_name: str,
        is_package: bool = False,
    ) -> ImportTable:
        """Build the table from the module-level imports of a tree.

        Imports at module level and inside module-level if/try blocks are
        collected; imports inside functions and classes are local to them.

        Args:
            tree: Parsed module
            module_name: Fully qualified name of the module (for relative imports)
            is_package: Module is a package __init__

        Returns:
            Filled ImportTable
        """
        table = cls()
        for node in _module_level_statements(tree.body):
            match node:
                case ast.Import(names=names):
                    for alias in names:
                        if alias.asname is not None:
                            table.bind(alias.asname, alias.name)
                        else:
                            first = alias.name.split(".")[0]
                            table.bind(first, first)

                case ast.ImportFrom(module=module, level=level, names=names):
                    resolved = resolve_relative_import(module, level, module_name, is_package)
                    for alias in names:
                        if alias.name == "*":
                            table.add_star(resolved)
                            continue
                        table.bind(alias.asname or alias.name, f"{resolved}.{alias.name}")

        return table


def _module_level_statements(body: list[ast.stmt]) -> list[ast.stmt]:
    """Statements at module level, descending into if/try/with blocks."""
    statements: list[ast.stmt] = []
    stack: list[ast.stmt] = list(reversed(body))

    while stack:
        node = stack.pop()
        statements.append(node)

        match node:
            case ast.If(body=inner, orelse=orelse):
                stack.extend(reversed([*inner, *orelse]))
            case ast.Try(body=inner, handlers=handlers, orelse=orelse, finalbody=final):
                nested = [*inner, *(s for h in handlers for s in h.body), *orelse, *final]
                stack.extend(reversed(nested))
            case ast.With(body=inner):
                stack.extend(reversed(inner))

    return statements
