"""Tests for infrastructure/resolution/import_table.py."""

import ast
import textwrap

import pytest

from decorix.infrastructure.resolution.import_table import ImportTable


def _table(code: str, module_name: str = "app.handlers", is_package: bool = False) -> ImportTable:
    tree = ast.parse(textwrap.dedent(code))
    return ImportTable.from_module(tree, module_name, is_package)


class TestImportTableBind:
    """Tests for bind/resolve."""

    def test_bind_and_resolve(self) -> None:
        table = ImportTable()
        table.bind("tag", "app.tracing.tag")
        assert table.resolve("tag") == "app.tracing.tag"

    def test_resolve_attribute_of_bound_name(self) -> None:
        table = ImportTable()
        table.bind("tracing", "app.tracing")
        assert table.resolve("tracing.tag") == "app.tracing.tag"

    def test_unknown_name(self) -> None:
        assert ImportTable().resolve("tag") is None

    def test_empty_local_name_raises(self) -> None:
        with pytest.raises(ValueError, match="local_name"):
            ImportTable().bind("", "x")

    def test_empty_lookup_raises(self) -> None:
        with pytest.raises(ValueError, match="name"):
            ImportTable().resolve("")


class TestImportTableFromModule:
    """Tests for building the table from a module."""

    def test_import(self) -> None:
        table = _table("import os.path")
        assert table.resolve("os") == "os"
        assert table.resolve("os.path.join") == "os.path.join"

    def test_import_as(self) -> None:
        table = _table("import app.tracing as tr")
        assert table.resolve("tr.tag") == "app.tracing.tag"

    def test_from_import(self) -> None:
        table = _table("from app.tracing import tag as t")
        assert table.resolve("t") == "app.tracing.tag"

    def test_relative_import(self) -> None:
        table = _table("from .tracing import tag")
        assert table.resolve("tag") == "app.tracing.tag"

    def test_relative_import_in_package(self) -> None:
        table = _table("from .tracing import tag", module_name="app", is_package=True)
        assert table.resolve("tag") == "app.tracing.tag"

    def test_star_import_recorded(self) -> None:
        table = _table("from app.tracing import *")
        assert table.star_import_modules == ("app.tracing",)
        assert table.size == 0

    def test_imports_in_if_and_try_blocks(self) -> None:
        table = _table(
            """
            try:
                from app.fast import tag
            except ImportError:
                from app.slow import tag
            if True:
                import json
            """
        )
        assert table.resolve("tag") == "app.slow.tag"
        assert table.resolve("json") == "json"

    def test_function_local_imports_ignored(self) -> None:
        table = _table(
            """
            def f():
                from app.tracing import tag
            """
        )
        assert table.resolve("tag") is None
