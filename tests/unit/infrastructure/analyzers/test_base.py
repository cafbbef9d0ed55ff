"""Tests for infrastructure/analyzers/base.py."""

import ast
from pathlib import Path

import pytest

from decorix.domain.model.enums import Visibility
from decorix.infrastructure.analyzers.base import (
    dotted_name,
    get_visibility,
    has_defaults,
    is_generator,
    is_head_body,
    is_literal_annotation,
    iter_params,
    literal_value,
    make_location,
    param_shape,
    resolve_relative_import,
    split_docstring,
)
from tests.factories import parse_def, parse_expr


class TestMakeLocation:
    """Tests for make_location function."""

    def test_valid_node(self) -> None:
        node = ast.parse("x = 1\ny = 2").body[1]
        loc = make_location(node, Path("test.py"))
        assert loc.file == Path("test.py")
        assert loc.line == 2
        assert loc.column == 0

    def test_synthesized_node_defaults_to_first_line(self) -> None:
        loc = make_location(ast.Pass(), Path("test.py"))
        assert loc.line == 1
        assert loc.column == 0


class TestGetVisibility:
    """Tests for get_visibility function."""

    def test_public_name(self) -> None:
        assert get_visibility("handler") == Visibility.PUBLIC

    def test_protected_name(self) -> None:
        assert get_visibility("_handler") == Visibility.PROTECTED

    def test_private_name(self) -> None:
        assert get_visibility("__handler") == Visibility.PRIVATE

    def test_dunder_is_public(self) -> None:
        assert get_visibility("__call__") == Visibility.PUBLIC


class TestResolveRelativeImport:
    """Tests for resolve_relative_import function."""

    def test_absolute_import(self) -> None:
        assert resolve_relative_import("os.path", 0, "app.main") == "os.path"

    def test_absolute_import_none_module_raises(self) -> None:
        with pytest.raises(ValueError, match="absolute import"):
            resolve_relative_import(None, 0, "app.main")

    def test_single_dot_import(self) -> None:
        assert resolve_relative_import("tracing", 1, "app.handlers") == "app.tracing"

    def test_single_dot_no_module(self) -> None:
        assert resolve_relative_import(None, 1, "app.handlers") == "app"

    def test_double_dot_import(self) -> None:
        assert resolve_relative_import("tracing", 2, "app.api.handlers") == "app.tracing"

    def test_package_init(self) -> None:
        assert resolve_relative_import("tracing", 1, "app", is_package=True) == "app.tracing"

    def test_level_exceeds_depth_raises(self) -> None:
        with pytest.raises(ValueError, match="exceeds package depth"):
            resolve_relative_import("x", 2, "app.main")


class TestDottedName:
    """Tests for dotted_name function."""

    def test_name(self) -> None:
        assert dotted_name(parse_expr("tag")) == "tag"

    def test_attribute_chain(self) -> None:
        assert dotted_name(parse_expr("app.tracing.tag")) == "app.tracing.tag"

    def test_call_is_not_a_name(self) -> None:
        assert dotted_name(parse_expr("tag('a')")) is None

    def test_attribute_of_call_is_not_a_name(self) -> None:
        assert dotted_name(parse_expr("make().tag")) is None


class TestParams:
    """Tests for iter_params, param_shape and has_defaults."""

    def test_iter_params_signature_order(self) -> None:
        node = parse_def("def f(a, /, b, *args, c, **kw): pass")
        assert [p.arg for p in iter_params(node.args)] == ["a", "b", "args", "c", "kw"]

    def test_param_shape(self) -> None:
        node = parse_def("def f(a, /, b, *args, c, **kw): pass")
        assert param_shape(node.args) == (1, 1, 1, True, True)

    def test_shape_ignores_names(self) -> None:
        first = parse_def("def f(a, b): pass")
        second = parse_def("def f(x, y): pass")
        assert param_shape(first.args) == param_shape(second.args)

    def test_has_defaults_positional(self) -> None:
        assert has_defaults(parse_def("def f(a=1): pass").args)

    def test_has_defaults_keyword_only(self) -> None:
        assert has_defaults(parse_def("def f(*, a=1): pass").args)

    def test_no_defaults(self) -> None:
        assert not has_defaults(parse_def("def f(a, *, b): pass").args)


class TestBodies:
    """Tests for split_docstring and is_head_body."""

    def test_split_docstring(self) -> None:
        node = parse_def('def f():\n    "doc"\n    return 1')
        docstring, rest = split_docstring(node.body)
        assert len(docstring) == 1
        assert isinstance(rest[0], ast.Return)

    def test_docstring_only_body_is_kept_as_body(self) -> None:
        node = parse_def('def f():\n    "doc"')
        docstring, rest = split_docstring(node.body)
        assert docstring == []
        assert len(rest) == 1

    def test_no_docstring(self) -> None:
        node = parse_def("def f():\n    return 1")
        assert split_docstring(node.body)[0] == []

    def test_ellipsis_body_is_head(self) -> None:
        assert is_head_body(parse_def("def f(n): ...").body)

    def test_docstring_and_ellipsis_is_head(self) -> None:
        assert is_head_body(parse_def('def f(n):\n    "doc"\n    ...').body)

    def test_pass_body_is_not_head(self) -> None:
        assert not is_head_body(parse_def("def f(n): pass").body)


class TestIsGenerator:
    """Tests for is_generator."""

    @pytest.mark.parametrize(
        "source",
        [
            "def f():\n    yield 1",
            "def f():\n    yield from range(2)",
            "async def f():\n    if True:\n        yield 1",
            "def f():\n    x = yield",
        ],
    )
    def test_yielding_body(self, source: str) -> None:
        assert is_generator(parse_def(source))

    @pytest.mark.parametrize(
        "source",
        [
            "def f():\n    return 1",
            "def f():\n    def g():\n        yield 1\n    return g",
            "async def f():\n    return [x async for x in g()]",
            "def f():\n    return lambda: (yield)",
        ],
    )
    def test_nested_yield_ignored(self, source: str) -> None:
        assert not is_generator(parse_def(source))


class TestLiterals:
    """Tests for literal_value and is_literal_annotation."""

    def test_literal_value(self) -> None:
        assert literal_value(parse_expr("('a', 1, [2])")) == ("a", 1, [2])

    def test_non_literal_falls_back_to_source(self) -> None:
        assert literal_value(parse_expr("settings.LEVEL")) == "settings.LEVEL"

    @pytest.mark.parametrize(
        "source", ["Literal[0]", "typing.Literal['a', 'b']", "t.Literal[None]"]
    )
    def test_literal_annotation(self, source: str) -> None:
        assert is_literal_annotation(parse_expr(source))

    @pytest.mark.parametrize("source", ["int", "list[int]", "Optional[int]"])
    def test_other_annotation(self, source: str) -> None:
        assert not is_literal_annotation(parse_expr(source))

    def test_missing_annotation(self) -> None:
        assert not is_literal_annotation(None)
