"""Tests for domain/exceptions/registry.py."""

import pytest

from decorix.domain.exceptions.registry import (
    DecoratorDefinitionError,
    InvalidExpansionError,
    UndeclaredDecoratorError,
)
from tests.factories import make_location


class TestUndeclaredDecoratorError:
    """Tests for UndeclaredDecoratorError exception."""

    def test_attributes(self) -> None:
        loc = make_location(line=4)
        err = UndeclaredDecoratorError("app.tracing", "tag", 2, loc)
        assert err.module == "app.tracing"
        assert err.name == "tag"
        assert err.arity == 2
        assert err.location == loc

    def test_message_names_signature(self) -> None:
        err = UndeclaredDecoratorError("app.tracing", "tag", 2)
        assert "app.tracing.tag/2 is not declared" in str(err)

    def test_message_includes_location(self) -> None:
        err = UndeclaredDecoratorError("app.tracing", "tag", 2, make_location(line=4))
        assert "module.py:4:0" in str(err)

    def test_location_defaults_to_none(self) -> None:
        assert UndeclaredDecoratorError("m", "tag", 0).location is None

    def test_empty_module_raises(self) -> None:
        with pytest.raises(ValueError, match="module"):
            UndeclaredDecoratorError("", "tag", 0)

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="name"):
            UndeclaredDecoratorError("m", "", 0)


class TestDecoratorDefinitionError:
    """Tests for DecoratorDefinitionError exception."""

    def test_attributes_and_message(self) -> None:
        err = DecoratorDefinitionError("app.tracing", "tag/1 is declared twice")
        assert err.module == "app.tracing"
        assert err.reason == "tag/1 is declared twice"
        assert "Invalid decorator definition in app.tracing" in str(err)

    def test_empty_reason_raises(self) -> None:
        with pytest.raises(ValueError, match="reason"):
            DecoratorDefinitionError("m", "")


class TestInvalidExpansionError:
    """Tests for InvalidExpansionError exception."""

    def test_attributes_and_message(self) -> None:
        err = InvalidExpansionError("app.tracing.tag/1", "returned str")
        assert err.decorator == "app.tracing.tag/1"
        assert err.reason == "returned str"
        assert "app.tracing.tag/1 produced an invalid body" in str(err)

    def test_empty_decorator_raises(self) -> None:
        with pytest.raises(ValueError, match="decorator"):
            InvalidExpansionError("", "x")
