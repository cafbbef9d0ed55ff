"""Tests for domain/exceptions/base.py and runtime.py."""

import pytest

from decorix.domain.exceptions import (
    AnnotationError,
    ClauseDefinitionError,
    DecoratorDefinitionError,
    ExpansionError,
    InvalidExpansionError,
    UndeclaredDecoratorError,
)
from decorix.domain.exceptions.base import DecorixError
from decorix.domain.exceptions.runtime import InternalBoundaryMisuseError, NotExpandedError


class TestHierarchy:
    """Every decorix exception is a DecorixError."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            AnnotationError,
            ClauseDefinitionError,
            DecoratorDefinitionError,
            ExpansionError,
            InvalidExpansionError,
            UndeclaredDecoratorError,
            InternalBoundaryMisuseError,
            NotExpandedError,
        ],
    )
    def test_is_decorix_error(self, exc_type: type) -> None:
        assert issubclass(exc_type, DecorixError)

    def test_annotation_and_clause_errors_are_expansion_errors(self) -> None:
        assert issubclass(AnnotationError, ExpansionError)
        assert issubclass(ClauseDefinitionError, ExpansionError)

    def test_decorix_error_is_exception(self) -> None:
        assert issubclass(DecorixError, Exception)


class TestInternalBoundaryMisuseError:
    """Tests for InternalBoundaryMisuseError."""

    def test_has_name_attribute(self) -> None:
        err = InternalBoundaryMisuseError("__decorix_separator_0123456789abcdef_0__")
        assert err.name == "__decorix_separator_0123456789abcdef_0__"

    def test_message_names_separator(self) -> None:
        err = InternalBoundaryMisuseError("__sep__")
        assert "__sep__/0" in str(err)
        assert "must not be called" in str(err)

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="name"):
            InternalBoundaryMisuseError("")


class TestNotExpandedError:
    """Tests for NotExpandedError."""

    def test_has_marker_attribute(self) -> None:
        err = NotExpandedError("decorate")
        assert err.marker == "decorate"

    def test_message_explains_fix(self) -> None:
        err = NotExpandedError("tests.decorators.tag")
        assert "tests.decorators.tag" in str(err)
        assert "use_decorators()" in str(err)

    def test_empty_marker_raises(self) -> None:
        with pytest.raises(ValueError, match="marker"):
            NotExpandedError("")
