"""Tests for domain/exceptions/expansion.py."""

from pathlib import Path

import pytest

from decorix.domain.exceptions.expansion import (
    AnnotationError,
    ClauseDefinitionError,
    ExpansionError,
)
from tests.factories import make_location


class TestExpansionError:
    """Tests for ExpansionError exception."""

    def test_has_path_and_reason(self) -> None:
        err = ExpansionError(Path("app.py"), "broken")
        assert err.path == Path("app.py")
        assert err.reason == "broken"

    def test_message_format(self) -> None:
        err = ExpansionError(Path("src/app.py"), "broken")
        assert "Failed to expand" in str(err)
        assert "app.py" in str(err)
        assert "broken" in str(err)

    def test_none_path_raises(self) -> None:
        with pytest.raises(TypeError, match="path"):
            ExpansionError(None, "broken")  # type: ignore[arg-type]

    def test_empty_reason_raises(self) -> None:
        with pytest.raises(ValueError, match="reason"):
            ExpansionError(Path("app.py"), "")


class TestAnnotationError:
    """Tests for AnnotationError exception."""

    def test_has_location_attribute(self) -> None:
        loc = make_location(line=7, column=4)
        err = AnnotationError(Path("app.py"), loc, "misplaced")
        assert err.location == loc
        assert err.path == Path("app.py")

    def test_message_includes_location(self) -> None:
        loc = make_location(line=7, column=4)
        err = AnnotationError(Path("app.py"), loc, "misplaced")
        assert "module.py:7:4" in str(err)
        assert "misplaced" in str(err)

    def test_none_location_raises(self) -> None:
        with pytest.raises(TypeError, match="location"):
            AnnotationError(Path("app.py"), None, "misplaced")  # type: ignore[arg-type]


class TestClauseDefinitionError:
    """Tests for ClauseDefinitionError exception."""

    def test_has_location_attribute(self) -> None:
        loc = make_location(line=3)
        err = ClauseDefinitionError(Path("app.py"), loc, "mixed kinds")
        assert err.location == loc
        assert err.reason == f"mixed kinds at {loc}"

    def test_can_catch_as_expansion_error(self) -> None:
        with pytest.raises(ExpansionError) as exc_info:
            raise ClauseDefinitionError(Path("app.py"), make_location(), "bad")
        assert isinstance(exc_info.value, ClauseDefinitionError)
