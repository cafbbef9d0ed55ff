"""Tests for domain/model/enums.py."""

from decorix.domain.model.enums import FunctionKind, Visibility


class TestVisibility:
    def test_members(self) -> None:
        assert {v.name for v in Visibility} == {"PUBLIC", "PROTECTED", "PRIVATE"}


class TestFunctionKind:
    def test_members(self) -> None:
        assert {k.name for k in FunctionKind} == {"FUNCTION", "ASYNC_FUNCTION"}

    def test_members_are_distinct(self) -> None:
        assert FunctionKind.FUNCTION is not FunctionKind.ASYNC_FUNCTION
