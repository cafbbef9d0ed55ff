"""Tests for infrastructure/boundary.py."""

import ast

import pytest

from decorix.domain.exceptions.runtime import InternalBoundaryMisuseError
from decorix.infrastructure.boundary import OverrideBoundaryGuard, is_separator_name


def _run(node: ast.FunctionDef) -> dict[str, object]:
    namespace: dict[str, object] = {}
    module = ast.fix_missing_locations(ast.Module(body=[node], type_ignores=[]))
    exec(compile(module, "<separator>", "exec"), namespace)
    return namespace


class TestOverrideBoundaryGuard:
    """Tests for OverrideBoundaryGuard."""

    def test_random_token(self) -> None:
        first = OverrideBoundaryGuard()
        second = OverrideBoundaryGuard()
        assert len(first.token) == 16
        assert first.token != second.token

    def test_explicit_token(self) -> None:
        assert OverrideBoundaryGuard("0123456789abcdef").token == "0123456789abcdef"

    def test_invalid_token_raises(self) -> None:
        with pytest.raises(ValueError, match="16 lowercase hex"):
            OverrideBoundaryGuard("XYZ")

    def test_names_are_unique_and_counted(self) -> None:
        guard = OverrideBoundaryGuard("0123456789abcdef")
        first = guard.emit()
        second = guard.emit()
        assert first.name == "__decorix_separator_0123456789abcdef_0__"
        assert second.name == "__decorix_separator_0123456789abcdef_1__"
        assert guard.emitted == 2

    def test_emitted_separator_takes_no_arguments(self) -> None:
        node = OverrideBoundaryGuard().emit()
        assert node.args.args == []

    def test_calling_separator_raises(self) -> None:
        node = OverrideBoundaryGuard("0123456789abcdef").emit()
        separator = _run(node)[node.name]
        with pytest.raises(InternalBoundaryMisuseError) as exc_info:
            separator()  # type: ignore[operator]
        assert exc_info.value.name == node.name


class TestIsSeparatorName:
    """Tests for is_separator_name."""

    def test_generated_name(self) -> None:
        assert is_separator_name(OverrideBoundaryGuard().emit().name)

    @pytest.mark.parametrize("name", ["f", "__decorix_separator__", "__decorix_separator_xyz_0__"])
    def test_other_names(self, name: str) -> None:
        assert not is_separator_name(name)
