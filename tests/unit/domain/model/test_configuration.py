"""Tests for domain/model/configuration.py."""

import pytest

from decorix.domain.model.configuration import DEFAULT_REFLECTION_FUNCTION, ExpansionConfig


class TestExpansionConfig:
    """Tests for ExpansionConfig."""

    def test_defaults(self) -> None:
        config = ExpansionConfig()
        assert config.reflection_function == DEFAULT_REFLECTION_FUNCTION
        assert DEFAULT_REFLECTION_FUNCTION == "__decorated_functions__"
        assert config.emit_override_boundaries is True

    def test_custom_values(self) -> None:
        config = ExpansionConfig(reflection_function="decorated", emit_override_boundaries=False)
        assert config.reflection_function == "decorated"
        assert config.emit_override_boundaries is False

    def test_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            ExpansionConfig().reflection_function = "x"  # type: ignore[misc]


class TestExpansionConfigFailFirst:
    """Tests for FAIL-FIRST validation."""

    def test_non_identifier_raises(self) -> None:
        with pytest.raises(ValueError, match="identifier"):
            ExpansionConfig(reflection_function="not valid")

    def test_keyword_raises(self) -> None:
        with pytest.raises(ValueError, match="keyword"):
            ExpansionConfig(reflection_function="class")

    def test_non_bool_boundaries_raises(self) -> None:
        with pytest.raises(TypeError, match="bool"):
            ExpansionConfig(emit_override_boundaries=1)  # type: ignore[arg-type]
