"""Tests for domain/model/reflection.py."""

from decorix.domain.model.reflection import AppliedDecorator


class TestAppliedDecorator:
    """Tests for AppliedDecorator."""

    def test_fields(self) -> None:
        applied = AppliedDecorator("app.tracing", "tag", ("a",))
        assert applied.module == "app.tracing"
        assert applied.name == "tag"
        assert applied.arguments == ("a",)

    def test_equals_plain_tuple(self) -> None:
        assert AppliedDecorator("m", "tag", ("a",)) == ("m", "tag", ("a",))

    def test_hashable(self) -> None:
        assert len({AppliedDecorator("m", "tag", ("a",)), ("m", "tag", ("a",))}) == 1
