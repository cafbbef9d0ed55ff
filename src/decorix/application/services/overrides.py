"""Override chain: clauses emitted so far per signature."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class OverrideChain:
    """Tracks which (name, arity) signatures have been emitted in a module.

    The first clause of a signature makes it overridable; every later
    clause of the same signature is an override of the previous one.

    Mutable - one per module compilation.

    Attributes:
        _emitted: (name, arity) → number of clauses emitted
    """

    _emitted: dict[tuple[str, int], int] = field(default_factory=dict)

    def register(self, name: str, arity: int) -> int:
        """Register the next clause of a signature.

        Returns:
            Index of the clause within its signature (0 for the first,
            > 0 for overrides)
        """
        if not name:
            raise ValueError("name must not be empty")

        key = (name, arity)
        index = self._emitted.get(key, 0)
        self._emitted[key] = index + 1
        return index

    def is_overridable(self, name: str, arity: int) -> bool:
        """Signature has at least one emitted clause."""
        return (name, arity) in self._emitted
