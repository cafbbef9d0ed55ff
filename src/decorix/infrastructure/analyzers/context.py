"""Stack-based scope tracking for decorate_all regions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decorix.domain.model.invocation import DecoratorInvocation


class ScopeType(Enum):
    """Statement lists that can carry a decorate_all chain."""

    MODULE = auto()
    CLASS = auto()
    REGION = auto()  # with decorate_all(...):


@dataclass(slots=True)
class ScopeFrame:
    """Single scope frame on the stack.

    Attributes:
        type: Scope type
        chain: Apply-to-all chain set in this frame, None if never set
        name: Class name for CLASS frames
    """

    type: ScopeType
    chain: tuple[DecoratorInvocation, ...] | None = None
    name: str | None = None


@dataclass(slots=True)
class ScopeStack:
    """Tracks the decorate_all chain in effect while walking a module.

    The innermost frame that set a chain wins. A bare decorate_all(...)
    statement redefines the chain of the current frame until the frame is
    popped; a with-region pushes a fresh frame.

    Mutable - push/pop during traversal.
    """

    _stack: list[ScopeFrame] = field(default_factory=list)

    def push(
        self,
        scope_type: ScopeType,
        chain: tuple[DecoratorInvocation, ...] | None = None,
        name: str | None = None,
    ) -> None:
        """Enter new scope.

        Raises:
            TypeError: If scope_type is not a ScopeType (FAIL-FIRST)
            ValueError: If a CLASS frame has no name, or a REGION frame no chain
        """
        if not isinstance(scope_type, ScopeType):
            raise TypeError(f"scope_type must be ScopeType, got {type(scope_type).__name__}")
        if scope_type is ScopeType.CLASS and not name:
            raise ValueError("CLASS scope requires name")
        if scope_type is ScopeType.REGION and chain is None:
            raise ValueError("REGION scope requires chain")

        self._stack.append(ScopeFrame(scope_type, chain, name))

    def pop(self) -> ScopeFrame:
        """Exit current scope.

        Raises:
            IndexError: If stack is empty
        """
        if not self._stack:
            raise IndexError("cannot pop from empty scope stack")
        return self._stack.pop()

    def redefine(self, chain: tuple[DecoratorInvocation, ...]) -> None:
        """Replace the chain of the current frame (bare decorate_all statement)."""
        if not self._stack:
            raise IndexError("cannot redefine chain on empty scope stack")
        self._stack[-1].chain = chain

    @property
    def active_chain(self) -> tuple[DecoratorInvocation, ...]:
        """Chain of the innermost frame that set one, empty if none did."""
        for frame in reversed(self._stack):
            if frame.chain is not None:
                return frame.chain
        return ()

    @property
    def class_path(self) -> str | None:
        """Enclosing class names joined by dots, None outside classes."""
        names = [frame.name for frame in self._stack if frame.type is ScopeType.CLASS]
        if not names:
            return None
        return ".".join(name for name in names if name)

    @property
    def depth(self) -> int:
        return len(self._stack)
