"""Override boundary guard.

Emits a private function that sits between two consecutive override
declarations of the same signature, so every override stays a distinct,
visible extension point in the emitted tree. Calling it is an error.
"""

from __future__ import annotations

import ast
import re
import secrets
from typing import cast

_SEPARATOR_RE = re.compile(r"^__decorix_separator_[0-9a-f]{16}_\d+__$")


def is_separator_name(name: str) -> bool:
    """Check if name was generated by OverrideBoundaryGuard."""
    return _SEPARATOR_RE.match(name) is not None


class OverrideBoundaryGuard:
    """Generates uniquely named separator declarations for one module.

    The random token is drawn once per module compilation; each emitted
    separator adds a counter, so names never collide within the module.
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize guard.

        Args:
            token: 16 lowercase hex digits; random when None

        Raises:
            ValueError: If token is not 16 lowercase hex digits (FAIL-FIRST)
        """
        if token is None:
            token = secrets.token_hex(8)
        if re.fullmatch(r"[0-9a-f]{16}", token) is None:
            raise ValueError(f"token must be 16 lowercase hex digits, got {token!r}")

        self._token = token
        self._count = 0

    @property
    def token(self) -> str:
        return self._token

    @property
    def emitted(self) -> int:
        """Number of separators emitted so far."""
        return self._count

    def emit(self) -> ast.FunctionDef:
        """Emit the next separator declaration.

        Returns:
            Module-level FunctionDef raising InternalBoundaryMisuseError
        """
        name = f"__decorix_separator_{self._token}_{self._count}__"
        self._count += 1

        source = (
            f"def {name}():\n"
            "    from decorix.domain.exceptions.runtime import InternalBoundaryMisuseError\n"
            f"    raise InternalBoundaryMisuseError({name!r})\n"
        )
        return cast(ast.FunctionDef, ast.parse(source).body[0])
