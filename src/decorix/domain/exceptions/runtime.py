"""Exceptions raised by code that must never run after expansion."""

from decorix.domain.exceptions.base import DecorixError


class InternalBoundaryMisuseError(DecorixError):
    """An override boundary separator was called directly.

    Attributes:
        name: Name of the generated separator function
    """

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("name must be non-empty string")

        self.name = name
        super().__init__(
            f"{name}/0 is an internal decorix separator between override "
            "declarations, it must not be called"
        )


class NotExpandedError(DecorixError):
    """Compile-time marker executed at run time.

    The module using the marker was imported without the expansion pass
    (import hook not installed, or use_decorators() missing).

    Attributes:
        marker: Name of the marker or decorator stub that ran
    """

    def __init__(self, marker: str) -> None:
        if not marker:
            raise ValueError("marker must be non-empty string")

        self.marker = marker
        super().__init__(
            f"{marker} is a compile-time marker; the calling module was not "
            "expanded (call decorix.install() before importing it and make sure "
            "it contains use_decorators())"
        )
