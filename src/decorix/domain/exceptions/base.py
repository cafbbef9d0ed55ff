"""Base exceptions for decorix domain."""


class DecorixError(Exception):
    """Root exception for all decorix errors.

    All domain exceptions inherit from this.
    Allows catching every decorix-specific error in one clause.
    """
