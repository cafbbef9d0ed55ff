"""Domain enumerations."""

from enum import Enum, auto


class Visibility(Enum):
    """Function visibility by naming convention."""

    PUBLIC = auto()  # no underscore
    PROTECTED = auto()  # _name
    PRIVATE = auto()  # __name


class FunctionKind(Enum):
    """Definition statement that introduced a clause."""

    FUNCTION = auto()  # def
    ASYNC_FUNCTION = auto()  # async def
