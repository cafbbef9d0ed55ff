"""Name resolution for annotation expressions."""

from decorix.infrastructure.resolution.import_table import ImportTable
from decorix.infrastructure.resolution.resolver import MISSING, NameResolver, Resolution

__all__ = [
    "MISSING",
    "ImportTable",
    "NameResolver",
    "Resolution",
]
