"""Storage layer for short links."""

from .base import URLMappingStore
from .memory import InMemoryURLMappingStore
from .postgres import PostgresURLMappingStore
from .models import URLMapping

__all__ = [
    "URLMappingStore",
    "InMemoryURLMappingStore",
    "PostgresURLMappingStore",
    "URLMapping",
]
