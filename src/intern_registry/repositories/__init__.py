"""
Repository layer: data access behind a small, testable interface.

    from intern_registry.repositories import InternRepository
"""

from .base_repository import BaseRepository
from .intern_repository import InternRepository

__all__ = [
    "BaseRepository",
    "InternRepository",
]
