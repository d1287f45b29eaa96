"""
Single import point for the ORM models, so `Base.metadata` sees all of them:

    from intern_registry.models import Intern
"""

from .intern import Intern

__all__ = [
    "Intern",
]
