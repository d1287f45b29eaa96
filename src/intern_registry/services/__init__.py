from .intern_service import InternService

__all__ = ["InternService"]
