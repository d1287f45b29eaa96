from .intern import InternPayload, InternRead

__all__ = ["InternPayload", "InternRead"]
