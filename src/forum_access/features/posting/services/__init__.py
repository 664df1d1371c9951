from .post_gate import PostGate

__all__ = ["PostGate"]
