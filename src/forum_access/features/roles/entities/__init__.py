from .identity import Identity, GUEST

__all__ = ["Identity", "GUEST"]
