"""Version information for forum-access."""

__version__ = "0.3.0"
