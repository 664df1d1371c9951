"""Core building blocks: exceptions and hooks."""

from .hooks import HookRegistry, HookHandler

__all__ = ["HookRegistry", "HookHandler"]
