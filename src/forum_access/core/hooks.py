"""Extension points for collaborators.

Two kinds of hooks exist:

* filters (``filter:*``) run sequentially in priority order; each handler
  receives the current payload and may return a replacement. Returning
  ``None`` keeps the payload unchanged. Errors propagate to the caller so a
  filter can veto an operation.
* actions (``action:*``) are notifications; every handler runs and failures
  are logged, never propagated.

With no handlers registered both kinds are pass-throughs.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HookHandler:
    """A registered hook handler."""

    name: str
    callback: Callable[[Any], Any]
    priority: int = 10


class HookRegistry:
    """Ordered registry of filter and action handlers."""

    def __init__(self):
        self._handlers: Dict[str, List[HookHandler]] = {}

    def register(self, name: str, callback: Callable[[Any], Any], priority: int = 10) -> HookHandler:
        """Register ``callback`` for hook ``name``.

        Lower priorities run first; equal priorities keep registration order.
        """
        if not name.startswith(("filter:", "action:")):
            raise ValueError(f"Hook name must start with 'filter:' or 'action:': {name}")

        handler = HookHandler(name=name, callback=callback, priority=priority)
        handlers = self._handlers.setdefault(name, [])
        handlers.append(handler)
        handlers.sort(key=lambda h: h.priority)
        logger.debug(f"Registered hook handler for {name} (priority {priority})")
        return handler

    def unregister(self, name: str, callback: Callable[[Any], Any]) -> bool:
        handlers = self._handlers.get(name, [])
        remaining = [h for h in handlers if h.callback is not callback]
        self._handlers[name] = remaining
        return len(remaining) != len(handlers)

    def has_listeners(self, name: str) -> bool:
        return bool(self._handlers.get(name))

    def clear(self) -> None:
        self._handlers.clear()

    async def fire_filter(self, name: str, payload: Any) -> Any:
        """Run the filter chain for ``name`` and return the final payload."""
        for handler in list(self._handlers.get(name, [])):
            result = await _call(handler.callback, payload)
            if result is not None:
                payload = result
        return payload

    async def fire_action(self, name: str, payload: Any) -> None:
        """Notify every handler of ``name``."""
        for handler in list(self._handlers.get(name, [])):
            try:
                await _call(handler.callback, payload)
            except Exception as e:
                logger.error(f"Hook handler for {name} failed: {e}", exc_info=True)


async def _call(callback: Callable[[Any], Any], payload: Any) -> Any:
    result = callback(payload)
    if inspect.isawaitable(result):
        result = await result
    return result
