"""Per-kind handler registry and synchronous dispatch."""

import inspect
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .models import Event, EventKind, Payload

logger = logging.getLogger(__name__)

Handler = Callable[[Payload], None]


class DispatchRegistry:
    """Ordered handler lists keyed by event kind.

    Handlers run synchronously in registration order. A handler that raises
    stops delivery of that event to the handlers after it; the exception
    propagates to the caller of dispatch().
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[Handler]] = {kind: [] for kind in EventKind}

    def register(self, kind: EventKind, handler: Handler) -> None:
        """Append a handler for an event kind.

        Args:
            kind: Event kind to handle
            handler: Callable receiving the event payload

        Raises:
            TypeError: If kind is not an EventKind, or handler is not a plain callable
        """
        if not isinstance(kind, EventKind):
            raise TypeError(f"Expected EventKind, got {type(kind).__name__}")
        if not callable(handler):
            raise TypeError(f"Handler for {kind.name} is not callable: {handler!r}")
        if inspect.iscoroutinefunction(handler):
            raise TypeError(
                f"Handler for {kind.name} is a coroutine function; handlers are called synchronously"
            )

        self._handlers[kind].append(handler)
        logger.debug(f"Registered handler {getattr(handler, '__qualname__', handler)!r} for {kind.name}")

    def handlers(self, kind: EventKind) -> Tuple[Handler, ...]:
        return tuple(self._handlers[kind])

    def handler_count(self, kind: Optional[EventKind] = None) -> int:
        """Handlers for one kind, or for all kinds when kind is None."""
        if kind is not None:
            return len(self._handlers[kind])
        return sum(len(handlers) for handlers in self._handlers.values())

    def dispatch(self, event: Event) -> int:
        """Invoke every handler registered for the event's kind.

        Returns:
            Number of handlers called
        """
        handlers = tuple(self._handlers[event.kind])
        for handler in handlers:
            handler(event.payload)
        return len(handlers)
