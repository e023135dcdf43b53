"""Hyprland event listener.

Drives the read -> reassemble -> decode -> dispatch cycle over the event
socket. Register handlers first, then start the listener:

    listener = EventListener()
    listener.add_workspace_change_handler(lambda id: print(f"workspace {id}"))
    listener.start_listener_blocking()  # or: await listener.start_listener()
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from .config import ListenerConfig
from .decoder import decode
from .errors import ListenerError, ListenerStateError, TransportError
from .models import EventKind, MonitorEventData, WindowEventData, WorkspaceId
from .reassembler import StreamReassembler
from .registry import DispatchRegistry, Handler
from .transport import Transport, UnixSocketTransport

logger = logging.getLogger(__name__)


class ListenerState(Enum):
    """Listener lifecycle; CLOSED is terminal."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    READING = "reading"
    DISPATCHING = "dispatching"
    CLOSED = "closed"


class EventListener:
    """Listens to the Hyprland event socket and calls registered handlers.

    One instance owns one connection, one stream buffer and one handler
    registry. Handlers must be registered before the listener starts; they
    run synchronously on the listener's event loop, in registration order.
    """

    def __init__(
        self,
        config: Optional[ListenerConfig] = None,
        transport_factory: Optional[Callable[[], Transport]] = None,
    ) -> None:
        """Initialize listener.

        Args:
            config: Listener settings (default: ListenerConfig.from_env())
            transport_factory: Creates the transport; default is a Unix socket
                at the configured event socket path
        """
        self.config = config or ListenerConfig.from_env()
        self._transport_factory = transport_factory or self._default_transport
        self._registry = DispatchRegistry()
        self._state = ListenerState.IDLE
        self.events_dispatched = 0

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def registry(self) -> DispatchRegistry:
        return self._registry

    # Handler registration

    def add_handler(self, kind: EventKind, handler: Handler) -> None:
        """Register a handler for any event kind."""
        self._registry.register(kind, handler)

    def on(self, kind: EventKind) -> Callable[[Handler], Handler]:
        """Decorator form of add_handler.

        Usage:
            @listener.on(EventKind.MONITOR_ADDED)
            def handle(name):
                ...
        """

        def decorator(handler: Handler) -> Handler:
            self._registry.register(kind, handler)
            return handler

        return decorator

    def add_workspace_change_handler(self, handler: Callable[[WorkspaceId], None]) -> None:
        """Called with the workspace id when the active workspace changes."""
        self._registry.register(EventKind.WORKSPACE_CHANGED, handler)

    def add_workspace_added_handler(self, handler: Callable[[WorkspaceId], None]) -> None:
        """Called with the workspace id when a workspace is created."""
        self._registry.register(EventKind.WORKSPACE_ADDED, handler)

    def add_workspace_destroy_handler(self, handler: Callable[[WorkspaceId], None]) -> None:
        """Called with the workspace id when a workspace is destroyed."""
        self._registry.register(EventKind.WORKSPACE_DELETED, handler)

    def add_active_monitor_change_handler(self, handler: Callable[[MonitorEventData], None]) -> None:
        """Called with MonitorEventData when the focused monitor changes."""
        self._registry.register(EventKind.ACTIVE_MONITOR_CHANGED, handler)

    def add_active_window_change_handler(
        self, handler: Callable[[Optional[WindowEventData]], None]
    ) -> None:
        """Called with WindowEventData, or None when no window has focus."""
        self._registry.register(EventKind.ACTIVE_WINDOW_CHANGED, handler)

    def add_fullscreen_state_change_handler(self, handler: Callable[[bool], None]) -> None:
        """Called with the fullscreen flag when fullscreen state changes."""
        self._registry.register(EventKind.FULLSCREEN_STATE_CHANGED, handler)

    def add_monitor_added_handler(self, handler: Callable[[str], None]) -> None:
        """Called with the monitor name when a monitor is connected."""
        self._registry.register(EventKind.MONITOR_ADDED, handler)

    def add_monitor_removed_handler(self, handler: Callable[[str], None]) -> None:
        """Called with the monitor name when a monitor is disconnected."""
        self._registry.register(EventKind.MONITOR_REMOVED, handler)

    # Running

    async def start_listener(self) -> None:
        """Run the listener until the socket closes.

        Returns normally on a graceful close (empty read).

        Raises:
            ListenerStateError: If this listener has already been started
            TransportError: If connecting or reading fails
            EncodingError: If the stream is not valid UTF-8
            DecodeError: If a line is not exactly one known event
            Exception: Whatever a handler raises, unwrapped
        """
        if self._state is not ListenerState.IDLE:
            raise ListenerStateError(self._state.value)
        # Leave IDLE before the first await so a concurrent start is refused
        self._state = ListenerState.CONNECTING

        transport: Optional[Transport] = None
        reassembler = StreamReassembler(max_line_length=self.config.max_line_length)

        try:
            transport = self._transport_factory()
            await transport.connect()
            self._state = ListenerState.CONNECTED
            logger.info(f"Listening for Hyprland events ({self._registry.handler_count()} handlers)")

            while True:
                self._state = ListenerState.READING
                try:
                    await transport.readable()
                    chunk = await transport.read(self.config.read_size)
                except OSError as e:
                    raise TransportError("read", str(e))

                if not chunk:
                    logger.info("Event socket closed by Hyprland")
                    break

                self._state = ListenerState.DISPATCHING
                for line in reassembler.feed(chunk):
                    self._deliver(line)

            tail = reassembler.finish(self.config.partial_line_policy)
            if tail is not None:
                self._state = ListenerState.DISPATCHING
                self._deliver(tail)

        except ListenerError as e:
            logger.error(f"Listener stopped: {e}")
            raise
        except asyncio.CancelledError:
            logger.info("Listener cancelled")
            raise
        except Exception as e:
            logger.error(f"Listener stopped: {e}", exc_info=True)
            raise
        finally:
            self._state = ListenerState.CLOSED
            if transport is not None:
                await transport.close()

        logger.info(f"Listener closed after {self.events_dispatched} events")

    def start_listener_blocking(self) -> None:
        """Run start_listener() on a dedicated event loop until it finishes."""
        asyncio.run(self.start_listener())

    def _deliver(self, line: str) -> None:
        event = decode(line)
        called = self._registry.dispatch(event)
        self.events_dispatched += 1
        logger.debug(f"Dispatched {event.kind.name} to {called} handler(s)")

    def _default_transport(self) -> Transport:
        return UnixSocketTransport(
            self.config.resolve_socket_path(),
            connect_timeout=self.config.connect_timeout,
        )
