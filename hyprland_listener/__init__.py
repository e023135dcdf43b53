"""Hyprland Event Listener

Typed event-stream client for the Hyprland compositor.

This package:
- Connects to the Hyprland event socket (.socket2.sock)
- Decodes each notification line into a typed Event
- Dispatches events, in arrival order, to handlers registered per event kind
- Runs either as an asyncio coroutine or as a single blocking call
"""

from .config import ListenerConfig
from .decoder import decode
from .errors import (
    AmbiguousEventError,
    ConfigurationError,
    DecodeError,
    EncodingError,
    ErrorCode,
    FieldConversionError,
    LineTooLongError,
    ListenerError,
    ListenerStateError,
    TransportError,
)
from .listener import EventListener, ListenerState
from .models import Event, EventKind, MonitorEventData, WindowEventData
from .reassembler import PartialLinePolicy

__version__ = "1.0.0"

__all__ = [
    "AmbiguousEventError",
    "ConfigurationError",
    "DecodeError",
    "EncodingError",
    "ErrorCode",
    "Event",
    "EventKind",
    "EventListener",
    "FieldConversionError",
    "LineTooLongError",
    "ListenerConfig",
    "ListenerError",
    "ListenerState",
    "ListenerStateError",
    "MonitorEventData",
    "PartialLinePolicy",
    "TransportError",
    "WindowEventData",
    "decode",
]
