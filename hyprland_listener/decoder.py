"""Line decoder: one wire line to one typed Event."""

import logging
from typing import Callable, Dict, Iterable, Iterator, Optional

from .errors import AmbiguousEventError, FieldConversionError
from .grammar import EventGrammar, default_grammar
from .models import (
    WORKSPACE_ID_MAX,
    WORKSPACE_ID_MIN,
    Event,
    EventKind,
    MonitorEventData,
    Payload,
    WindowEventData,
    WorkspaceId,
)

logger = logging.getLogger(__name__)

# Used when "workspace>>" carries no id
DEFAULT_WORKSPACE_ID: WorkspaceId = 1


def _workspace_id(line: str, field: str, value: str) -> WorkspaceId:
    """Convert a captured workspace field to an unsigned byte."""
    try:
        workspace = int(value)
    except ValueError:
        raise FieldConversionError(line, field, value, "not an integer")
    if not WORKSPACE_ID_MIN <= workspace <= WORKSPACE_ID_MAX:
        raise FieldConversionError(
            line, field, value, f"outside {WORKSPACE_ID_MIN}-{WORKSPACE_ID_MAX}"
        )
    return workspace


def _workspace_changed(line: str, fields: Dict[str, str]) -> Payload:
    captured = fields["workspace"]
    if not captured:
        return DEFAULT_WORKSPACE_ID
    return _workspace_id(line, "workspace", captured)


def _workspace_only(line: str, fields: Dict[str, str]) -> Payload:
    return _workspace_id(line, "workspace", fields["workspace"])


def _active_monitor(line: str, fields: Dict[str, str]) -> Payload:
    return MonitorEventData(
        monitor=fields["monitor"],
        workspace=_workspace_id(line, "workspace", fields["workspace"]),
    )


def _active_window(line: str, fields: Dict[str, str]) -> Payload:
    window_class = fields["window_class"]
    title = fields["title"]
    # Either side empty means no window has focus
    if not window_class or not title:
        return None
    return WindowEventData(window_class=window_class, title=title)


def _fullscreen(line: str, fields: Dict[str, str]) -> Payload:
    # "0" is fullscreen on; literal protocol mapping
    return fields["state"] == "0"


def _monitor_name(line: str, fields: Dict[str, str]) -> Payload:
    return fields["monitor"]


_CONVERTERS: Dict[EventKind, Callable[[str, Dict[str, str]], Payload]] = {
    EventKind.WORKSPACE_CHANGED: _workspace_changed,
    EventKind.WORKSPACE_DELETED: _workspace_only,
    EventKind.WORKSPACE_ADDED: _workspace_only,
    EventKind.ACTIVE_MONITOR_CHANGED: _active_monitor,
    EventKind.ACTIVE_WINDOW_CHANGED: _active_window,
    EventKind.FULLSCREEN_STATE_CHANGED: _fullscreen,
    EventKind.MONITOR_REMOVED: _monitor_name,
    EventKind.MONITOR_ADDED: _monitor_name,
}


def decode(line: str, grammar: Optional[EventGrammar] = None) -> Event:
    """Decode a single event line.

    Args:
        line: One line of the event stream, without its terminator
        grammar: Grammar to match against (default: the Hyprland grammar)

    Returns:
        The decoded Event

    Raises:
        AmbiguousEventError: If zero or more than one pattern matches the line
        FieldConversionError: If a captured field cannot be converted

    Examples:
        >>> decode("workspace>>7").payload
        7
        >>> decode("activewindow>>,").payload is None
        True
    """
    grammar = grammar or default_grammar()
    matches = grammar.matches(line)

    if len(matches) != 1:
        raise AmbiguousEventError(line, [pattern.kind for pattern, _ in matches])

    pattern, match = matches[0]
    fields = {name: value or "" for name, value in match.groupdict().items()}
    payload = _CONVERTERS[pattern.kind](line, fields)

    return Event(kind=pattern.kind, payload=payload)


def decode_many(lines: Iterable[str], grammar: Optional[EventGrammar] = None) -> Iterator[Event]:
    """Decode lines lazily, stopping at the first failure."""
    for line in lines:
        event = decode(line, grammar)
        logger.debug(f"Decoded {event.kind.name} from {line!r}")
        yield event
