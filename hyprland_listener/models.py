"""Event data models for the Hyprland event listener.

Every notification read from the event socket becomes one immutable Event
whose payload shape is fixed by its EventKind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

# Workspace ids fit in an unsigned byte
WORKSPACE_ID_MIN = 0
WORKSPACE_ID_MAX = 255

WorkspaceId = int


class EventKind(Enum):
    """Event kinds, valued by their wire name."""

    WORKSPACE_CHANGED = "workspace"
    WORKSPACE_DELETED = "destroyworkspace"
    WORKSPACE_ADDED = "createworkspace"
    ACTIVE_MONITOR_CHANGED = "activemon"
    ACTIVE_WINDOW_CHANGED = "activewindow"
    FULLSCREEN_STATE_CHANGED = "fullscreen"
    MONITOR_REMOVED = "monitorremoved"
    MONITOR_ADDED = "monitoradded"


WORKSPACE_KINDS = frozenset({
    EventKind.WORKSPACE_CHANGED,
    EventKind.WORKSPACE_DELETED,
    EventKind.WORKSPACE_ADDED,
})

MONITOR_NAME_KINDS = frozenset({
    EventKind.MONITOR_ADDED,
    EventKind.MONITOR_REMOVED,
})


def is_valid_workspace_id(value: Any) -> bool:
    """True for ints (not bools) within the unsigned byte range."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and WORKSPACE_ID_MIN <= value <= WORKSPACE_ID_MAX
    )


@dataclass(frozen=True)
class WindowEventData:
    """Active window payload."""

    window_class: str  # Window class (app id)
    title: str  # Window title


@dataclass(frozen=True)
class MonitorEventData:
    """Active monitor payload."""

    monitor: str  # Monitor name (e.g., "DP-1")
    workspace: WorkspaceId  # Workspace shown on that monitor

    def __post_init__(self) -> None:
        """Validate workspace id range."""
        if not is_valid_workspace_id(self.workspace):
            raise ValueError(f"Invalid workspace id: {self.workspace!r}")


Payload = Union[WorkspaceId, MonitorEventData, Optional[WindowEventData], bool, str]


@dataclass(frozen=True)
class Event:
    """One decoded Hyprland notification."""

    kind: EventKind
    payload: Payload

    def __post_init__(self) -> None:
        """Validate that the payload has the shape required by the kind."""
        kind, payload = self.kind, self.payload

        if kind in WORKSPACE_KINDS:
            if not is_valid_workspace_id(payload):
                raise ValueError(f"{kind.name} requires a workspace id in 0-255, got {payload!r}")
        elif kind is EventKind.ACTIVE_MONITOR_CHANGED:
            if not isinstance(payload, MonitorEventData):
                raise ValueError(f"{kind.name} requires MonitorEventData, got {type(payload).__name__}")
        elif kind is EventKind.ACTIVE_WINDOW_CHANGED:
            if payload is not None and not isinstance(payload, WindowEventData):
                raise ValueError(f"{kind.name} requires WindowEventData or None, got {type(payload).__name__}")
        elif kind is EventKind.FULLSCREEN_STATE_CHANGED:
            if not isinstance(payload, bool):
                raise ValueError(f"{kind.name} requires a bool, got {type(payload).__name__}")
        elif kind in MONITOR_NAME_KINDS:
            if not isinstance(payload, str):
                raise ValueError(f"{kind.name} requires a monitor name, got {type(payload).__name__}")

    def to_line(self) -> str:
        """Encode the event back to its wire line (without terminator).

        Fullscreen uses the protocol's inverted encoding: True is sent as "0".
        """
        name = self.kind.value
        payload = self.payload

        if self.kind is EventKind.ACTIVE_MONITOR_CHANGED:
            return f"{name}>>{payload.monitor},{payload.workspace}"
        if self.kind is EventKind.ACTIVE_WINDOW_CHANGED:
            if payload is None:
                return f"{name}>>,"
            return f"{name}>>{payload.window_class},{payload.title}"
        if self.kind is EventKind.FULLSCREEN_STATE_CHANGED:
            return f"{name}>>{'0' if payload else '1'}"
        return f"{name}>>{payload}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable representation."""
        payload = self.payload
        if isinstance(payload, MonitorEventData):
            data: Any = {"monitor": payload.monitor, "workspace": payload.workspace}
        elif isinstance(payload, WindowEventData):
            data = {"class": payload.window_class, "title": payload.title}
        else:
            data = payload
        return {"event": self.kind.value, "data": data}
