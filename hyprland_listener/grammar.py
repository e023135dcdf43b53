"""Line grammar for the Hyprland event socket.

Each notification is one ``name>>payload`` line. A line is accepted only when
exactly one pattern of the grammar matches it in full.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, List, Pattern, Tuple
import re

from .models import EventKind

# One or two decimal digits
WORKSPACE_ID = r"[0-9]{1,2}"


@dataclass(frozen=True)
class EventPattern:
    """Pattern mapping one wire line shape to an event kind.

    Attributes:
        kind: Event kind produced when the pattern matches
        regex: Regular expression with named groups, matched against the whole line

    Examples:
        >>> pattern = EventPattern(EventKind.MONITOR_ADDED, r"monitoradded>>(?P<monitor>.*)")
        >>> pattern.match("monitoradded>>DP-1").group("monitor")
        'DP-1'
        >>> pattern.match("monitoradded") is None
        True
    """

    kind: EventKind
    regex: str
    compiled: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Compile the regex once."""
        try:
            compiled = re.compile(self.regex)
        except re.error as e:
            raise ValueError(f"Invalid event pattern '{self.regex}': {e}")
        object.__setattr__(self, "compiled", compiled)

    @property
    def fields(self) -> Tuple[str, ...]:
        """Named capture groups, in pattern order."""
        return tuple(sorted(self.compiled.groupindex, key=self.compiled.groupindex.get))

    def match(self, line: str):
        """Full-line match, or None."""
        return self.compiled.fullmatch(line)


EVENT_PATTERNS: Tuple[EventPattern, ...] = (
    EventPattern(EventKind.WORKSPACE_CHANGED, rf"workspace>>(?P<workspace>{WORKSPACE_ID}|)"),
    EventPattern(EventKind.WORKSPACE_DELETED, rf"destroyworkspace>>(?P<workspace>{WORKSPACE_ID})"),
    EventPattern(EventKind.WORKSPACE_ADDED, rf"createworkspace>>(?P<workspace>{WORKSPACE_ID})"),
    EventPattern(EventKind.ACTIVE_MONITOR_CHANGED, rf"activemon>>(?P<monitor>.*),(?P<workspace>{WORKSPACE_ID})"),
    EventPattern(EventKind.ACTIVE_WINDOW_CHANGED, r"activewindow>>(?P<window_class>.*),(?P<title>.*)"),
    EventPattern(EventKind.FULLSCREEN_STATE_CHANGED, r"fullscreen>>(?P<state>[01])"),
    EventPattern(EventKind.MONITOR_REMOVED, r"monitorremoved>>(?P<monitor>.*)"),
    EventPattern(EventKind.MONITOR_ADDED, r"monitoradded>>(?P<monitor>.*)"),
)


class EventGrammar:
    """A set of event patterns evaluated together against each line.

    The built-in patterns each start with a distinct ``name>>`` prefix and
    must match the whole line, so no line can match two of them; several
    matches only arise with custom grammars whose patterns overlap.
    """

    def __init__(self, patterns: Iterable[EventPattern] = EVENT_PATTERNS) -> None:
        self.patterns: Tuple[EventPattern, ...] = tuple(patterns)
        if not self.patterns:
            raise ValueError("Event grammar needs at least one pattern")

    def matches(self, line: str) -> List[Tuple[EventPattern, "re.Match[str]"]]:
        """Return every (pattern, match) pair whose pattern matches the whole line."""
        found = []
        for pattern in self.patterns:
            match = pattern.match(line)
            if match is not None:
                found.append((pattern, match))
        return found

    def kinds(self) -> Tuple[EventKind, ...]:
        return tuple(pattern.kind for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


@lru_cache(maxsize=None)
def default_grammar() -> EventGrammar:
    """The process-wide Hyprland grammar, built on first use."""
    return EventGrammar(EVENT_PATTERNS)
