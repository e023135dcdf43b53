"""Unit tests for the dispatch registry."""

import pytest

from hyprland_listener.models import Event, EventKind, MonitorEventData
from hyprland_listener.registry import DispatchRegistry


class TestRegistration:
    """Tests for handler registration."""

    def test_empty_registry(self):
        registry = DispatchRegistry()
        assert registry.handler_count() == 0
        for kind in EventKind:
            assert registry.handlers(kind) == ()

    def test_register_appends_in_order(self):
        registry = DispatchRegistry()

        def first(payload): pass
        def second(payload): pass

        registry.register(EventKind.MONITOR_ADDED, first)
        registry.register(EventKind.MONITOR_ADDED, second)

        assert registry.handlers(EventKind.MONITOR_ADDED) == (first, second)
        assert registry.handler_count(EventKind.MONITOR_ADDED) == 2
        assert registry.handler_count(EventKind.MONITOR_REMOVED) == 0
        assert registry.handler_count() == 2

    def test_same_handler_twice_runs_twice(self):
        registry = DispatchRegistry()
        calls = []
        handler = calls.append

        registry.register(EventKind.WORKSPACE_CHANGED, handler)
        registry.register(EventKind.WORKSPACE_CHANGED, handler)
        registry.dispatch(Event(EventKind.WORKSPACE_CHANGED, 4))

        assert calls == [4, 4]

    def test_rejects_non_callable(self):
        registry = DispatchRegistry()
        with pytest.raises(TypeError, match="not callable"):
            registry.register(EventKind.WORKSPACE_CHANGED, "print")

    def test_rejects_unknown_kind(self):
        registry = DispatchRegistry()
        with pytest.raises(TypeError, match="EventKind"):
            registry.register("workspace", print)

    def test_rejects_coroutine_function(self):
        registry = DispatchRegistry()

        async def handler(payload):
            pass

        with pytest.raises(TypeError, match="coroutine"):
            registry.register(EventKind.WORKSPACE_CHANGED, handler)

    def test_handlers_snapshot_is_immutable(self):
        registry = DispatchRegistry()
        registry.register(EventKind.WORKSPACE_CHANGED, print)

        snapshot = registry.handlers(EventKind.WORKSPACE_CHANGED)
        registry.register(EventKind.WORKSPACE_CHANGED, repr)

        assert snapshot == (print,)


class TestDispatch:
    """Tests for dispatching one event."""

    def test_dispatch_calls_only_matching_kind(self):
        registry = DispatchRegistry()
        workspace_calls, monitor_calls = [], []
        registry.register(EventKind.WORKSPACE_CHANGED, workspace_calls.append)
        registry.register(EventKind.ACTIVE_MONITOR_CHANGED, monitor_calls.append)

        called = registry.dispatch(Event(EventKind.ACTIVE_MONITOR_CHANGED, MonitorEventData("DP-1", 2)))

        assert called == 1
        assert workspace_calls == []
        assert monitor_calls == [MonitorEventData("DP-1", 2)]

    def test_dispatch_without_handlers(self):
        registry = DispatchRegistry()
        assert registry.dispatch(Event(EventKind.MONITOR_REMOVED, "DP-1")) == 0

    def test_handlers_run_in_registration_order(self):
        registry = DispatchRegistry()
        order = []
        registry.register(EventKind.FULLSCREEN_STATE_CHANGED, lambda state: order.append(("a", state)))
        registry.register(EventKind.FULLSCREEN_STATE_CHANGED, lambda state: order.append(("b", state)))

        registry.dispatch(Event(EventKind.FULLSCREEN_STATE_CHANGED, True))

        assert order == [("a", True), ("b", True)]

    def test_failing_handler_stops_remaining_handlers(self):
        """A raising handler propagates and later handlers do not run."""
        registry = DispatchRegistry()
        calls = []

        def boom(payload):
            raise RuntimeError("handler failed")

        registry.register(EventKind.WORKSPACE_ADDED, calls.append)
        registry.register(EventKind.WORKSPACE_ADDED, boom)
        registry.register(EventKind.WORKSPACE_ADDED, calls.append)

        with pytest.raises(RuntimeError, match="handler failed"):
            registry.dispatch(Event(EventKind.WORKSPACE_ADDED, 5))

        assert calls == [5]

    def test_handler_registered_during_dispatch_waits_for_next_event(self):
        """Dispatch iterates over the handlers present when it started."""
        registry = DispatchRegistry()
        late_calls = []

        def register_late(payload):
            registry.register(EventKind.WORKSPACE_CHANGED, late_calls.append)

        registry.register(EventKind.WORKSPACE_CHANGED, register_late)

        assert registry.dispatch(Event(EventKind.WORKSPACE_CHANGED, 1)) == 1
        assert late_calls == []

        registry.dispatch(Event(EventKind.WORKSPACE_CHANGED, 2))
        assert late_calls == [2]
