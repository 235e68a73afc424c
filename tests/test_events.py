"""Tests for the change-event broadcaster."""

from mc_bridge.core.models import ChangeEvent, EventType
from mc_bridge.events import EventBroadcaster


def test_listeners_called_in_order():
    broadcaster = EventBroadcaster()
    calls = []
    broadcaster.subscribe(lambda event: calls.append(("first", event.type)))
    broadcaster.subscribe(lambda event: calls.append(("second", event.type)))

    broadcaster.emit(EventType.TASK_CREATED, {"id": "mc-1"})

    assert calls == [("first", "task_created"), ("second", "task_created")]


def test_subscribe_is_idempotent():
    broadcaster = EventBroadcaster()
    received = []
    broadcaster.subscribe(received.append)
    broadcaster.subscribe(received.append)

    broadcaster.emit("task_updated", {})

    assert broadcaster.listener_count == 1
    assert len(received) == 1


def test_failing_listener_is_isolated():
    broadcaster = EventBroadcaster()
    received = []

    def broken(event):
        raise ValueError("bad listener")

    broadcaster.subscribe(broken)
    broadcaster.subscribe(received.append)

    broadcaster.broadcast(ChangeEvent(type="task_deleted", payload={"id": "mc-1"}))

    assert received[0].payload == {"id": "mc-1"}


def test_unsubscribe():
    broadcaster = EventBroadcaster()
    received = []
    broadcaster.subscribe(received.append)
    broadcaster.unsubscribe(received.append)
    broadcaster.unsubscribe(received.append)

    broadcaster.emit(EventType.AGENT_SPAWNED, {"agent_name": "Radu"})

    assert received == []
    assert broadcaster.listener_count == 0
