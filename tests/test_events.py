"""Tests for the board event bus."""

from taskboard.events import EventBus


def test_subscribers_receive_kwargs_in_order():
    bus = EventBus()
    seen = []
    bus.subscribe("notify", lambda message: seen.append(("first", message)))
    bus.subscribe("notify", lambda message: seen.append(("second", message)))
    bus.emit("notify", message="hi")
    assert seen == [("first", "hi"), ("second", "hi")]


def test_failing_callback_does_not_block_others():
    bus = EventBus()
    seen = []

    def boom(**kwargs):
        raise RuntimeError("boom")

    bus.subscribe("tasks_changed", boom)
    bus.subscribe("tasks_changed", lambda tasks: seen.append(tasks))
    bus.emit("tasks_changed", tasks=[])
    assert seen == [[]]


def test_unsubscribe_and_unknown_event():
    bus = EventBus()
    seen = []
    cb = lambda **kw: seen.append(kw)  # noqa: E731
    bus.subscribe("x", cb)
    bus.unsubscribe("x", cb)
    bus.unsubscribe("y", cb)
    bus.emit("x", a=1)
    bus.emit("never-subscribed")
    assert seen == []
