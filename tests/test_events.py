"""Test the event source."""

import logging

from modeline.events import EventSource, Events


def test_emit_passes_event_and_kwargs():
    events = EventSource()
    received = []
    events.subscribe(Events.FILE_SAVED, lambda **kw: received.append(kw))

    delivered = events.emit(Events.FILE_SAVED, buffer="b1")

    assert delivered == 1
    assert received == [{"event": Events.FILE_SAVED, "buffer": "b1"}]


def test_emit_without_listeners():
    assert EventSource().emit("nothing-listens") == 0


def test_subscribe_twice_calls_once():
    events = EventSource()
    calls = []

    def listener(**kw):
        calls.append(kw)

    events.subscribe("e", listener)
    events.subscribe("e", listener)
    events.emit("e")

    assert len(calls) == 1


def test_unsubscribe():
    events = EventSource()
    calls = []

    def listener(**kw):
        calls.append(kw)

    events.subscribe("e", listener)
    events.unsubscribe("e", listener)
    events.unsubscribe("e", listener)  # second time is harmless
    events.emit("e")

    assert calls == []
    assert events.listeners("e") == []


def test_failing_listener_does_not_stop_others(caplog):
    events = EventSource()
    calls = []

    def broken(**kw):
        raise RuntimeError("boom")

    events.subscribe("e", broken)
    events.subscribe("e", lambda **kw: calls.append("ok"))

    with caplog.at_level(logging.ERROR, logger="modeline.events"):
        delivered = events.emit("e")

    assert delivered == 1
    assert calls == ["ok"]
    assert any("failed for event e" in r.getMessage() for r in caplog.records)


def test_listener_may_unsubscribe_during_emit():
    events = EventSource()
    calls = []

    def once(**kw):
        calls.append("once")
        events.unsubscribe("e", once)

    events.subscribe("e", once)
    events.emit("e")
    events.emit("e")

    assert calls == ["once"]


def test_event_names_are_strings():
    for name in ("FILE_OPENED", "FILE_SAVED", "SELECTION_CHANGED", "FOCUS_CHANGED",
                 "VC_REFRESHED", "CHECKER_FINISHED"):
        assert isinstance(getattr(Events, name), str)
