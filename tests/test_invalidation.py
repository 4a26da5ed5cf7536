from __future__ import annotations

from potluck.core.invalidation import InvalidationBus, event_scope


def test_revisions_are_per_scope():
    bus = InvalidationBus()
    assert bus.revision(event_scope("a")) == 0
    bus.publish(event_scope("a"))
    bus.publish(event_scope("a"), ("items",))
    assert bus.revision(event_scope("a")) == 2
    assert bus.revision(event_scope("b")) == 0


def test_failing_subscriber_does_not_block_others():
    bus = InvalidationBus()
    received = []

    def broken(notice):
        raise RuntimeError("subscriber down")

    bus.subscribe(broken)
    bus.subscribe(received.append)
    notice = bus.publish("event:x", ("meals",))
    assert received == [notice]
    assert notice.revision == 1


def test_forget_drops_scope_revision():
    bus = InvalidationBus()
    bus.publish(event_scope("a"))
    bus.publish(event_scope("b"))
    bus.forget(event_scope("a"))
    bus.forget(event_scope("missing"))
    assert bus.revision(event_scope("a")) == 0
    assert bus.revision(event_scope("b")) == 1
