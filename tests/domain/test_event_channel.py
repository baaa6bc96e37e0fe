from __future__ import annotations

import logging

from auth_state.domain.event_channel import ReplayChannel
from auth_state.domain.logging import DOMAIN_LOGGER_NAME


def test_new_subscriber_receives_seed_value() -> None:
    channel = ReplayChannel(False)
    received = []

    channel.subscribe(received.append)

    assert received == [False]


def test_late_subscriber_receives_latest_then_subsequent_values() -> None:
    channel = ReplayChannel(0)
    for value in (1, 2, 3):
        channel.publish(value)
    received = []

    channel.subscribe(received.append)
    assert received == [3]

    channel.publish(4)
    assert received == [3, 4]


def test_publish_does_not_deduplicate() -> None:
    channel = ReplayChannel("a")
    received = []
    channel.subscribe(received.append)

    channel.publish("b")
    channel.publish("b")

    assert received == ["a", "b", "b"]
    assert channel.value == "b"


def test_listeners_notified_in_subscription_order() -> None:
    channel = ReplayChannel(0)
    calls = []
    channel.subscribe(lambda v: calls.append(("first", v)))
    channel.subscribe(lambda v: calls.append(("second", v)))
    calls.clear()

    channel.publish(7)

    assert calls == [("first", 7), ("second", 7)]


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_failing_listener_does_not_block_later_listeners() -> None:
    channel = ReplayChannel(0, name="numbers")
    received = []

    def explode(value):
        if value:
            raise RuntimeError("boom")

    channel.subscribe(explode)
    channel.subscribe(received.append)

    domain_logger = logging.getLogger(DOMAIN_LOGGER_NAME)
    handler = _ListHandler()
    domain_logger.addHandler(handler)
    try:
        channel.publish(1)
    finally:
        domain_logger.removeHandler(handler)

    assert received == [0, 1]
    warnings = [r for r in handler.records if r.levelno == logging.WARNING]
    assert warnings
    assert "numbers" in warnings[0].getMessage()
    assert "boom" in warnings[0].getMessage()
    assert warnings[0].tag == "EVENT"


def test_failing_listener_during_replay_is_still_subscribed() -> None:
    channel = ReplayChannel(0)
    calls = []

    def flaky(value):
        calls.append(value)
        if value == 0:
            raise ValueError("not yet")

    subscription = channel.subscribe(flaky)
    channel.publish(5)

    assert subscription.active
    assert calls == [0, 5]


def test_unsubscribe_stops_delivery_and_is_idempotent() -> None:
    channel = ReplayChannel(0)
    received = []
    subscription = channel.subscribe(received.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    channel.publish(1)

    assert received == [0]
    assert not subscription.active
    assert channel.subscriber_count == 0


def test_unsubscribe_during_publish_only_affects_later_publishes() -> None:
    channel = ReplayChannel(0)
    received = []
    holder = {}

    def first(value):
        if value == 1:
            holder["second"].unsubscribe()

    channel.subscribe(first)
    holder["second"] = channel.subscribe(received.append)

    channel.publish(1)
    channel.publish(2)

    assert received == [0]


def test_subscribe_during_publish_starts_with_replay() -> None:
    channel = ReplayChannel(0)
    late = []

    def spawn(value):
        if value == 1 and not late:
            channel.subscribe(late.append)

    channel.subscribe(spawn)
    channel.publish(1)
    channel.publish(2)

    assert late == [1, 2]
