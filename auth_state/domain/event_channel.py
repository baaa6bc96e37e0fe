"""Replay-latest publish/subscribe channel.

A :class:`ReplayChannel` caches the most recent value and hands it to every new
subscriber straight away, then forwards each later publish in order. Delivery
is synchronous and unbatched; publishing the same value twice emits twice.
"""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

from auth_state.domain import logging as domain_logging

T = TypeVar("T")

Listener = Callable[[T], None]


class Subscription:
    """Handle returned by :meth:`ReplayChannel.subscribe`."""

    def __init__(self, channel: "ReplayChannel", listener: Callable) -> None:
        self._channel = channel
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop delivery to the listener. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._channel._remove(self)


class ReplayChannel(Generic[T]):
    """Synchronous pub/sub stream that replays its latest value."""

    def __init__(self, initial: T, *, name: str = "channel") -> None:
        self._value: T = initial
        self._subscriptions: List[Subscription] = []
        self.name = name

    @property
    def value(self) -> T:
        """The most recently published value (or the seed value)."""
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, listener: Listener[T]) -> Subscription:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        self._deliver(subscription, self._value)
        return subscription

    def publish(self, value: T) -> None:
        self._value = value
        # Snapshot so listeners that (un)subscribe mid-publish do not change
        # who receives this value.
        for subscription in list(self._subscriptions):
            if subscription.active:
                self._deliver(subscription, value)

    def _deliver(self, subscription: Subscription, value: T) -> None:
        try:
            subscription._listener(value)
        except Exception as exc:
            domain_logging.warn(
                f"Listener on {self.name} raised {type(exc).__name__}: {exc}",
                tag="EVENT",
                exc_info=True,
            )

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass


__all__ = ["ReplayChannel", "Subscription"]
