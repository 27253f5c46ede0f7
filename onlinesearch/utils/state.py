"""Observable state cells that replay their latest value to new subscribers."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Callable
from typing import Any, Deque, Generic, TypeVar

from onlinesearch.logging import logger

T = TypeVar("T")
Listener = Callable[[T], Any]


class Subscription(Generic[T]):
    """Handle returned by :meth:`StateCell.subscribe`; cancel it to stop updates."""

    def __init__(self, cell: StateCell[T], listener: Listener[T]) -> None:
        self._cell = cell
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._cell._remove(self)

    def __enter__(self) -> Subscription[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class StateCell(Generic[T]):
    """Single value holder broadcasting changes to its subscribers.

    Subscribers receive the current value synchronously on subscription and
    then every distinct value in the order it was set. Values set from inside
    a listener are queued and delivered after the current round, so ordering
    holds for every subscriber.

    ``on_active`` runs before the first subscriber is attached and may raise
    to refuse the subscription. ``on_idle`` runs after the last one leaves.
    """

    def __init__(
        self,
        value: T,
        *,
        name: str = "state",
        on_active: Callable[[], None] | None = None,
        on_idle: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self._value = value
        self._subscriptions: list[Subscription[T]] = []
        self._on_active = on_active
        self._on_idle = on_idle
        self._pending: Deque[T] = deque()
        self._dispatching = False
        self._delivering: T = value

    @property
    def value(self) -> T:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def set(self, value: T) -> bool:
        """Store ``value`` and notify subscribers; returns ``False`` if unchanged."""

        if value == self._value:
            return False
        self._value = value
        self._pending.append(value)
        if self._dispatching:
            return True

        self._dispatching = True
        try:
            while self._pending:
                item = self._pending.popleft()
                self._delivering = item
                for subscription in list(self._subscriptions):
                    if subscription.active:
                        self._deliver(subscription, item)
        finally:
            self._dispatching = False
        return True

    def subscribe(self, listener: Listener[T]) -> Subscription[T]:
        if not self._subscriptions and self._on_active is not None:
            self._on_active()
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        # Mid-dispatch, queued values still reach the new subscriber after this replay.
        self._deliver(subscription, self._delivering if self._dispatching else self._value)
        return subscription

    async def stream(self) -> AsyncIterator[T]:
        """Iterate over the current value and every later change.

        Wrap in :func:`contextlib.aclosing` when breaking out early so the
        subscription is released right away.
        """

        queue: asyncio.Queue[T] = asyncio.Queue()
        subscription = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.cancel()

    def _remove(self, subscription: Subscription[T]) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            return
        if not self._subscriptions and self._on_idle is not None:
            self._on_idle()

    def _deliver(self, subscription: Subscription[T], value: T) -> None:
        try:
            subscription.listener(value)
        except Exception:
            logger.exception("state_subscriber_failed", cell=self.name)


__all__ = ["Listener", "StateCell", "Subscription"]
