"""Observable values for the store's active locale and loading state.

A minimal publish/subscribe point: subscribers are called once with the
current value when they subscribe and again after every change. Updates and
notifications run under the owner's lock, so subscribers observe changes in
the order they were applied.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from threading import RLock

__all__ = ["Observable", "Subscriber", "Unsubscribe"]

type Subscriber[T] = Callable[[T], None]
type Unsubscribe = Callable[[], None]


class Observable[T]:
    """Value holder with an explicit observer registry.

    Example:
        >>> seen = []
        >>> locale = Observable("en")
        >>> unsubscribe = locale.subscribe(seen.append)
        >>> locale.set("fr")
        True
        >>> unsubscribe()
        >>> locale.set("de")
        True
        >>> seen
        ['en', 'fr']
    """

    __slots__ = ("_lock", "_subscribers", "_value")

    def __init__(self, initial: T, *, lock: RLock | None = None) -> None:
        self._value = initial
        self._lock = lock if lock is not None else RLock()
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        """Current value."""
        with self._lock:
            return self._value

    def set(self, value: T) -> bool:
        """Update the value and notify subscribers.

        Returns:
            True if the value changed (subscribers were notified)
        """
        with self._lock:
            if value == self._value:
                return False
            self._value = value
            for subscriber in tuple(self._subscribers):
                subscriber(value)
            return True

    def subscribe(self, callback: Subscriber[T]) -> Unsubscribe:
        """Register a callback and call it immediately with the current value.

        Returns:
            Function removing the callback; calling it twice is harmless
        """
        with self._lock:
            self._subscribers.append(callback)
            callback(self._value)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        """Number of registered subscribers."""
        with self._lock:
            return len(self._subscribers)
