"""Tests for the Observable value holder."""

from __future__ import annotations

from threading import RLock

from precompile_intl.runtime import Observable


class TestObservable:
    """Subscribe, notify, unsubscribe."""

    def test_subscribe_calls_immediately(self) -> None:
        """New subscribers see the current value at once."""
        seen: list[str] = []
        Observable("en").subscribe(seen.append)
        assert seen == ["en"]

    def test_set_notifies_on_change_only(self) -> None:
        """Setting an equal value is a no-op."""
        seen: list[str] = []
        observable = Observable("en")
        observable.subscribe(seen.append)
        assert observable.set("fr") is True
        assert observable.set("fr") is False
        assert seen == ["en", "fr"]
        assert observable.value == "fr"

    def test_unsubscribe(self) -> None:
        """Unsubscribed callbacks are not called; unsubscribing twice is harmless."""
        seen: list[int] = []
        observable = Observable(0)
        unsubscribe = observable.subscribe(seen.append)
        assert observable.subscriber_count == 1
        unsubscribe()
        unsubscribe()
        observable.set(1)
        assert seen == [0]
        assert observable.subscriber_count == 0

    def test_subscribers_notified_in_order(self) -> None:
        """Subscribers run in registration order."""
        calls: list[str] = []
        observable = Observable(False)
        observable.subscribe(lambda v: calls.append(f"a:{v}"))
        observable.subscribe(lambda v: calls.append(f"b:{v}"))
        calls.clear()
        observable.set(True)
        assert calls == ["a:True", "b:True"]

    def test_unsubscribe_during_notification(self) -> None:
        """A subscriber may unsubscribe itself while being notified."""
        observable = Observable(0)
        seen: list[int] = []
        unsubscribe = None

        def once(value: int) -> None:
            seen.append(value)
            if value and unsubscribe is not None:
                unsubscribe()

        unsubscribe = observable.subscribe(once)
        observable.set(1)
        observable.set(2)
        assert seen == [0, 1]

    def test_shared_lock_reentrant(self) -> None:
        """Subscribers may read another observable sharing the lock."""
        lock = RLock()
        first = Observable("a", lock=lock)
        second = Observable(1, lock=lock)
        seen: list[tuple[str, int]] = []
        first.subscribe(lambda v: seen.append((v, second.value)))
        first.set("b")
        assert seen == [("a", 1), ("b", 1)]


class TestObservableConstruction:
    """Construction with the default and an explicit lock."""

    def test_without_lock(self) -> None:
        """A private lock is created when none is passed."""
        observable = Observable("en")
        assert observable.value == "en"
        assert observable.subscriber_count == 0

    def test_with_lock(self) -> None:
        """An explicit RLock is accepted and used for updates."""
        observable = Observable("en", lock=RLock())
        assert observable.set("de") is True
        assert observable.value == "de"

    def test_exported_from_package(self) -> None:
        """The package imports and re-exports Observable."""
        import precompile_intl.runtime

        assert precompile_intl.runtime.Observable is Observable
        assert Observable("x", lock=None).value == "x"
