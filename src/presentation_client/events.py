"""Typed listener registries.

An Event holds an ordered list of listeners for one kind of notification.
Listeners are added and removed synchronously and are called in registration
order when the event is raised. Used for:
- Connection close signals (Connection.on_close)
- Hierarchy/content change notifications (PresentationManager)
- Ruleset and ruleset variable modifications
"""

from __future__ import annotations

__all__ = [
    "Event",
    "RemoveListener",
]

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

# Calling it removes the listener it was returned for
RemoveListener = Callable[[], None]


@dataclass
class _Subscription(Generic[T]):
    listener: Callable[[T], None]
    once: bool


class Event(Generic[T]):
    """Ordered registry of listeners for one notification kind.

    Usage:
        changed: Event[str] = Event()
        remove = changed.add_listener(lambda value: print(value))
        changed.raise_event("abc")  # prints "abc"
        remove()
    """

    def __init__(self) -> None:
        """Initialize an event with no listeners."""
        self._subscriptions: list[_Subscription[T]] = []

    @property
    def num_listeners(self) -> int:
        """Return the current number of listeners."""
        return len(self._subscriptions)

    def add_listener(self, listener: Callable[[T], None]) -> RemoveListener:
        """Register a listener called on every raise.

        Args:
            listener: Callable receiving the event argument.

        Returns:
            Function that removes this listener.
        """
        return self._add(listener, once=False)

    def add_once(self, listener: Callable[[T], None]) -> RemoveListener:
        """Register a listener that is removed after the next raise.

        Args:
            listener: Callable receiving the event argument.

        Returns:
            Function that removes this listener before it fires.
        """
        return self._add(listener, once=True)

    def remove_listener(self, listener: Callable[[T], None]) -> bool:
        """Remove the first registration of a listener.

        Args:
            listener: Listener previously passed to add_listener/add_once.

        Returns:
            True if removed, False if it was not registered.
        """
        for index, subscription in enumerate(self._subscriptions):
            if subscription.listener == listener:
                del self._subscriptions[index]
                return True
        return False

    def has(self, listener: Callable[[T], None]) -> bool:
        """Check whether a listener is registered."""
        return any(s.listener == listener for s in self._subscriptions)

    def clear(self) -> None:
        """Remove all listeners."""
        self._subscriptions.clear()

    def raise_event(
        self,
        arg: T,
        *,
        on_error: Callable[[Callable[[T], None], Exception], None] | None = None,
    ) -> None:
        """Call every listener with the given argument.

        Listeners added or removed while raising take effect on the next raise.
        Exceptions raised by a listener propagate to the caller unless on_error
        is given, in which case it receives the listener and the exception and
        the remaining listeners are still called.

        Args:
            arg: Value passed to each listener.
            on_error: Optional handler for listener exceptions.
        """
        snapshot = list(self._subscriptions)
        for subscription in snapshot:
            if subscription.once:
                self._discard(subscription)
            if on_error is None:
                subscription.listener(arg)
                continue
            try:
                subscription.listener(arg)
            except Exception as e:
                on_error(subscription.listener, e)

    def _add(self, listener: Callable[[T], None], *, once: bool) -> RemoveListener:
        subscription = _Subscription(listener=listener, once=once)
        self._subscriptions.append(subscription)
        return lambda: self._discard(subscription)

    def _discard(self, subscription: _Subscription[T]) -> None:
        # Identity match: the same listener may be registered more than once
        for index, existing in enumerate(self._subscriptions):
            if existing is subscription:
                del self._subscriptions[index]
                return
