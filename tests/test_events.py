"""Tests for the typed listener registry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from presentation_client.events import Event


@pytest.fixture
def event() -> Event[str]:
    return Event()


class TestEvent:
    """Listener registration and raising."""

    def test_listeners_called_in_registration_order(self, event: Event[str]) -> None:
        calls: list[str] = []
        event.add_listener(lambda arg: calls.append(f"first:{arg}"))
        event.add_listener(lambda arg: calls.append(f"second:{arg}"))

        event.raise_event("x")

        assert calls == ["first:x", "second:x"]

    def test_remove_function_unregisters(self, event: Event[str]) -> None:
        listener = MagicMock()
        remove = event.add_listener(listener)

        remove()
        event.raise_event("x")

        listener.assert_not_called()
        assert event.num_listeners == 0

    def test_remove_listener_by_reference(self, event: Event[str]) -> None:
        listener = MagicMock()
        event.add_listener(listener)

        assert event.remove_listener(listener) is True
        assert event.remove_listener(listener) is False
        assert not event.has(listener)

    def test_once_listener_fires_once(self, event: Event[str]) -> None:
        listener = MagicMock()
        event.add_once(listener)

        event.raise_event("a")
        event.raise_event("b")

        listener.assert_called_once_with("a")

    def test_listener_added_while_raising_fires_next_time(self, event: Event[str]) -> None:
        late = MagicMock()
        event.add_listener(lambda _arg: event.add_listener(late))

        event.raise_event("a")
        late.assert_not_called()

        event.raise_event("b")
        late.assert_called_once_with("b")

    def test_listener_exception_propagates(self, event: Event[str]) -> None:
        event.add_listener(MagicMock(side_effect=ValueError("bad listener")))

        with pytest.raises(ValueError, match="bad listener"):
            event.raise_event("x")

    def test_on_error_receives_failure_and_later_listeners_run(self, event: Event[str]) -> None:
        error = ValueError("bad listener")
        failing = MagicMock(side_effect=error)
        later = MagicMock()
        on_error = MagicMock()
        event.add_listener(failing)
        event.add_listener(later)

        event.raise_event("x", on_error=on_error)

        on_error.assert_called_once_with(failing, error)
        later.assert_called_once_with("x")

    def test_clear(self, event: Event[str]) -> None:
        event.add_listener(MagicMock())
        event.add_once(MagicMock())

        event.clear()

        assert event.num_listeners == 0
