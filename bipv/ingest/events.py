"""
Minimal event primitive for dataset notifications.

Mirrors the listener registries exposed by 3D tile loaders: add_listener()
returns a callable that removes the listener again.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol


Listener = Callable[..., Any]


class EventSource(Protocol):
    def add_listener(self, listener: Listener) -> Callable[[], None]: ...


class Event:
    """A list of listeners raised synchronously, in registration order."""

    def __init__(self):
        self._listeners: list[Listener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            self.remove_listener(listener)

        return remove

    def remove_listener(self, listener: Listener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def raise_event(self, *args: Any) -> None:
        # Snapshot so listeners may detach while being notified
        for listener in list(self._listeners):
            listener(*args)
