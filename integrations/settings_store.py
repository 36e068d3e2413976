"""In-memory stand-in for the real-time settings database (subscribe/set semantics)."""

from __future__ import annotations

from threading import Lock
from typing import Any, Callable, Dict, List

SettingsListener = Callable[[Dict[str, Any]], None]

DEFAULT_SETTINGS: Dict[str, Any] = {
    "notificationsEnabled": False,
    "showWeather": False,
    "autoRefresh": False,
}


class InMemorySettingsStore:
    """
    Key-value store with last-write-wins semantics.

    Subscribers receive the full settings snapshot immediately on subscription
    and again after every write.
    """

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._values: Dict[str, Any] = dict(DEFAULT_SETTINGS)
        if initial:
            self._values.update(initial)
        self._listeners: List[SettingsListener] = []
        self._lock = Lock()

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)

    def get(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            snapshot = dict(self._values)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)
            snapshot = dict(self._values)
        listener(snapshot)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
