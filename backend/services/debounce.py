"""
Keyed debouncer on the asyncio event loop.

push(key, value) arms a timer for `key`; pushing again before it fires
cancels the pending timer and re-arms it with the new value. When the quiet
period elapses the callback runs once with the last value pushed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Hashable
from typing import Any

Commit = Callable[[Any, Any], None]


class Debouncer:
    def __init__(self, delay: float, commit: Commit) -> None:
        self.delay = delay
        self._commit = commit
        self._handles: dict[Hashable, asyncio.TimerHandle] = {}
        self._values: dict[Hashable, Any] = {}

    @property
    def pending(self) -> list[Hashable]:
        return list(self._handles)

    def push(self, key: Hashable, value: Any) -> None:
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()
        self._values[key] = value
        loop = asyncio.get_running_loop()
        self._handles[key] = loop.call_later(self.delay, self._fire, key)

    def rekey(self, old_key: Hashable, new_key: Hashable) -> None:
        """Move a pending value to a new key, keeping what is left of its quiet period."""
        handle = self._handles.pop(old_key, None)
        if handle is None:
            return
        handle.cancel()
        loop = asyncio.get_running_loop()
        remaining = max(handle.when() - loop.time(), 0)
        self._values[new_key] = self._values.pop(old_key)
        self._handles[new_key] = loop.call_later(remaining, self._fire, new_key)

    def cancel(self, key: Hashable | None = None) -> None:
        """Drop pending value(s) without committing."""
        keys = list(self._handles) if key is None else [key]
        for k in keys:
            handle = self._handles.pop(k, None)
            if handle is not None:
                handle.cancel()
            self._values.pop(k, None)

    def flush(self, key: Hashable | None = None) -> None:
        """Commit pending value(s) now instead of waiting for the timer."""
        keys = list(self._handles) if key is None else [key]
        for k in keys:
            handle = self._handles.get(k)
            if handle is not None:
                handle.cancel()
                self._fire(k)

    def _fire(self, key: Hashable) -> None:
        self._handles.pop(key, None)
        value = self._values.pop(key)
        self._commit(key, value)
