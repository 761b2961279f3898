from __future__ import annotations

import threading
from copy import deepcopy
from typing import Any


class MenuStore:
    """Process-memory holder for the server's working document.

    Every access takes the same lock, so concurrent posts cannot interleave a
    read-modify-write. Last write wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, Any] | None = None

    def get(self) -> dict[str, Any] | None:
        with self._lock:
            return deepcopy(self._data)

    def set(self, data: dict[str, Any]) -> None:
        with self._lock:
            self._data = deepcopy(data)

    def clear(self) -> None:
        with self._lock:
            self._data = None

    def is_empty(self) -> bool:
        with self._lock:
            return self._data is None
