from __future__ import annotations

import threading

from rental_fleet.ports.image_storage import ImageStorage


class InMemoryImageStorage(ImageStorage):
    """Bucket stand-in for tests: a set of stored paths plus a log of removals."""

    def __init__(self, paths: list[str] | None = None) -> None:
        self._lock = threading.Lock()
        self.paths: set[str] = set(paths or [])
        self.removed: list[list[str]] = []

    def remove(self, paths: list[str]) -> None:
        with self._lock:
            self.removed.append(list(paths))
            self.paths.difference_update(paths)
