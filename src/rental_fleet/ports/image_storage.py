from __future__ import annotations

from abc import ABC, abstractmethod


class ImageStorage(ABC):
    """
    Port for the object-storage bucket holding vehicle images.

    Objects are keyed by the same path stored on each car_images row.
    Removing a key that does not exist is not an error.
    """

    @abstractmethod
    def remove(self, paths: list[str]) -> None:
        """Remove the objects stored under the given paths."""
        ...
