"""Supabase Storage implementation of ImageStorage."""

from __future__ import annotations

import logging

from supabase import Client

from rental_fleet.ports.image_storage import ImageStorage

logger = logging.getLogger(__name__)


class SupabaseImageStorage(ImageStorage):
    """
    Removes vehicle images from a Supabase Storage bucket.

    Errors raised by the storage client propagate unchanged; callers decide
    whether a failed removal matters.
    """

    def __init__(self, client: Client, bucket: str) -> None:
        """
        Args:
            client: Supabase client (service role key for admin deletes)
            bucket: Name of the bucket holding vehicle images
        """
        self._client = client
        self._bucket = bucket

    def remove(self, paths: list[str]) -> None:
        if not paths:
            return
        self._client.storage.from_(self._bucket).remove(paths)
        logger.info("Removed images from storage", extra={"bucket": self._bucket, "count": len(paths)})
