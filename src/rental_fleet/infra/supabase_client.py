"""Supabase client shared by the store and storage adapters."""

from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client

from rental_fleet.infra.config import supabase_credentials


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Get a cached Supabase client.

    The client is stateless between calls (plain HTTP), so one instance is
    shared by every request. Reads SUPABASE_URL and SUPABASE_SERVICE_KEY
    (or SUPABASE_ANON_KEY).
    """
    url, key = supabase_credentials()
    return create_client(url, key)
