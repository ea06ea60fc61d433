from __future__ import annotations

import os

DEFAULT_IMAGES_BUCKET = "vehicle-images"

STORE_BACKENDS = ("postgres", "supabase")


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def store_backend() -> str:
    backend = os.getenv("CAR_STORE_BACKEND", "postgres").strip().lower()

    if backend not in STORE_BACKENDS:
        raise RuntimeError(
            f"CAR_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)} (got {backend!r})"
        )

    return backend


def supabase_credentials() -> tuple[str, str]:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY")

    if not url or not key:
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY (or SUPABASE_ANON_KEY) must be set"
        )

    return url, key


def images_bucket() -> str:
    return os.getenv("VEHICLE_IMAGES_BUCKET") or DEFAULT_IMAGES_BUCKET
