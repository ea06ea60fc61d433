"""Supabase (PostgREST) implementation of CarStore."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from supabase import Client

from rental_fleet.ports.car_store import CarListQuery, CarStore, CarTable

_FULL_SELECT = """
    *,
    pricing:car_pricing(*),
    images:car_images(*),
    features:car_features(*),
    specifications:car_specifications(*)
"""

_LISTING_SELECT = """
    *,
    pricing:car_pricing(base_price),
    images:car_images(url, is_primary, sort_order)
"""

_HOMEPAGE_TABLE = "homepage_settings"


class SupabaseCarStore(CarStore):
    """
    CarStore backed by the Supabase REST API.

    - Joined fetches use PostgREST embedded resources; depending on how
      PostgREST detects the relationship, "pricing" arrives as a list or
      as a single object
    - Each call is an independent HTTP request: no transaction spans calls
    - update_car refreshes updated_at itself; PostgREST runs no onupdate hook
    - postgrest APIError propagates unchanged
    """

    supports_concurrent_calls = True

    def __init__(
        self,
        client: Client,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._client = client
        self._clock = clock

    # --- cars ---------------------------------------------------------------

    def get_car(self, *, car_id: str | None = None, slug: str | None = None) -> dict[str, Any] | None:
        return self._single(self._car_lookup("*", car_id=car_id, slug=slug))

    def get_car_with_relations(
        self, *, car_id: str | None = None, slug: str | None = None
    ) -> dict[str, Any] | None:
        return self._single(self._car_lookup(_FULL_SELECT, car_id=car_id, slug=slug))

    def list_cars(self, query: CarListQuery) -> list[dict[str, Any]]:
        request = self._table(CarTable.CARS).select(
            _LISTING_SELECT if query.with_relations else "*"
        )

        if query.available is not None:
            request = request.eq("available", query.available)
        if query.hidden is not None:
            request = request.eq("hidden", query.hidden)
        if query.category is not None:
            request = request.eq("category", query.category)
        if query.exclude_id is not None:
            request = request.neq("id", query.exclude_id)

        for column, descending in query.order_by:
            request = request.order(column, desc=descending)

        if query.limit is not None:
            request = request.limit(query.limit)

        return request.execute().data or []

    def insert_car(self, values: dict[str, Any]) -> dict[str, Any]:
        result = self._table(CarTable.CARS).insert(_jsonable(values)).execute()
        return result.data[0]

    def update_car(self, car_id: str, values: dict[str, Any]) -> None:
        values = {**values, "updated_at": self._clock()}
        self._table(CarTable.CARS).update(_jsonable(values)).eq("id", car_id).execute()

    def delete_car(self, car_id: str) -> None:
        self._table(CarTable.CARS).delete().eq("id", car_id).execute()

    # --- related tables -----------------------------------------------------

    def select_related(self, table: CarTable, car_id: str) -> list[dict[str, Any]]:
        return self._table(table).select("*").eq("car_id", car_id).execute().data or []

    def insert_related(self, table: CarTable, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        result = self._table(table).insert([_jsonable(row) for row in rows]).execute()
        return result.data or []

    def upsert_related(
        self,
        table: CarTable,
        rows: list[dict[str, Any]],
        on_conflict: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        if not rows:
            return []
        result = (
            self._table(table)
            .upsert([_jsonable(row) for row in rows], on_conflict=",".join(on_conflict))
            .execute()
        )
        return result.data or []

    def delete_related(self, table: CarTable, car_id: str, ids: list[str] | None = None) -> None:
        request = self._table(table).delete().eq("car_id", car_id)
        if ids is not None:
            request = request.in_("id", ids)
        request.execute()

    # --- homepage settings --------------------------------------------------

    def get_homepage_settings(self) -> dict[str, Any] | None:
        request = self._client.table(_HOMEPAGE_TABLE).select("*").order("created_at")
        return self._single(request)

    def insert_homepage_settings(self, values: dict[str, Any]) -> dict[str, Any]:
        return self._client.table(_HOMEPAGE_TABLE).insert(_jsonable(values)).execute().data[0]

    def update_homepage_settings(self, settings_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        result = (
            self._client.table(_HOMEPAGE_TABLE)
            .update(_jsonable(values))
            .eq("id", settings_id)
            .execute()
        )
        return result.data[0] if result.data else None

    # --- helpers ------------------------------------------------------------

    def _table(self, table: CarTable):
        return self._client.table(table.value)

    def _car_lookup(self, columns: str, *, car_id: str | None, slug: str | None):
        request = self._table(CarTable.CARS).select(columns)
        if car_id is not None:
            return request.eq("id", car_id)
        if slug is not None:
            return request.eq("slug", slug)
        raise ValueError("car_id or slug is required")

    @staticmethod
    def _single(request) -> dict[str, Any] | None:
        result = request.limit(1).execute()
        return result.data[0] if result.data else None


def _jsonable(values: dict[str, Any]) -> dict[str, Any]:
    """Decimals and datetimes as strings; PostgREST casts them back."""
    converted = {}
    for key, value in values.items():
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        converted[key] = value
    return converted
