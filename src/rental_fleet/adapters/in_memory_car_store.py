from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from rental_fleet.domain.car import FLAG_DEFAULTS
from rental_fleet.ports.car_store import (
    RELATED_TABLES,
    RELATION_KEYS,
    CarListQuery,
    CarStore,
    CarTable,
)

_LISTING_RELATIONS = (CarTable.PRICING, CarTable.IMAGES)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCarStore(CarStore):
    """
    Canonical contract implementation for tests.

    - Rows kept in insertion order, one list per table
    - Related rows cascade when their car is deleted, and the homepage
      setting pointing at it is cleared (mirrors the foreign keys)
    - Unique on cars.slug, car_pricing.car_id and car_images (car_id, path)
    - Joined fetches return "pricing" as a list, like PostgREST does
    """

    supports_concurrent_calls = True

    def __init__(
        self,
        cars: list[dict[str, Any]] | None = None,
        related: dict[CarTable, list[dict[str, Any]]] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._rows: dict[CarTable, list[dict[str, Any]]] = {table: [] for table in CarTable}
        self._homepage: list[dict[str, Any]] = []

        for car in cars or []:
            self.insert_car(car)
        for table, rows in (related or {}).items():
            self.insert_related(table, rows)

    # --- cars ---------------------------------------------------------------

    def get_car(self, *, car_id: str | None = None, slug: str | None = None) -> dict[str, Any] | None:
        with self._lock:
            row = self._find_car(car_id=car_id, slug=slug)
            return dict(row) if row else None

    def get_car_with_relations(
        self, *, car_id: str | None = None, slug: str | None = None
    ) -> dict[str, Any] | None:
        with self._lock:
            row = self._find_car(car_id=car_id, slug=slug)
            if row is None:
                return None
            return self._with_relations(row, RELATED_TABLES)

    def list_cars(self, query: CarListQuery) -> list[dict[str, Any]]:
        with self._lock:
            matches = [row for row in self._rows[CarTable.CARS] if self._matches(row, query)]

            # Apply keys last-to-first so the first pair is the primary sort
            for column, descending in reversed(query.order_by):
                matches.sort(key=lambda row: _sort_key(row.get(column)), reverse=descending)

            if query.limit is not None:
                matches = matches[: query.limit]

            if query.with_relations:
                return [self._with_relations(row, _LISTING_RELATIONS) for row in matches]
            return [dict(row) for row in matches]

    def insert_car(self, values: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            slug = values.get("slug")
            if slug and self._find_car(slug=slug) is not None:
                raise ValueError(f"duplicate key value violates unique constraint: slug={slug!r}")

            now = self._clock()
            row = {
                "id": str(uuid.uuid4()),
                "category": None,
                "description": None,
                "short_description": None,
                "created_by": None,
                **FLAG_DEFAULTS,
                "created_at": now,
                "updated_at": now,
                **values,
            }
            self._rows[CarTable.CARS].append(row)
            return dict(row)

    def update_car(self, car_id: str, values: dict[str, Any]) -> None:
        with self._lock:
            row = self._find_car(car_id=car_id)
            if row is None:
                return
            slug = values.get("slug")
            if slug and slug != row.get("slug") and self._find_car(slug=slug) is not None:
                raise ValueError(f"duplicate key value violates unique constraint: slug={slug!r}")
            row.update(values)
            row["updated_at"] = self._clock()

    def delete_car(self, car_id: str) -> None:
        with self._lock:
            self._rows[CarTable.CARS] = [
                row for row in self._rows[CarTable.CARS] if row["id"] != car_id
            ]
            for table in RELATED_TABLES:
                self._rows[table] = [row for row in self._rows[table] if row["car_id"] != car_id]
            for settings in self._homepage:
                if settings.get("featured_car_id") == car_id:
                    settings["featured_car_id"] = None

    # --- related tables -----------------------------------------------------

    def select_related(self, table: CarTable, car_id: str) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(row) for row in self._rows[table] if row["car_id"] == car_id]

    def insert_related(self, table: CarTable, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        with self._lock:
            inserted = []
            for values in rows:
                self._check_unique(table, values)
                row = {"id": str(uuid.uuid4()), **values}
                self._rows[table].append(row)
                inserted.append(dict(row))
            return inserted

    def upsert_related(
        self,
        table: CarTable,
        rows: list[dict[str, Any]],
        on_conflict: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        with self._lock:
            written = []
            for values in rows:
                existing = self._find_conflict(table, values, on_conflict)
                if existing is not None:
                    existing.update({k: v for k, v in values.items() if k != "id"})
                    written.append(dict(existing))
                else:
                    written.extend(self.insert_related(table, [values]))
            return written

    def delete_related(self, table: CarTable, car_id: str, ids: list[str] | None = None) -> None:
        with self._lock:
            self._rows[table] = [
                row
                for row in self._rows[table]
                if not (row["car_id"] == car_id and (ids is None or row["id"] in ids))
            ]

    # --- homepage settings --------------------------------------------------

    def get_homepage_settings(self) -> dict[str, Any] | None:
        with self._lock:
            return dict(self._homepage[0]) if self._homepage else None

    def insert_homepage_settings(self, values: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            now = self._clock()
            row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
            self._homepage.append(row)
            return dict(row)

    def update_homepage_settings(self, settings_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            for row in self._homepage:
                if row["id"] == settings_id:
                    row.update(values)
                    return dict(row)
            return None

    # --- helpers ------------------------------------------------------------

    def _find_car(self, *, car_id: str | None = None, slug: str | None = None) -> dict[str, Any] | None:
        for row in self._rows[CarTable.CARS]:
            if car_id is not None and row["id"] == car_id:
                return row
            if slug is not None and row.get("slug") == slug:
                return row
        return None

    def _with_relations(self, row: dict[str, Any], tables: tuple[CarTable, ...]) -> dict[str, Any]:
        joined = dict(row)
        for table in tables:
            joined[RELATION_KEYS[table]] = self.select_related(table, row["id"])
        return joined

    def _find_conflict(
        self, table: CarTable, values: dict[str, Any], columns: tuple[str, ...]
    ) -> dict[str, Any] | None:
        # NULLs never collide, same as a Postgres unique index
        if any(values.get(column) is None for column in columns):
            return None
        for row in self._rows[table]:
            if all(row.get(column) == values.get(column) for column in columns):
                return row
        return None

    def _check_unique(self, table: CarTable, values: dict[str, Any]) -> None:
        unique_columns = {
            CarTable.PRICING: ("car_id",),
            CarTable.IMAGES: ("car_id", "path"),
        }.get(table)
        if unique_columns and self._find_conflict(table, values, unique_columns) is not None:
            raise ValueError(
                f"duplicate key value violates unique constraint on {table.value} {unique_columns}"
            )

    @staticmethod
    def _matches(row: dict[str, Any], query: CarListQuery) -> bool:
        if query.available is not None and row.get("available") != query.available:
            return False
        if query.hidden is not None and row.get("hidden") != query.hidden:
            return False
        if query.category is not None and row.get("category") != query.category:
            return False
        if query.exclude_id is not None and row["id"] == query.exclude_id:
            return False
        return True


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs sort after every value ascending
    return (value is None, value if value is not None else 0)
