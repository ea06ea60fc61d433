from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class CarTable(str, Enum):
    CARS = "cars"
    PRICING = "car_pricing"
    IMAGES = "car_images"
    FEATURES = "car_features"
    SPECIFICATIONS = "car_specifications"


# Tables owned by a car, keyed by car_id
RELATED_TABLES: tuple[CarTable, ...] = (
    CarTable.PRICING,
    CarTable.IMAGES,
    CarTable.FEATURES,
    CarTable.SPECIFICATIONS,
)

# Key under which each related table appears on a joined car row
RELATION_KEYS: dict[CarTable, str] = {
    CarTable.PRICING: "pricing",
    CarTable.IMAGES: "images",
    CarTable.FEATURES: "features",
    CarTable.SPECIFICATIONS: "specifications",
}


@dataclass(frozen=True, slots=True)
class CarListQuery:
    """
    Filtered, ordered scan of the cars table.

    Filters use AND semantics and compare stored values for equality
    (exclude_id is the only negative filter). order_by holds
    (column, descending) pairs applied in sequence. With with_relations the
    rows carry "pricing" and "images" (url, is_primary, sort_order), which
    is everything a list projection needs.
    """

    available: bool | None = None
    hidden: bool | None = None
    category: str | None = None
    exclude_id: str | None = None
    order_by: tuple[tuple[str, bool], ...] = ()
    limit: int | None = None
    with_relations: bool = True

    @classmethod
    def visible(cls, **kwargs: Any) -> CarListQuery:
        """Only cars shown on public surfaces."""
        return cls(available=True, hidden=False, **kwargs)


class CarStore(ABC):
    """
    Port for the relational store holding cars and their related tables.

    Rows cross this boundary as plain dicts keyed by column name. The store
    offers no multi-call transaction: every method stands on its own, and
    callers compensate for partial failures themselves.

    Contract:
        - Lookups of a missing row return None (or []), never raise
        - Any transport or database failure propagates as the adapter's
          native exception; callers translate it
        - A joined fetch may return "pricing" as a list or as a single
          mapping; callers normalize with first_or_null
    """

    # True when independent calls may run on separate threads at once
    supports_concurrent_calls: bool = False

    # --- cars ---------------------------------------------------------------

    @abstractmethod
    def get_car(self, *, car_id: str | None = None, slug: str | None = None) -> dict[str, Any] | None:
        """Root row by id or slug, without related data."""
        ...

    @abstractmethod
    def get_car_with_relations(
        self, *, car_id: str | None = None, slug: str | None = None
    ) -> dict[str, Any] | None:
        """Root row plus "pricing", "images", "features" and "specifications"."""
        ...

    @abstractmethod
    def list_cars(self, query: CarListQuery) -> list[dict[str, Any]]: ...

    @abstractmethod
    def insert_car(self, values: dict[str, Any]) -> dict[str, Any]:
        """Insert a root row and return it with its generated id and timestamps."""
        ...

    @abstractmethod
    def update_car(self, car_id: str, values: dict[str, Any]) -> None: ...

    @abstractmethod
    def delete_car(self, car_id: str) -> None: ...

    # --- related tables -----------------------------------------------------

    @abstractmethod
    def select_related(self, table: CarTable, car_id: str) -> list[dict[str, Any]]: ...

    @abstractmethod
    def insert_related(self, table: CarTable, rows: list[dict[str, Any]]) -> list[dict[str, Any]]: ...

    @abstractmethod
    def upsert_related(
        self,
        table: CarTable,
        rows: list[dict[str, Any]],
        on_conflict: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        """Insert rows, replacing any existing row that matches on the on_conflict columns."""
        ...

    @abstractmethod
    def delete_related(self, table: CarTable, car_id: str, ids: list[str] | None = None) -> None:
        """Delete a car's rows from a related table, optionally only the given ids."""
        ...

    # --- homepage settings --------------------------------------------------

    @abstractmethod
    def get_homepage_settings(self) -> dict[str, Any] | None: ...

    @abstractmethod
    def insert_homepage_settings(self, values: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    def update_homepage_settings(self, settings_id: str, values: dict[str, Any]) -> dict[str, Any] | None: ...
