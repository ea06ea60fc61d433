"""Listing surfaces: admin list, public fleet, related cars, categories.

All three car listings share one projection: each joined row is reduced to
a primary image URL (sorted by sort_order, first flagged primary, else
first) and a per-day price (base_price of the pricing row, whichever shape
the join returned it in).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rental_fleet.domain.assembly import primary_image, price_of, resolve_flags, to_datetime
from rental_fleet.domain.car import AdminCarListItem, FleetCarListItem, RelatedCarListItem
from rental_fleet.domain.errors import ValidationError
from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import CarListQuery, CarStore
from rental_fleet.use_cases.error_policy import ErrorTranslator, store_errors

NEWEST_FIRST = (("created_at", True),)
FEATURED_THEN_NEWEST = (("featured", True), ("created_at", True))

DEFAULT_RELATED_LIMIT = 3


def _primary_image_url(row: dict[str, Any]) -> str | None:
    image = primary_image(row.get("images"))
    return image.get("url") if image else None


class ListAdminCars:
    """Every car, newest first, including the visibility flags."""

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self) -> list[AdminCarListItem]:
        with store_errors("list_admin_cars", self._translate):
            rows = self._store.list_cars(CarListQuery(order_by=NEWEST_FIRST))

        return [
            AdminCarListItem(
                id=str(row["id"]),
                slug=row["slug"],
                name=row["name"],
                category=row.get("category"),
                created_at=to_datetime(row.get("created_at")),
                primary_image_url=_primary_image_url(row),
                price_per_day=price_of(row.get("pricing")),
                **resolve_flags(row),
            )
            for row in rows
        ]


class ListFleetCars:
    """Visible cars for the public fleet page, featured first then newest."""

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self) -> list[FleetCarListItem]:
        with store_errors("list_fleet_cars", self._translate):
            rows = self._store.list_cars(CarListQuery.visible(order_by=FEATURED_THEN_NEWEST))

        return [
            FleetCarListItem(
                id=str(row["id"]),
                slug=row["slug"],
                name=row["name"],
                category=row.get("category"),
                short_description=row.get("short_description"),
                is_featured=resolve_flags(row)["featured"],
                primary_image_url=_primary_image_url(row),
                price_per_day=price_of(row.get("pricing")),
            )
            for row in rows
        ]


@dataclass(frozen=True, slots=True)
class ListRelatedCarsRequest:
    car_id: str
    limit: int = DEFAULT_RELATED_LIMIT


class ListRelatedCars:
    """
    Visible cars in the same category as a given car, excluding that car.

    A car that does not exist or has no category has no related cars.
    """

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self, request: ListRelatedCarsRequest) -> list[RelatedCarListItem]:
        """
        Raises:
            ValidationError: If limit is below 1
            StoreError: If the store fails
        """
        if request.limit < 1:
            raise ValidationError(
                errors=[{"field": "limit", "message": "Must be >= 1", "code": "INVALID_RANGE"}]
            )

        with store_errors("list_related_cars", self._translate, car_id=request.car_id):
            current = self._store.get_car(car_id=request.car_id)
            if not current or not current.get("category"):
                return []

            rows = self._store.list_cars(
                CarListQuery.visible(
                    category=current["category"],
                    exclude_id=request.car_id,
                    order_by=NEWEST_FIRST,
                    limit=request.limit,
                )
            )

        return [
            RelatedCarListItem(
                id=str(row["id"]),
                slug=row["slug"],
                name=row["name"],
                category=row.get("category"),
                primary_image_url=_primary_image_url(row),
                price_per_day=price_of(row.get("pricing")),
            )
            for row in rows
            if str(row["id"]) != request.car_id
        ][: request.limit]


class ListCategories:
    """Distinct, sorted categories of the visible cars."""

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self) -> list[str]:
        with store_errors("list_categories", self._translate):
            rows = self._store.list_cars(CarListQuery.visible(with_relations=False))

        return sorted({row["category"] for row in rows if row.get("category")})
