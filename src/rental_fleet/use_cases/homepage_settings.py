"""Homepage settings: which car the homepage feature section shows."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from rental_fleet.domain.assembly import primary_image, to_datetime
from rental_fleet.domain.car import AggregateCar
from rental_fleet.domain.errors import NotFoundError
from rental_fleet.domain.homepage import FeaturedCarCandidate, HomepageSettings
from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import CarListQuery, CarStore
from rental_fleet.use_cases.car_reader import CarReader
from rental_fleet.use_cases.error_policy import ErrorTranslator, store_errors

logger = logging.getLogger(__name__)


def _to_settings(row: dict[str, Any]) -> HomepageSettings:
    featured = row.get("featured_car_id")
    return HomepageSettings(
        id=str(row["id"]),
        featured_car_id=str(featured) if featured else None,
        created_at=to_datetime(row.get("created_at")),
        updated_at=to_datetime(row.get("updated_at")),
    )


class GetHomepageSettings:
    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self) -> HomepageSettings | None:
        with store_errors("get_homepage_settings", self._translate):
            row = self._store.get_homepage_settings()
        return _to_settings(row) if row else None


@dataclass(frozen=True, slots=True)
class SaveHomepageSettingsRequest:
    featured_car_id: str | None


class SaveHomepageSettings:
    """
    Point the homepage at a car (or at none).

    There is at most one settings row: it is updated when present and
    created on first save.
    """

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._store = car_store
        self._translate = error_translator
        self._reader = CarReader(car_store, error_translator)
        self._clock = clock

    def execute(self, request: SaveHomepageSettingsRequest) -> HomepageSettings:
        """
        Raises:
            NotFoundError: If featured_car_id names a car that does not exist
            StoreError: If the store fails
        """
        car_id = request.featured_car_id
        if car_id is not None and self._reader.get_base_by_id(car_id) is None:
            raise NotFoundError(resource="Car", identifier=car_id)

        with store_errors("save_homepage_settings", self._translate, featured_car_id=car_id):
            current = self._store.get_homepage_settings()
            if current is None:
                row = self._store.insert_homepage_settings({"featured_car_id": car_id})
            else:
                row = self._store.update_homepage_settings(
                    str(current["id"]),
                    {"featured_car_id": car_id, "updated_at": self._clock()},
                )
                # Removed between the read and the write
                if row is None:
                    row = self._store.insert_homepage_settings({"featured_car_id": car_id})

        logger.info("Homepage settings saved", extra={"featured_car_id": car_id})
        return _to_settings(row)


class ListHomepageCandidates:
    """Visible cars that can be featured, alphabetical by name."""

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self) -> list[FeaturedCarCandidate]:
        with store_errors("list_homepage_candidates", self._translate):
            rows = self._store.list_cars(CarListQuery.visible(order_by=(("name", False),)))

        candidates = []
        for row in rows:
            image = primary_image(row.get("images"))
            candidates.append(
                FeaturedCarCandidate(
                    id=str(row["id"]),
                    slug=row["slug"],
                    name=row["name"],
                    category=row.get("category"),
                    primary_image_url=image.get("url") if image else None,
                )
            )
        return candidates


class GetFeaturedCar:
    """
    The car the homepage features, with everything it owns.

    None when nothing is configured or the configured car is gone, hidden
    or unavailable.
    """

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._settings = GetHomepageSettings(car_store, error_translator)
        self._reader = CarReader(car_store, error_translator)

    def execute(self) -> AggregateCar | None:
        settings = self._settings.execute()
        if settings is None or settings.featured_car_id is None:
            return None

        car = self._reader.get_aggregate(car_id=settings.featured_car_id)
        if car is None or not car.car.is_visible:
            return None
        return car
