"""Create car use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rental_fleet.domain.assembly import assemble_aggregate
from rental_fleet.domain.car import FLAG_DEFAULTS, AggregateCar, CarWriteData
from rental_fleet.domain.slug import generate_slug
from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import CarStore, CarTable
from rental_fleet.use_cases.error_policy import ErrorTranslator, best_effort, store_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CreateCarRequest:
    data: CarWriteData
    created_by: str | None = None


@dataclass(frozen=True, slots=True)
class CreateCarResponse:
    car: AggregateCar


class CreateCar:
    """
    Create a car together with its pricing, images, features and
    specifications.

    The store has no cross-table transaction. The root row is written
    first; if any related insert then fails, the root row is deleted again
    (best effort, related rows go with it through the foreign keys) and the
    original failure is raised.
    """

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    def execute(self, request: CreateCarRequest) -> CreateCarResponse:
        """
        Raises:
            ValidationError: If name or category is empty (before any store call)
            StoreError: If the root insert or any related insert fails
        """
        data = request.data
        data.validate()

        values: dict[str, Any] = {
            "name": data.name,
            "slug": generate_slug(data.name),
            "category": data.category,
            "description": data.description,
            "short_description": data.short_description,
            "created_by": request.created_by,
        }
        for flag, default in FLAG_DEFAULTS.items():
            value = getattr(data, flag)
            values[flag] = default if value is None else value

        # Nothing to clean up if this fails
        with store_errors("create_car", self._translate):
            car_row = self._store.insert_car(values)

        car_id = str(car_row["id"])

        try:
            with store_errors("create_car", self._translate, car_id=car_id):
                related = self._insert_related(car_id, data)
        except Exception:
            logger.warning("Removing partially created car", extra={"car_id": car_id})
            best_effort("create_car.compensate", self._store.delete_car, car_id)
            raise

        logger.info("Car created", extra={"car_id": car_id, "slug": values["slug"]})
        return CreateCarResponse(car=assemble_aggregate(car_row, **related))

    def _insert_related(self, car_id: str, data: CarWriteData) -> dict[str, Any]:
        def tagged(payloads: list[Any]) -> list[dict[str, Any]]:
            return [{**payload.to_row(), "car_id": car_id} for payload in payloads]

        pricing: list[dict[str, Any]] = []
        images: list[dict[str, Any]] = []
        features: list[dict[str, Any]] = []
        specifications: list[dict[str, Any]] = []

        if data.pricing is not None:
            pricing = self._store.insert_related(CarTable.PRICING, tagged([data.pricing]))
        if data.images:
            images = self._store.insert_related(CarTable.IMAGES, tagged(data.images))
        if data.features:
            features = self._store.insert_related(CarTable.FEATURES, tagged(data.features))
        if data.specifications:
            specifications = self._store.insert_related(
                CarTable.SPECIFICATIONS, tagged(data.specifications)
            )

        return {
            "pricing": pricing,
            "images": images,
            "features": features,
            "specifications": specifications,
        }
