"""Update car use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rental_fleet.domain.car import (
    FLAG_DEFAULTS,
    UNSET,
    AggregateCar,
    CarUpdate,
    FeatureInput,
    ImageInput,
    SpecificationInput,
)
from rental_fleet.domain.errors import NotFoundError
from rental_fleet.domain.slug import generate_slug
from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import CarStore, CarTable
from rental_fleet.ports.image_storage import ImageStorage
from rental_fleet.use_cases.car_reader import CarReader
from rental_fleet.use_cases.error_policy import ErrorTranslator, best_effort, store_errors

logger = logging.getLogger(__name__)

IMAGE_CONFLICT_KEY = ("car_id", "path")
PRICING_CONFLICT_KEY = ("car_id",)


@dataclass(frozen=True, slots=True)
class UpdateCarRequest:
    car_id: str
    changes: CarUpdate


@dataclass(frozen=True, slots=True)
class UpdateCarResponse:
    car: AggregateCar


class UpdateCar:
    """
    Apply a partial update to a car and the data it owns.

    Order of writes:
    1. Sparse patch of the root row (slug follows name)
    2. Pricing upsert keyed on car_id
    3. Images reconciled by storage path: removed paths leave storage
       (best effort) and the table, every incoming image is upserted on
       (car_id, path); images without a path cannot be matched and are
       replaced
    4. Features and specifications replaced wholesale

    A failure in steps 2-4 is raised but the root patch from step 1 is not
    undone.
    """

    def __init__(
        self,
        car_store: CarStore,
        image_storage: ImageStorage,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._storage = image_storage
        self._translate = error_translator
        self._reader = CarReader(car_store, error_translator)

    def execute(self, request: UpdateCarRequest) -> UpdateCarResponse:
        """
        Raises:
            ValidationError: If name or category is supplied but empty
            NotFoundError: If the car does not exist (before or after the update)
            StoreError: If any write fails
        """
        car_id = request.car_id
        changes = request.changes
        changes.validate()

        if self._reader.get_base_by_id(car_id) is None:
            raise NotFoundError(resource="Car", identifier=car_id)

        patch = self._build_patch(changes)
        if patch:
            with store_errors("update_car", self._translate, car_id=car_id):
                self._store.update_car(car_id, patch)

        with store_errors("update_car", self._translate, car_id=car_id):
            if changes.pricing is not UNSET and changes.pricing is not None:
                self._store.upsert_related(
                    CarTable.PRICING,
                    [{**changes.pricing.to_row(), "car_id": car_id}],
                    on_conflict=PRICING_CONFLICT_KEY,
                )
            if changes.images is not UNSET:
                self._reconcile_images(car_id, changes.images)
            if changes.features is not UNSET:
                self._replace(CarTable.FEATURES, car_id, changes.features)
            if changes.specifications is not UNSET:
                self._replace(CarTable.SPECIFICATIONS, car_id, changes.specifications)

        car = self._reader.get_aggregate(car_id=car_id)
        if car is None:
            raise NotFoundError(resource="Car", identifier=car_id)

        logger.info("Car updated", extra={"car_id": car_id, "fields": sorted(patch)})
        return UpdateCarResponse(car=car)

    @staticmethod
    def _build_patch(changes: CarUpdate) -> dict[str, Any]:
        patch: dict[str, Any] = {}

        if changes.name is not UNSET:
            patch["name"] = changes.name
            patch["slug"] = generate_slug(changes.name)
        if changes.category is not UNSET:
            patch["category"] = changes.category
        if changes.description is not UNSET:
            patch["description"] = changes.description
        if changes.short_description is not UNSET:
            patch["short_description"] = changes.short_description

        for flag, default in FLAG_DEFAULTS.items():
            value = getattr(changes, flag)
            if value is not UNSET:
                patch[flag] = default if value is None else value

        return patch

    def _reconcile_images(self, car_id: str, images: list[ImageInput]) -> None:
        existing = self._store.select_related(CarTable.IMAGES, car_id)
        incoming_paths = {image.path for image in images if image.path}

        stale = [
            row for row in existing if not row.get("path") or row["path"] not in incoming_paths
        ]
        if stale:
            stale_paths = [row["path"] for row in stale if row.get("path")]
            if stale_paths:
                # Objects leave the bucket before their rows leave the table
                best_effort("update_car.remove_images", self._storage.remove, stale_paths)
            self._store.delete_related(
                CarTable.IMAGES, car_id, ids=[str(row["id"]) for row in stale]
            )

        rows = [{**image.to_row(), "car_id": car_id} for image in images]
        keyed = [row for row in rows if row["path"]]
        unkeyed = [row for row in rows if not row["path"]]
        if keyed:
            self._store.upsert_related(CarTable.IMAGES, keyed, on_conflict=IMAGE_CONFLICT_KEY)
        if unkeyed:
            self._store.insert_related(CarTable.IMAGES, unkeyed)

    def _replace(
        self,
        table: CarTable,
        car_id: str,
        payloads: list[FeatureInput] | list[SpecificationInput],
    ) -> None:
        self._store.delete_related(table, car_id)
        if payloads:
            self._store.insert_related(
                table, [{**payload.to_row(), "car_id": car_id} for payload in payloads]
            )
