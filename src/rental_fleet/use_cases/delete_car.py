"""Delete car use case."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass

from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import RELATED_TABLES, CarStore, CarTable
from rental_fleet.ports.image_storage import ImageStorage
from rental_fleet.use_cases.error_policy import ErrorTranslator, best_effort, store_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeleteCarRequest:
    car_id: str


@dataclass(frozen=True, slots=True)
class DeleteCarResponse:
    deleted: bool


class DeleteCar:
    """
    Delete a car, every row it owns and its stored images.

    1. Collect the storage paths of the car's images
    2. Delete pricing, images, features and specifications rows (in parallel
       when the store allows it); the first failure aborts the delete
    3. Delete the car row
    4. Remove the collected paths from storage, best effort: once the rows
       are gone the delete has succeeded

    Deleting a car that does not exist succeeds and touches nothing.
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

    def execute(self, request: DeleteCarRequest) -> DeleteCarResponse:
        """
        Raises:
            StoreError: If reading the images or deleting any row fails
        """
        car_id = request.car_id

        with store_errors("delete_car", self._translate, car_id=car_id):
            images = self._store.select_related(CarTable.IMAGES, car_id)
            paths = [row["path"] for row in images if row.get("path")]

            self._delete_related(car_id)
            self._store.delete_car(car_id)

        if paths:
            best_effort("delete_car.remove_images", self._storage.remove, paths)

        logger.info("Car deleted", extra={"car_id": car_id, "image_count": len(paths)})
        return DeleteCarResponse(deleted=True)

    def _delete_related(self, car_id: str) -> None:
        if not self._store.supports_concurrent_calls:
            for table in RELATED_TABLES:
                self._store.delete_related(table, car_id)
            return

        with ThreadPoolExecutor(max_workers=len(RELATED_TABLES)) as executor:
            futures = [
                executor.submit(self._store.delete_related, table, car_id)
                for table in RELATED_TABLES
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                future.result()
