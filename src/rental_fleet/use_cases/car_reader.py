"""Read access to a car and the data it owns."""

from __future__ import annotations

from rental_fleet.domain.assembly import (
    assemble_aggregate,
    first_or_null,
    sort_images,
    to_car_record,
    to_feature_record,
    to_image_record,
    to_pricing_record,
    to_specification_record,
)
from rental_fleet.domain.car import (
    AggregateCar,
    CarRecord,
    FeatureRecord,
    ImageRecord,
    PricingRecord,
    SpecificationRecord,
)
from rental_fleet.infra.errors import translate_store_error
from rental_fleet.ports.car_store import CarStore, CarTable
from rental_fleet.use_cases.error_policy import ErrorTranslator, store_errors


class CarReader:
    """
    Point reads of a single car.

    - A missing car is None, never an error
    - Store failures surface as StoreError carrying the translated message
    - Related collections come back normalized: images sorted by
      sort_order, pricing collapsed to one record or None
    """

    def __init__(
        self,
        car_store: CarStore,
        error_translator: ErrorTranslator = translate_store_error,
    ) -> None:
        self._store = car_store
        self._translate = error_translator

    # --- root record --------------------------------------------------------

    def get_base_by_id(self, car_id: str) -> CarRecord | None:
        with store_errors("get_car", self._translate, car_id=car_id):
            row = self._store.get_car(car_id=car_id)
        return to_car_record(row) if row else None

    def get_base_by_slug(self, slug: str) -> CarRecord | None:
        with store_errors("get_car", self._translate, slug=slug):
            row = self._store.get_car(slug=slug)
        return to_car_record(row) if row else None

    # --- related data -------------------------------------------------------

    def get_pricing(self, car_id: str) -> PricingRecord | None:
        with store_errors("get_pricing", self._translate, car_id=car_id):
            row = first_or_null(self._store.select_related(CarTable.PRICING, car_id))
        return to_pricing_record(row) if row else None

    def get_images(self, car_id: str) -> list[ImageRecord]:
        with store_errors("get_images", self._translate, car_id=car_id):
            rows = self._store.select_related(CarTable.IMAGES, car_id)
        return [to_image_record(row) for row in sort_images(rows)]

    def get_features(self, car_id: str) -> list[FeatureRecord]:
        with store_errors("get_features", self._translate, car_id=car_id):
            rows = self._store.select_related(CarTable.FEATURES, car_id)
        return [to_feature_record(row) for row in rows]

    def get_specifications(self, car_id: str) -> list[SpecificationRecord]:
        with store_errors("get_specifications", self._translate, car_id=car_id):
            rows = self._store.select_related(CarTable.SPECIFICATIONS, car_id)
        return [to_specification_record(row) for row in rows]

    # --- aggregate ----------------------------------------------------------

    def get_aggregate(
        self, *, car_id: str | None = None, slug: str | None = None
    ) -> AggregateCar | None:
        """
        The car with pricing, images, features and specifications in one read.

        Exactly one of car_id or slug must be given.

        Raises:
            ValueError: If neither or both keys are given
            StoreError: If the store fails
        """
        if (car_id is None) == (slug is None):
            raise ValueError("Exactly one of car_id or slug is required")

        key = {"car_id": car_id} if car_id is not None else {"slug": slug}
        with store_errors("get_car", self._translate, **key):
            row = self._store.get_car_with_relations(car_id=car_id, slug=slug)
        return assemble_aggregate(row) if row else None
