"""Test suite for UpdateCar use case."""

from __future__ import annotations

import logging
from decimal import Decimal
from unittest.mock import Mock

import pytest

from rental_fleet.adapters.in_memory_car_store import InMemoryCarStore
from rental_fleet.adapters.in_memory_image_storage import InMemoryImageStorage
from rental_fleet.domain.car import (
    CarUpdate,
    CarWriteData,
    FeatureInput,
    ImageInput,
    PricingInput,
    SpecificationInput,
)
from rental_fleet.domain.errors import NotFoundError, StoreError, ValidationError
from rental_fleet.ports.car_store import CarStore, CarTable
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest
from rental_fleet.use_cases.update_car import UpdateCar, UpdateCarRequest


@pytest.fixture()
def car_id(store: InMemoryCarStore, car_data: CarWriteData) -> str:
    return CreateCar(car_store=store).execute(CreateCarRequest(data=car_data)).car.id


@pytest.fixture()
def use_case(store: InMemoryCarStore, storage: InMemoryImageStorage) -> UpdateCar:
    return UpdateCar(car_store=store, image_storage=storage)


def _update(use_case: UpdateCar, car_id: str, **changes: object):
    return use_case.execute(UpdateCarRequest(car_id=car_id, changes=CarUpdate(**changes))).car


# ==============================================================================
# Root fields
# ==============================================================================


def test_renaming_regenerates_slug(use_case: UpdateCar, car_id: str) -> None:
    car = _update(use_case, car_id, name="Tesla Model 3 Long Range")

    assert car.car.name == "Tesla Model 3 Long Range"
    assert car.slug == "tesla-model-3-long-range"


def test_omitted_fields_are_unchanged(use_case: UpdateCar, car_id: str) -> None:
    car = _update(use_case, car_id, short_description="Updated")

    assert car.car.short_description == "Updated"
    assert car.car.description == "All-electric sedan"
    assert car.car.featured is True
    assert car.pricing is not None
    assert len(car.images) == 2


def test_null_clears_text_and_resets_flags(use_case: UpdateCar, car_id: str) -> None:
    car = _update(use_case, car_id, description=None, featured=None, hidden=True)

    assert car.car.description is None
    assert car.car.featured is False
    assert car.car.hidden is True


def test_clearing_name_is_rejected_before_any_write() -> None:
    store = Mock(spec=CarStore)

    with pytest.raises(ValidationError):
        UpdateCar(car_store=store, image_storage=Mock()).execute(
            UpdateCarRequest(car_id="c1", changes=CarUpdate(name=""))
        )

    assert store.method_calls == []


def test_duplicate_image_paths_are_rejected_before_any_write() -> None:
    store = Mock(spec=CarStore)
    images = [
        ImageInput(url="https://cdn.example.com/a.jpg", path="model-3/front.jpg"),
        ImageInput(url="https://cdn.example.com/b.jpg", path="model-3/front.jpg"),
    ]

    with pytest.raises(ValidationError) as exc_info:
        UpdateCar(car_store=store, image_storage=Mock()).execute(
            UpdateCarRequest(car_id="c1", changes=CarUpdate(images=images))
        )

    assert exc_info.value.errors[0]["code"] == "DUPLICATE_PATH"
    assert store.method_calls == []


def test_missing_car_is_not_found(use_case: UpdateCar) -> None:
    with pytest.raises(NotFoundError):
        _update(use_case, "missing", name="X")


# ==============================================================================
# Pricing
# ==============================================================================


def test_pricing_is_upserted_in_place(
    use_case: UpdateCar, store: InMemoryCarStore, car_id: str
) -> None:
    before = store.select_related(CarTable.PRICING, car_id)[0]

    car = _update(use_case, car_id, pricing=PricingInput(base_price=Decimal("99.00")))

    rows = store.select_related(CarTable.PRICING, car_id)
    assert len(rows) == 1
    assert rows[0]["id"] == before["id"]
    assert car.pricing is not None
    assert car.pricing.base_price == Decimal("99.00")


def test_pricing_is_created_when_missing(use_case: UpdateCar, store: InMemoryCarStore) -> None:
    car_id = store.insert_car({"slug": "bare", "name": "Bare", "category": "SUV"})["id"]

    car = _update(use_case, car_id, pricing=PricingInput(base_price=Decimal("50.00")))

    assert car.pricing is not None
    assert car.pricing.base_price == Decimal("50.00")


# ==============================================================================
# Images
# ==============================================================================


def test_images_are_reconciled_by_path(
    use_case: UpdateCar, store: InMemoryCarStore, storage: InMemoryImageStorage, car_id: str
) -> None:
    front_id = next(
        row["id"]
        for row in store.select_related(CarTable.IMAGES, car_id)
        if row["path"] == "model-3/front.jpg"
    )

    car = _update(
        use_case,
        car_id,
        images=[
            ImageInput(url="https://cdn/front-v2.jpg", path="model-3/front.jpg", is_primary=True),
            ImageInput(url="https://cdn/rear.jpg", path="model-3/rear.jpg", sort_order=5),
        ],
    )

    by_path = {image.path: image for image in car.images}
    assert set(by_path) == {"model-3/front.jpg", "model-3/rear.jpg"}
    assert by_path["model-3/front.jpg"].id == front_id
    assert by_path["model-3/front.jpg"].url == "https://cdn/front-v2.jpg"
    assert storage.removed == [["model-3/side.jpg"]]


def test_empty_image_list_removes_every_image(
    use_case: UpdateCar, store: InMemoryCarStore, storage: InMemoryImageStorage, car_id: str
) -> None:
    car = _update(use_case, car_id, images=[])

    assert car.images == []
    assert store.select_related(CarTable.IMAGES, car_id) == []
    assert sorted(storage.removed[0]) == ["model-3/front.jpg", "model-3/side.jpg"]


def test_pathless_images_are_replaced(use_case: UpdateCar, store: InMemoryCarStore) -> None:
    car_id = store.insert_car({"slug": "bare", "name": "Bare", "category": "SUV"})["id"]
    store.insert_related(CarTable.IMAGES, [{"car_id": car_id, "url": "old.jpg", "path": None}])

    car = _update(use_case, car_id, images=[ImageInput(url="new.jpg")])

    assert [image.url for image in car.images] == ["new.jpg"]


def test_storage_failure_is_logged_not_raised(
    store: InMemoryCarStore, car_id: str, caplog: pytest.LogCaptureFixture
) -> None:
    storage = Mock()
    storage.remove.side_effect = RuntimeError("bucket offline")
    use_case = UpdateCar(car_store=store, image_storage=storage)

    with caplog.at_level(logging.WARNING):
        car = _update(use_case, car_id, images=[])

    assert car.images == []
    assert any(
        getattr(record, "operation", None) == "update_car.remove_images"
        for record in caplog.records
    )


# ==============================================================================
# Features and specifications
# ==============================================================================


def test_features_and_specifications_are_replaced(use_case: UpdateCar, car_id: str) -> None:
    car = _update(
        use_case,
        car_id,
        features=[FeatureInput(name="Heated seats"), FeatureInput(name="Sunroof")],
        specifications=[],
    )

    assert [feature.name for feature in car.features] == ["Heated seats", "Sunroof"]
    assert car.specifications == []


# ==============================================================================
# Store failures
# ==============================================================================


def test_related_failure_keeps_root_patch(
    use_case: UpdateCar,
    store: InMemoryCarStore,
    car_id: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def failing_delete(*args: object, **kwargs: object) -> None:
        raise RuntimeError("features table is locked")

    monkeypatch.setattr(store, "delete_related", failing_delete)

    with pytest.raises(StoreError) as exc_info:
        _update(
            use_case,
            car_id,
            short_description="Patched",
            specifications=[SpecificationInput(name="Seats", value="5")],
        )

    assert exc_info.value.context == {"operation": "update_car", "car_id": car_id}
    assert store.get_car(car_id=car_id)["short_description"] == "Patched"
