"""Test suite for DeleteCar use case."""

from __future__ import annotations

import logging
from unittest.mock import Mock, call

import pytest

from rental_fleet.adapters.in_memory_car_store import InMemoryCarStore
from rental_fleet.adapters.in_memory_image_storage import InMemoryImageStorage
from rental_fleet.domain.car import CarWriteData
from rental_fleet.domain.errors import StoreError
from rental_fleet.ports.car_store import RELATED_TABLES, CarStore, CarTable
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest
from rental_fleet.use_cases.delete_car import DeleteCar, DeleteCarRequest, DeleteCarResponse


@pytest.fixture()
def car_id(store: InMemoryCarStore, car_data: CarWriteData) -> str:
    return CreateCar(car_store=store).execute(CreateCarRequest(data=car_data)).car.id


def test_deletes_rows_and_stored_images(
    store: InMemoryCarStore, storage: InMemoryImageStorage, car_id: str
) -> None:
    result = DeleteCar(car_store=store, image_storage=storage).execute(
        DeleteCarRequest(car_id=car_id)
    )

    assert result == DeleteCarResponse(deleted=True)
    assert store.get_car(car_id=car_id) is None
    for table in RELATED_TABLES:
        assert store.select_related(table, car_id) == []
    assert sorted(storage.removed[0]) == ["model-3/front.jpg", "model-3/side.jpg"]


def test_deleting_unknown_car_succeeds(
    store: InMemoryCarStore, storage: InMemoryImageStorage
) -> None:
    result = DeleteCar(car_store=store, image_storage=storage).execute(
        DeleteCarRequest(car_id="missing")
    )

    assert result.deleted is True
    assert storage.removed == []


def test_storage_failure_is_logged_not_raised(
    store: InMemoryCarStore, car_id: str, caplog: pytest.LogCaptureFixture
) -> None:
    storage = Mock()
    storage.remove.side_effect = RuntimeError("bucket offline")

    with caplog.at_level(logging.WARNING):
        result = DeleteCar(car_store=store, image_storage=storage).execute(
            DeleteCarRequest(car_id=car_id)
        )

    assert result.deleted is True
    assert store.get_car(car_id=car_id) is None
    assert any(
        getattr(record, "operation", None) == "delete_car.remove_images"
        for record in caplog.records
    )


def test_sequential_store_deletes_related_then_car() -> None:
    store = Mock(spec=CarStore)
    store.supports_concurrent_calls = False
    store.select_related.return_value = []

    DeleteCar(car_store=store, image_storage=Mock()).execute(DeleteCarRequest(car_id="c1"))

    assert store.mock_calls == [
        call.select_related(CarTable.IMAGES, "c1"),
        *[call.delete_related(table, "c1") for table in RELATED_TABLES],
        call.delete_car("c1"),
    ]


def test_related_delete_failure_aborts_before_car_row(
    store: InMemoryCarStore, storage: InMemoryImageStorage, car_id: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    original = store.delete_related

    def failing_delete(table: CarTable, target: str, ids: list[str] | None = None) -> None:
        if table is CarTable.FEATURES:
            raise RuntimeError("features table is locked")
        original(table, target, ids)

    monkeypatch.setattr(store, "delete_related", failing_delete)

    with pytest.raises(StoreError) as exc_info:
        DeleteCar(car_store=store, image_storage=storage).execute(DeleteCarRequest(car_id=car_id))

    assert exc_info.value.message == "features table is locked"
    assert store.get_car(car_id=car_id) is not None
    assert storage.removed == []
