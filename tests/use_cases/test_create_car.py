"""Test suite for CreateCar use case."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from unittest.mock import Mock

import pytest

from rental_fleet.adapters.in_memory_car_store import InMemoryCarStore
from rental_fleet.domain.car import CarWriteData, FeatureInput
from rental_fleet.domain.errors import StoreError, ValidationError
from rental_fleet.ports.car_store import CarStore, CarTable
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest, CreateCarResponse


# ==============================================================================
# Happy Path
# ==============================================================================


def test_creates_car_with_everything_it_owns(
    store: InMemoryCarStore, car_data: CarWriteData
) -> None:
    result = CreateCar(car_store=store).execute(
        CreateCarRequest(data=car_data, created_by="admin-1")
    )

    assert isinstance(result, CreateCarResponse)
    car = result.car
    assert car.slug == "tesla-model-3"
    assert car.car.created_by == "admin-1"
    assert car.pricing is not None
    assert car.pricing.base_price == Decimal("89.00")
    assert [image.path for image in car.images] == ["model-3/front.jpg", "model-3/side.jpg"]
    assert [feature.name for feature in car.features] == ["Autopilot"]
    assert all(spec.car_id == car.id for spec in car.specifications)
    assert store.get_car(car_id=car.id) is not None


def test_omitted_flags_get_defaults(store: InMemoryCarStore) -> None:
    result = CreateCar(car_store=store).execute(
        CreateCarRequest(data=CarWriteData(name="Honda Civic", category="Compact"))
    )

    row = store.get_car(car_id=result.car.id)
    assert (row["available"], row["featured"], row["hidden"]) == (True, False, False)
    assert result.car.pricing is None
    assert result.car.images == []


def test_only_supplied_related_tables_are_written() -> None:
    store = Mock(spec=CarStore)
    store.insert_car.return_value = {"id": "c1", "slug": "honda-civic", "name": "Honda Civic"}
    store.insert_related.return_value = [{"id": "f1", "car_id": "c1", "name": "Bluetooth"}]

    CreateCar(car_store=store).execute(
        CreateCarRequest(
            data=CarWriteData(
                name="Honda Civic", category="Compact", features=[FeatureInput(name="Bluetooth")]
            )
        )
    )

    store.insert_related.assert_called_once_with(
        CarTable.FEATURES, [{"name": "Bluetooth", "description": None, "car_id": "c1"}]
    )


# ==============================================================================
# Validation
# ==============================================================================


def test_validation_happens_before_any_store_call() -> None:
    store = Mock(spec=CarStore)

    with pytest.raises(ValidationError) as exc_info:
        CreateCar(car_store=store).execute(
            CreateCarRequest(data=CarWriteData(name="", category="SUV"))
        )

    assert exc_info.value.errors[0]["field"] == "name"
    assert store.method_calls == []


# ==============================================================================
# Failures and compensation
# ==============================================================================


def test_root_insert_failure_is_raised_without_compensation() -> None:
    store = Mock(spec=CarStore)
    store.insert_car.side_effect = ValueError("duplicate key value violates unique constraint")

    with pytest.raises(StoreError) as exc_info:
        CreateCar(car_store=store).execute(
            CreateCarRequest(data=CarWriteData(name="A", category="B"))
        )

    assert exc_info.value.context["operation"] == "create_car"
    store.delete_car.assert_not_called()


def test_duplicate_slug_fails(store: InMemoryCarStore, car_data: CarWriteData) -> None:
    use_case = CreateCar(car_store=store)
    use_case.execute(CreateCarRequest(data=car_data))

    with pytest.raises(StoreError):
        use_case.execute(CreateCarRequest(data=car_data))


def test_related_failure_deletes_the_car_and_raises(
    store: InMemoryCarStore,
    car_data: CarWriteData,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    original_insert = store.insert_related

    def failing_insert(table: CarTable, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if table is CarTable.FEATURES:
            raise RuntimeError("features table is locked")
        return original_insert(table, rows)

    monkeypatch.setattr(store, "insert_related", failing_insert)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(StoreError) as exc_info:
            CreateCar(car_store=store).execute(CreateCarRequest(data=car_data))

    assert exc_info.value.message == "features table is locked"
    assert store.get_car(slug="tesla-model-3") is None
    assert "Removing partially created car" in caplog.text


def test_failed_compensation_is_logged_and_original_error_raised(
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = Mock(spec=CarStore)
    store.insert_car.return_value = {"id": "c1", "slug": "a", "name": "A"}
    store.insert_related.side_effect = RuntimeError("insert failed")
    store.delete_car.side_effect = RuntimeError("delete failed")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(StoreError) as exc_info:
            CreateCar(car_store=store).execute(
                CreateCarRequest(
                    data=CarWriteData(name="A", category="B", features=[FeatureInput(name="x")])
                )
            )

    assert exc_info.value.message == "insert failed"
    store.delete_car.assert_called_once_with("c1")
    assert any(
        getattr(record, "operation", None) == "create_car.compensate" for record in caplog.records
    )
