"""Test suite for the listing use cases."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest

from rental_fleet.adapters.in_memory_car_store import InMemoryCarStore
from rental_fleet.domain.car import CarWriteData, ImageInput, PricingInput
from rental_fleet.domain.errors import StoreError, ValidationError
from rental_fleet.ports.car_store import CarStore
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest
from rental_fleet.use_cases.list_cars import (
    ListAdminCars,
    ListCategories,
    ListFleetCars,
    ListRelatedCars,
    ListRelatedCarsRequest,
)


def _create(store: InMemoryCarStore, name: str, category: str, **fields: object) -> str:
    data = CarWriteData(name=name, category=category, **fields)
    return CreateCar(car_store=store).execute(CreateCarRequest(data=data)).car.id


@pytest.fixture()
def fleet(store: InMemoryCarStore) -> dict[str, str]:
    """Five cars created in this order (so later ones are newer)."""
    return {
        "corolla": _create(
            store,
            "Toyota Corolla",
            "Economy",
            pricing=PricingInput(base_price=Decimal("35.00")),
            images=[
                ImageInput(url="corolla-side.jpg", sort_order=1),
                ImageInput(url="corolla-front.jpg", sort_order=0),
            ],
        ),
        "versa": _create(store, "Nissan Versa", "Economy", hidden=True),
        "civic": _create(store, "Honda Civic", "Economy", available=False),
        "model3": _create(store, "Tesla Model 3", "Electric", featured=True),
        "yaris": _create(store, "Toyota Yaris", "Economy", short_description="Tiny"),
    }


# ==============================================================================
# Admin list
# ==============================================================================


def test_admin_list_includes_everything_newest_first(
    store: InMemoryCarStore, fleet: dict[str, str]
) -> None:
    items = ListAdminCars(car_store=store).execute()

    assert [item.slug for item in items] == [
        "toyota-yaris",
        "tesla-model-3",
        "honda-civic",
        "nissan-versa",
        "toyota-corolla",
    ]
    versa = next(item for item in items if item.slug == "nissan-versa")
    assert versa.hidden is True


def test_admin_list_projects_primary_image_and_price(
    store: InMemoryCarStore, fleet: dict[str, str]
) -> None:
    items = {item.slug: item for item in ListAdminCars(car_store=store).execute()}

    assert items["toyota-corolla"].primary_image_url == "corolla-front.jpg"
    assert items["toyota-corolla"].price_per_day == Decimal("35.00")
    assert items["toyota-yaris"].primary_image_url is None
    assert items["toyota-yaris"].price_per_day is None


# ==============================================================================
# Public fleet
# ==============================================================================


def test_fleet_is_visible_cars_featured_first(
    store: InMemoryCarStore, fleet: dict[str, str]
) -> None:
    items = ListFleetCars(car_store=store).execute()

    assert [item.slug for item in items] == ["tesla-model-3", "toyota-yaris", "toyota-corolla"]
    assert items[0].is_featured is True
    assert items[1].short_description == "Tiny"


# ==============================================================================
# Related cars
# ==============================================================================


def test_related_cars_same_category_visible_excluding_self(
    store: InMemoryCarStore, fleet: dict[str, str]
) -> None:
    items = ListRelatedCars(car_store=store).execute(
        ListRelatedCarsRequest(car_id=fleet["corolla"])
    )

    assert [item.slug for item in items] == ["toyota-yaris"]


def test_related_cars_respects_limit(store: InMemoryCarStore, fleet: dict[str, str]) -> None:
    for index in range(5):
        _create(store, f"Kia Rio {index}", "Economy")

    items = ListRelatedCars(car_store=store).execute(
        ListRelatedCarsRequest(car_id=fleet["corolla"], limit=2)
    )

    assert [item.slug for item in items] == ["kia-rio-4", "kia-rio-3"]


def test_related_cars_for_unknown_or_uncategorized_car(store: InMemoryCarStore) -> None:
    uncategorized = store.insert_car({"slug": "x", "name": "X"})["id"]
    use_case = ListRelatedCars(car_store=store)

    assert use_case.execute(ListRelatedCarsRequest(car_id="missing")) == []
    assert use_case.execute(ListRelatedCarsRequest(car_id=uncategorized)) == []


def test_related_cars_rejects_limit_below_one(store: InMemoryCarStore) -> None:
    with pytest.raises(ValidationError):
        ListRelatedCars(car_store=store).execute(ListRelatedCarsRequest(car_id="c1", limit=0))


# ==============================================================================
# Categories
# ==============================================================================


def test_categories_are_distinct_sorted_and_visible_only(
    store: InMemoryCarStore, fleet: dict[str, str]
) -> None:
    _create(store, "Hidden Van", "Van", hidden=True)

    assert ListCategories(car_store=store).execute() == ["Economy", "Electric"]


# ==============================================================================
# Store failures
# ==============================================================================


def test_list_failure_becomes_store_error() -> None:
    store = Mock(spec=CarStore)
    store.list_cars.side_effect = RuntimeError("connection reset")

    with pytest.raises(StoreError) as exc_info:
        ListFleetCars(car_store=store).execute()

    assert exc_info.value.message == "connection reset"
    assert exc_info.value.context["operation"] == "list_fleet_cars"
