"""Fixtures shared across the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterator

import pytest

from rental_fleet.adapters.in_memory_car_store import InMemoryCarStore
from rental_fleet.adapters.in_memory_image_storage import InMemoryImageStorage
from rental_fleet.domain.car import (
    CarWriteData,
    FeatureInput,
    ImageInput,
    PricingInput,
    SpecificationInput,
)


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    """Deterministic clock: each call is one minute after the previous one."""
    start = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    ticks: Iterator[int] = iter(range(10_000))
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture()
def store(clock: Callable[[], datetime]) -> InMemoryCarStore:
    return InMemoryCarStore(clock=clock)


@pytest.fixture()
def storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest.fixture()
def car_data() -> CarWriteData:
    """A complete create payload."""
    return CarWriteData(
        name="Tesla Model 3",
        category="Electric",
        description="All-electric sedan",
        short_description="Long range, autopilot",
        featured=True,
        pricing=PricingInput(base_price=Decimal("89.00"), currency="USD"),
        images=[
            ImageInput(
                url="https://cdn.example.com/model-3/side.jpg",
                path="model-3/side.jpg",
                sort_order=2,
            ),
            ImageInput(
                url="https://cdn.example.com/model-3/front.jpg",
                path="model-3/front.jpg",
                is_primary=True,
                sort_order=1,
            ),
        ],
        features=[FeatureInput(name="Autopilot")],
        specifications=[SpecificationInput(name="Range", value="358 mi")],
    )
