"""Test suite for GetCar use case."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from rental_fleet.domain.car import AggregateCar, CarRecord
from rental_fleet.domain.errors import NotFoundError, ValidationError
from rental_fleet.use_cases.car_reader import CarReader
from rental_fleet.use_cases.get_car import GetCar, GetCarRequest, GetCarResponse


@pytest.fixture()
def mock_reader() -> Mock:
    return Mock(spec=CarReader)


def _aggregate(**flags: bool) -> AggregateCar:
    return AggregateCar(
        car=CarRecord(id="c1", slug="tesla-model-3", name="Tesla Model 3", **flags)
    )


def test_returns_car_by_slug(mock_reader: Mock) -> None:
    car = _aggregate()
    mock_reader.get_aggregate.return_value = car

    result = GetCar(car_reader=mock_reader).execute(GetCarRequest(slug="tesla-model-3"))

    assert isinstance(result, GetCarResponse)
    assert result.car is car
    mock_reader.get_aggregate.assert_called_once_with(car_id=None, slug="tesla-model-3")


def test_hidden_car_is_returned_to_admin_lookups(mock_reader: Mock) -> None:
    mock_reader.get_aggregate.return_value = _aggregate(hidden=True)

    result = GetCar(car_reader=mock_reader).execute(GetCarRequest(car_id="c1"))

    assert result.car.car.hidden is True


@pytest.mark.parametrize("flags", [{"hidden": True}, {"available": False}])
def test_invisible_car_is_not_found_on_public_lookups(mock_reader: Mock, flags: dict) -> None:
    mock_reader.get_aggregate.return_value = _aggregate(**flags)

    with pytest.raises(NotFoundError) as exc_info:
        GetCar(car_reader=mock_reader).execute(
            GetCarRequest(slug="tesla-model-3", visible_only=True)
        )

    assert exc_info.value.context["identifier"] == "tesla-model-3"


def test_missing_car_is_not_found(mock_reader: Mock) -> None:
    mock_reader.get_aggregate.return_value = None

    with pytest.raises(NotFoundError):
        GetCar(car_reader=mock_reader).execute(GetCarRequest(car_id="c1"))


@pytest.mark.parametrize(
    "request_",
    [GetCarRequest(), GetCarRequest(car_id="c1", slug="tesla-model-3")],
)
def test_requires_exactly_one_key(mock_reader: Mock, request_: GetCarRequest) -> None:
    with pytest.raises(ValidationError) as exc_info:
        GetCar(car_reader=mock_reader).execute(request_)

    assert exc_info.value.errors[0]["code"] == "AMBIGUOUS_KEY"
    mock_reader.get_aggregate.assert_not_called()
