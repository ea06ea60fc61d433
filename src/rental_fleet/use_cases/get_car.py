"""Get a single car (with everything it owns) use case."""

from __future__ import annotations

from dataclasses import dataclass

from rental_fleet.domain.car import AggregateCar
from rental_fleet.domain.errors import NotFoundError, ValidationError
from rental_fleet.use_cases.car_reader import CarReader


@dataclass(frozen=True, slots=True)
class GetCarRequest:
    """Look a car up by exactly one of car_id or slug."""

    car_id: str | None = None
    slug: str | None = None
    visible_only: bool = False


@dataclass(frozen=True, slots=True)
class GetCarResponse:
    car: AggregateCar


class GetCar:
    """
    Use case for the car detail surfaces.

    Responsibilities:
    - Validate that exactly one lookup key is given
    - Delegate the fan-out read to CarReader
    - Raise NotFoundError if the car doesn't exist, or is not visible
      when visible_only is set (public detail page)
    """

    def __init__(self, car_reader: CarReader) -> None:
        self._reader = car_reader

    def execute(self, request: GetCarRequest) -> GetCarResponse:
        """
        Raises:
            ValidationError: If neither or both of car_id and slug are given
            NotFoundError: If no (visible) car matches
            StoreError: If the store fails
        """
        if (request.car_id is None) == (request.slug is None):
            raise ValidationError(
                errors=[
                    {
                        "field": "car_id",
                        "message": "Provide exactly one of car_id or slug",
                        "code": "AMBIGUOUS_KEY",
                    }
                ]
            )

        car = self._reader.get_aggregate(car_id=request.car_id, slug=request.slug)

        if car is None or (request.visible_only and not car.car.is_visible):
            raise NotFoundError(resource="Car", identifier=request.car_id or request.slug)

        return GetCarResponse(car=car)
