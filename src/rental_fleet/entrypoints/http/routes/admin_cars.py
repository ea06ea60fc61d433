from fastapi import APIRouter, Depends, Header, status

from rental_fleet.entrypoints.http.dependencies import (
    get_create_car_use_case,
    get_delete_car_use_case,
    get_get_car_use_case,
    get_list_admin_cars_use_case,
    get_update_car_use_case,
)
from rental_fleet.entrypoints.http.dtos.cars import (
    AdminCarListItemDTO,
    CarCreateDTO,
    CarDetailDTO,
    CarUpdateDTO,
    DeleteCarResponseDTO,
)
from rental_fleet.entrypoints.http.error_responses import (
    NOT_FOUND_RESPONSE,
    STORE_ERROR_RESPONSE,
    VALIDATION_RESPONSE,
)
from rental_fleet.entrypoints.http.mappers.car_mapper import CarMapper
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest
from rental_fleet.use_cases.delete_car import DeleteCar, DeleteCarRequest
from rental_fleet.use_cases.get_car import GetCar, GetCarRequest
from rental_fleet.use_cases.list_cars import ListAdminCars
from rental_fleet.use_cases.update_car import UpdateCar, UpdateCarRequest

router = APIRouter(prefix="/admin/cars", tags=["Admin: Cars"])


@router.get(
    "",
    response_model=list[AdminCarListItemDTO],
    summary="List every car",
    description="All cars, newest first, hidden and unavailable ones included.",
    responses={**STORE_ERROR_RESPONSE},
)
def list_cars(
    use_case: ListAdminCars = Depends(get_list_admin_cars_use_case),
) -> list[AdminCarListItemDTO]:
    return [CarMapper.to_admin_item(item) for item in use_case.execute()]


@router.get(
    "/{car_id}",
    response_model=CarDetailDTO,
    summary="Get a car by id",
    responses={**NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE},
)
def get_car(car_id: str, use_case: GetCar = Depends(get_get_car_use_case)) -> CarDetailDTO:
    result = use_case.execute(GetCarRequest(car_id=car_id))
    return CarMapper.to_detail(result.car)


@router.post(
    "",
    response_model=CarDetailDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a car",
    description="""
    Creates the car and everything it owns. The slug is derived from the
    name. If any owned row fails to insert, the car is removed again and
    the request fails with 502.
    """,
    responses={**VALIDATION_RESPONSE, **STORE_ERROR_RESPONSE},
)
def create_car(
    body: CarCreateDTO,
    x_user_id: str | None = Header(default=None, description="Recorded as created_by"),
    use_case: CreateCar = Depends(get_create_car_use_case),
) -> CarDetailDTO:
    result = use_case.execute(
        CreateCarRequest(data=CarMapper.to_write_data(body), created_by=x_user_id)
    )
    return CarMapper.to_detail(result.car)


@router.patch(
    "/{car_id}",
    response_model=CarDetailDTO,
    summary="Update a car",
    description="""
    Partial update. Omitted fields are left alone; a supplied list
    replaces the stored one. Images are matched by `path`: images whose
    path is no longer listed are deleted together with their stored file.
    """,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE, **STORE_ERROR_RESPONSE},
)
def update_car(
    car_id: str,
    body: CarUpdateDTO,
    use_case: UpdateCar = Depends(get_update_car_use_case),
) -> CarDetailDTO:
    result = use_case.execute(UpdateCarRequest(car_id=car_id, changes=CarMapper.to_update(body)))
    return CarMapper.to_detail(result.car)


@router.delete(
    "/{car_id}",
    response_model=DeleteCarResponseDTO,
    summary="Delete a car",
    description="Deletes the car, its rows and its stored images. Unknown ids succeed.",
    responses={**STORE_ERROR_RESPONSE},
)
def delete_car(
    car_id: str,
    use_case: DeleteCar = Depends(get_delete_car_use_case),
) -> DeleteCarResponseDTO:
    result = use_case.execute(DeleteCarRequest(car_id=car_id))
    return DeleteCarResponseDTO(deleted=result.deleted)
