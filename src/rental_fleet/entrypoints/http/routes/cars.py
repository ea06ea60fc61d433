from fastapi import APIRouter, Depends, Query

from rental_fleet.entrypoints.http.dependencies import (
    get_featured_car_use_case,
    get_get_car_use_case,
    get_list_categories_use_case,
    get_list_fleet_cars_use_case,
    get_list_related_cars_use_case,
)
from rental_fleet.entrypoints.http.dtos.cars import CarDetailDTO, FleetCarDTO, RelatedCarDTO
from rental_fleet.entrypoints.http.error_responses import (
    NOT_FOUND_RESPONSE,
    STORE_ERROR_RESPONSE,
    VALIDATION_RESPONSE,
)
from rental_fleet.entrypoints.http.mappers.car_mapper import CarMapper
from rental_fleet.use_cases.get_car import GetCar, GetCarRequest
from rental_fleet.use_cases.homepage_settings import GetFeaturedCar
from rental_fleet.use_cases.list_cars import (
    DEFAULT_RELATED_LIMIT,
    ListCategories,
    ListFleetCars,
    ListRelatedCars,
    ListRelatedCarsRequest,
)

router = APIRouter(tags=["Fleet"])


@router.get(
    "/cars",
    response_model=list[FleetCarDTO],
    response_model_by_alias=True,
    summary="List the public fleet",
    description="""
    Cars that are available and not hidden, featured cars first, then newest.

    Keys are camelCase (`shortDescription`, `isFeatured`, `primaryImageUrl`,
    `pricePerDay`). `pricePerDay` is a decimal string.
    """,
    responses={**STORE_ERROR_RESPONSE},
)
def list_fleet(use_case: ListFleetCars = Depends(get_list_fleet_cars_use_case)) -> list[FleetCarDTO]:
    return [CarMapper.to_fleet_item(item) for item in use_case.execute()]


# Registered before /cars/{slug} so "categories" is never taken for a slug
@router.get(
    "/cars/categories",
    response_model=list[str],
    summary="List fleet categories",
    description="Distinct categories of the visible cars, sorted.",
    responses={**STORE_ERROR_RESPONSE},
)
def list_categories(
    use_case: ListCategories = Depends(get_list_categories_use_case),
) -> list[str]:
    return use_case.execute()


@router.get(
    "/cars/{slug}",
    response_model=CarDetailDTO,
    summary="Get a car by slug",
    description="""
    A visible car with its pricing, images in display order, features and
    specifications. Hidden or unavailable cars answer 404.

    ## Example
    ```
    GET /v1/cars/tesla-model-3
    ```
    """,
    responses={**NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE},
)
def get_car_by_slug(slug: str, use_case: GetCar = Depends(get_get_car_use_case)) -> CarDetailDTO:
    result = use_case.execute(GetCarRequest(slug=slug, visible_only=True))
    return CarMapper.to_detail(result.car)


@router.get(
    "/cars/{car_id}/related",
    response_model=list[RelatedCarDTO],
    response_model_by_alias=True,
    summary="List related cars",
    description="""
    Visible cars in the same category as the given car, newest first,
    never including the car itself. An unknown car or one without a
    category yields an empty list.
    """,
    responses={**VALIDATION_RESPONSE, **STORE_ERROR_RESPONSE},
)
def list_related(
    car_id: str,
    limit: int = Query(default=DEFAULT_RELATED_LIMIT, ge=1, le=50),
    use_case: ListRelatedCars = Depends(get_list_related_cars_use_case),
) -> list[RelatedCarDTO]:
    items = use_case.execute(ListRelatedCarsRequest(car_id=car_id, limit=limit))
    return [CarMapper.to_related_item(item) for item in items]


@router.get(
    "/homepage/featured-car",
    response_model=CarDetailDTO | None,
    summary="Get the homepage featured car",
    description="The featured car, or null when none is set or it is no longer visible.",
    responses={**STORE_ERROR_RESPONSE},
)
def get_featured_car(
    use_case: GetFeaturedCar = Depends(get_featured_car_use_case),
) -> CarDetailDTO | None:
    car = use_case.execute()
    return CarMapper.to_detail(car) if car else None
