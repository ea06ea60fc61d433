"""
Dependency injection for FastAPI routes.

Key principle: stores bound to a database session are per-request, never
cached. Only stateless clients (Supabase HTTP client, image storage) are
shared between requests.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends

from rental_fleet.adapters.postgres_car_store import PostgresCarStore
from rental_fleet.adapters.supabase_car_store import SupabaseCarStore
from rental_fleet.adapters.supabase_image_storage import SupabaseImageStorage
from rental_fleet.infra.config import images_bucket, store_backend
from rental_fleet.infra.db.session import get_session
from rental_fleet.infra.supabase_client import get_supabase_client
from rental_fleet.ports.car_store import CarStore
from rental_fleet.ports.image_storage import ImageStorage
from rental_fleet.use_cases.car_reader import CarReader
from rental_fleet.use_cases.create_car import CreateCar
from rental_fleet.use_cases.delete_car import DeleteCar
from rental_fleet.use_cases.get_car import GetCar
from rental_fleet.use_cases.homepage_settings import (
    GetFeaturedCar,
    GetHomepageSettings,
    ListHomepageCandidates,
    SaveHomepageSettings,
)
from rental_fleet.use_cases.list_cars import (
    ListAdminCars,
    ListCategories,
    ListFleetCars,
    ListRelatedCars,
)
from rental_fleet.use_cases.update_car import UpdateCar


def get_car_store() -> Generator[CarStore, None, None]:
    """
    Provides the car store for a single request.

    With the postgres backend the store wraps a per-request session that
    is committed when the request succeeds and rolled back when it raises.
    The supabase backend has no session to manage.

    Yields:
        CarStore: Store for the configured backend (CAR_STORE_BACKEND)
    """
    if store_backend() == "supabase":
        yield SupabaseCarStore(client=get_supabase_client())
        return

    with get_session() as session:
        yield PostgresCarStore(session=session)


@lru_cache(maxsize=1)
def get_image_storage() -> ImageStorage:
    """Vehicle images bucket (Supabase Storage), shared across requests."""
    return SupabaseImageStorage(client=get_supabase_client(), bucket=images_bucket())


# ==============================================================================
# Read use cases
# ==============================================================================


def get_get_car_use_case(store: CarStore = Depends(get_car_store)) -> GetCar:
    return GetCar(car_reader=CarReader(store))


def get_list_admin_cars_use_case(store: CarStore = Depends(get_car_store)) -> ListAdminCars:
    return ListAdminCars(car_store=store)


def get_list_fleet_cars_use_case(store: CarStore = Depends(get_car_store)) -> ListFleetCars:
    return ListFleetCars(car_store=store)


def get_list_related_cars_use_case(store: CarStore = Depends(get_car_store)) -> ListRelatedCars:
    return ListRelatedCars(car_store=store)


def get_list_categories_use_case(store: CarStore = Depends(get_car_store)) -> ListCategories:
    return ListCategories(car_store=store)


# ==============================================================================
# Write use cases
# ==============================================================================


def get_create_car_use_case(store: CarStore = Depends(get_car_store)) -> CreateCar:
    return CreateCar(car_store=store)


def get_update_car_use_case(
    store: CarStore = Depends(get_car_store),
    storage: ImageStorage = Depends(get_image_storage),
) -> UpdateCar:
    return UpdateCar(car_store=store, image_storage=storage)


def get_delete_car_use_case(
    store: CarStore = Depends(get_car_store),
    storage: ImageStorage = Depends(get_image_storage),
) -> DeleteCar:
    return DeleteCar(car_store=store, image_storage=storage)


# ==============================================================================
# Homepage settings
# ==============================================================================


def get_homepage_settings_use_case(store: CarStore = Depends(get_car_store)) -> GetHomepageSettings:
    return GetHomepageSettings(car_store=store)


def get_save_homepage_settings_use_case(
    store: CarStore = Depends(get_car_store),
) -> SaveHomepageSettings:
    return SaveHomepageSettings(car_store=store)


def get_homepage_candidates_use_case(
    store: CarStore = Depends(get_car_store),
) -> ListHomepageCandidates:
    return ListHomepageCandidates(car_store=store)


def get_featured_car_use_case(store: CarStore = Depends(get_car_store)) -> GetFeaturedCar:
    return GetFeaturedCar(car_store=store)
