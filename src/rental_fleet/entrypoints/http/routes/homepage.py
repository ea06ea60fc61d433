from fastapi import APIRouter, Depends

from rental_fleet.entrypoints.http.dependencies import (
    get_homepage_candidates_use_case,
    get_homepage_settings_use_case,
    get_save_homepage_settings_use_case,
)
from rental_fleet.entrypoints.http.dtos.homepage import (
    FeaturedCarCandidateDTO,
    HomepageSettingsDTO,
    SaveHomepageSettingsDTO,
)
from rental_fleet.entrypoints.http.error_responses import NOT_FOUND_RESPONSE, STORE_ERROR_RESPONSE
from rental_fleet.entrypoints.http.mappers.homepage_mapper import HomepageMapper
from rental_fleet.use_cases.homepage_settings import (
    GetHomepageSettings,
    ListHomepageCandidates,
    SaveHomepageSettings,
    SaveHomepageSettingsRequest,
)

router = APIRouter(prefix="/admin/homepage-settings", tags=["Admin: Homepage"])


@router.get(
    "",
    response_model=HomepageSettingsDTO,
    summary="Get homepage settings",
    description="All fields are null until settings are saved for the first time.",
    responses={**STORE_ERROR_RESPONSE},
)
def get_settings(
    use_case: GetHomepageSettings = Depends(get_homepage_settings_use_case),
) -> HomepageSettingsDTO:
    return HomepageMapper.to_settings(use_case.execute())


@router.put(
    "",
    response_model=HomepageSettingsDTO,
    summary="Save homepage settings",
    description="Sets the featured car. `null` clears it.",
    responses={**NOT_FOUND_RESPONSE, **STORE_ERROR_RESPONSE},
)
def save_settings(
    body: SaveHomepageSettingsDTO,
    use_case: SaveHomepageSettings = Depends(get_save_homepage_settings_use_case),
) -> HomepageSettingsDTO:
    settings = use_case.execute(SaveHomepageSettingsRequest(featured_car_id=body.featured_car_id))
    return HomepageMapper.to_settings(settings)


@router.get(
    "/candidates",
    response_model=list[FeaturedCarCandidateDTO],
    summary="List cars that can be featured",
    responses={**STORE_ERROR_RESPONSE},
)
def list_candidates(
    use_case: ListHomepageCandidates = Depends(get_homepage_candidates_use_case),
) -> list[FeaturedCarCandidateDTO]:
    return [HomepageMapper.to_candidate(candidate) for candidate in use_case.execute()]
