from __future__ import annotations

from rental_fleet.domain.homepage import FeaturedCarCandidate, HomepageSettings
from rental_fleet.entrypoints.http.dtos.homepage import (
    FeaturedCarCandidateDTO,
    HomepageSettingsDTO,
)


class HomepageMapper:
    """Maps homepage settings between domain models and REST DTOs."""

    @staticmethod
    def to_settings(settings: HomepageSettings | None) -> HomepageSettingsDTO:
        # Nothing saved yet reads as an empty selection
        if settings is None:
            return HomepageSettingsDTO()
        return HomepageSettingsDTO(
            id=settings.id,
            featured_car_id=settings.featured_car_id,
            updated_at=settings.updated_at,
        )

    @staticmethod
    def to_candidate(candidate: FeaturedCarCandidate) -> FeaturedCarCandidateDTO:
        return FeaturedCarCandidateDTO(
            id=candidate.id,
            slug=candidate.slug,
            name=candidate.name,
            category=candidate.category,
            primary_image_url=candidate.primary_image_url,
        )
