from datetime import datetime

from pydantic import BaseModel, Field


class HomepageSettingsDTO(BaseModel):
    id: str | None = None
    featured_car_id: str | None = None
    updated_at: datetime | None = None


class SaveHomepageSettingsDTO(BaseModel):
    featured_car_id: str | None = Field(
        description="Car shown in the homepage feature section; null clears it",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )


class FeaturedCarCandidateDTO(BaseModel):
    id: str
    slug: str
    name: str
    category: str | None = None
    primary_image_url: str | None = None
