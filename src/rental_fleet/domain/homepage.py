from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class HomepageSettings:
    id: str
    featured_car_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class FeaturedCarCandidate:
    """A car that can be picked for the homepage feature section."""

    id: str
    slug: str
    name: str
    category: str | None
    primary_image_url: str | None = None
