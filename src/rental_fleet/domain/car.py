from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Final

from rental_fleet.domain.errors import ValidationError


# Resolved value of each visibility flag when the store holds NULL
# or the caller leaves it out.
FLAG_DEFAULTS: Final[dict[str, bool]] = {
    "available": True,
    "featured": False,
    "hidden": False,
}


class _Unset(Enum):
    """Marker for "field not supplied" in partial updates."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset.UNSET


# ==============================================================================
# Stored records
# ==============================================================================


@dataclass(frozen=True, slots=True)
class CarRecord:
    id: str
    slug: str
    name: str
    category: str | None = None
    description: str | None = None
    short_description: str | None = None
    available: bool = FLAG_DEFAULTS["available"]
    featured: bool = FLAG_DEFAULTS["featured"]
    hidden: bool = FLAG_DEFAULTS["hidden"]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None

    @property
    def is_visible(self) -> bool:
        """Listed on public surfaces (available and not hidden)."""
        return self.available and not self.hidden


@dataclass(frozen=True, slots=True)
class PricingRecord:
    id: str
    car_id: str
    base_price: Decimal | None = None
    weekly_price: Decimal | None = None
    monthly_price: Decimal | None = None
    deposit: Decimal | None = None
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class ImageRecord:
    id: str
    car_id: str
    url: str
    path: str | None = None
    alt_text: str | None = None
    is_primary: bool = False
    sort_order: int | None = None


@dataclass(frozen=True, slots=True)
class FeatureRecord:
    id: str
    car_id: str
    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class SpecificationRecord:
    id: str
    car_id: str
    name: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class AggregateCar:
    """A car with all of the related data it owns. Never persisted as such."""

    car: CarRecord
    pricing: PricingRecord | None = None
    images: list[ImageRecord] = field(default_factory=list)
    features: list[FeatureRecord] = field(default_factory=list)
    specifications: list[SpecificationRecord] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.car.id

    @property
    def slug(self) -> str:
        return self.car.slug


# ==============================================================================
# List projections
# ==============================================================================


@dataclass(frozen=True, slots=True)
class AdminCarListItem:
    id: str
    slug: str
    name: str
    category: str | None
    available: bool
    featured: bool
    hidden: bool
    created_at: datetime | None
    primary_image_url: str | None = None
    price_per_day: Decimal | None = None


@dataclass(frozen=True, slots=True)
class FleetCarListItem:
    id: str
    slug: str
    name: str
    category: str | None
    short_description: str | None
    is_featured: bool
    primary_image_url: str | None = None
    price_per_day: Decimal | None = None


@dataclass(frozen=True, slots=True)
class RelatedCarListItem:
    id: str
    slug: str
    name: str
    category: str | None
    primary_image_url: str | None = None
    price_per_day: Decimal | None = None


# ==============================================================================
# Write payloads
# ==============================================================================


@dataclass(frozen=True, slots=True)
class PricingInput:
    base_price: Decimal
    weekly_price: Decimal | None = None
    monthly_price: Decimal | None = None
    deposit: Decimal | None = None
    currency: str | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "base_price": self.base_price,
            "weekly_price": self.weekly_price,
            "monthly_price": self.monthly_price,
            "deposit": self.deposit,
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class ImageInput:
    url: str
    path: str | None = None
    alt_text: str | None = None
    is_primary: bool = False
    sort_order: int | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "path": self.path,
            "alt_text": self.alt_text,
            "is_primary": self.is_primary,
            "sort_order": self.sort_order,
        }


@dataclass(frozen=True, slots=True)
class FeatureInput:
    name: str
    description: str | None = None

    def to_row(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True, slots=True)
class SpecificationInput:
    name: str
    value: str | None = None

    def to_row(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True, slots=True)
class CarWriteData:
    """Everything needed to create a car and its related data."""

    name: str
    category: str
    description: str | None = None
    short_description: str | None = None
    available: bool | None = None
    featured: bool | None = None
    hidden: bool | None = None
    pricing: PricingInput | None = None
    images: list[ImageInput] = field(default_factory=list)
    features: list[FeatureInput] = field(default_factory=list)
    specifications: list[SpecificationInput] = field(default_factory=list)

    def validate(self) -> None:
        """
        Validate the payload before anything is written.

        Raises:
            ValidationError: If name or category is missing, or two images
                share a storage path
        """
        errors = _required_text_errors(name=self.name, category=self.category)
        errors += _duplicate_path_errors(self.images)
        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True, slots=True)
class CarUpdate:
    """
    Partial version of CarWriteData.

    UNSET leaves a field unchanged. None clears a nullable text field and
    resets a flag to its FLAG_DEFAULTS value. A related collection that is
    supplied replaces the stored one (an empty list removes everything).
    """

    name: str | None | _Unset = UNSET
    category: str | None | _Unset = UNSET
    description: str | None | _Unset = UNSET
    short_description: str | None | _Unset = UNSET
    available: bool | None | _Unset = UNSET
    featured: bool | None | _Unset = UNSET
    hidden: bool | None | _Unset = UNSET
    pricing: PricingInput | None | _Unset = UNSET
    images: list[ImageInput] | _Unset = UNSET
    features: list[FeatureInput] | _Unset = UNSET
    specifications: list[SpecificationInput] | _Unset = UNSET

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If name or category is supplied but empty, or two
                images share a storage path
        """
        supplied = {
            key: value
            for key, value in (("name", self.name), ("category", self.category))
            if value is not UNSET
        }
        errors = _required_text_errors(**supplied)
        if self.images is not UNSET:
            errors += _duplicate_path_errors(self.images)
        if errors:
            raise ValidationError(errors=errors)


def _required_text_errors(**values: Any) -> list[dict[str, str]]:
    return [
        {"field": key, "message": "Must not be empty", "code": "REQUIRED"}
        for key, value in values.items()
        if not isinstance(value, str) or not value.strip()
    ]


def _duplicate_path_errors(images: list[ImageInput]) -> list[dict[str, str]]:
    # Images are keyed by (car_id, path); one path may appear once per car
    seen: set[str] = set()
    duplicates: list[str] = []
    for image in images:
        if not image.path:
            continue
        if image.path in seen and image.path not in duplicates:
            duplicates.append(image.path)
        seen.add(image.path)
    return [
        {"field": "images", "message": f"Duplicate image path '{path}'", "code": "DUPLICATE_PATH"}
        for path in duplicates
    ]
