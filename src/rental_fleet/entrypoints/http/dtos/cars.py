from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# ==============================================================================
# Responses
# ==============================================================================


class PricingDTO(BaseModel):
    id: str
    base_price: str | None = None
    weekly_price: str | None = None
    monthly_price: str | None = None
    deposit: str | None = None
    currency: str | None = None


class ImageDTO(BaseModel):
    id: str
    url: str
    path: str | None = None
    alt_text: str | None = None
    is_primary: bool = False
    sort_order: int | None = None


class FeatureDTO(BaseModel):
    id: str
    name: str
    description: str | None = None


class SpecificationDTO(BaseModel):
    id: str
    name: str
    value: str | None = None


class CarDetailDTO(BaseModel):
    """A car with its pricing, images (in display order), features and specifications."""

    id: str
    slug: str
    name: str
    category: str | None = None
    description: str | None = None
    short_description: str | None = None
    available: bool
    featured: bool
    hidden: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pricing: PricingDTO | None = None
    images: list[ImageDTO] = Field(default_factory=list)
    features: list[FeatureDTO] = Field(default_factory=list)
    specifications: list[SpecificationDTO] = Field(default_factory=list)


class AdminCarListItemDTO(BaseModel):
    id: str
    slug: str
    name: str
    category: str | None = None
    available: bool
    featured: bool
    hidden: bool
    created_at: datetime | None = None
    primary_image_url: str | None = None
    price_per_day: str | None = None


class FleetCarDTO(BaseModel):
    """Public fleet card. Serialized with camelCase keys."""

    id: str
    slug: str
    name: str
    category: str | None = None
    short_description: str | None = Field(default=None, serialization_alias="shortDescription")
    is_featured: bool = Field(serialization_alias="isFeatured")
    primary_image_url: str | None = Field(default=None, serialization_alias="primaryImageUrl")
    price_per_day: str | None = Field(default=None, serialization_alias="pricePerDay")


class RelatedCarDTO(BaseModel):
    """Related-car card on the detail page. Serialized with camelCase keys."""

    id: str
    slug: str
    name: str
    category: str | None = None
    primary_image_url: str | None = Field(default=None, serialization_alias="primaryImageUrl")
    price_per_day: str | None = Field(default=None, serialization_alias="pricePerDay")


class DeleteCarResponseDTO(BaseModel):
    deleted: bool


# ==============================================================================
# Requests
# ==============================================================================

_MONEY = {"ge": 0, "max_digits": 10, "decimal_places": 2}


class PricingInputDTO(BaseModel):
    base_price: Decimal = Field(description="Price per day", examples=["89.00"], **_MONEY)
    weekly_price: Decimal | None = Field(default=None, **_MONEY)
    monthly_price: Decimal | None = Field(default=None, **_MONEY)
    deposit: Decimal | None = Field(default=None, **_MONEY)
    currency: str | None = Field(default=None, min_length=3, max_length=3, examples=["USD"])


class ImageInputDTO(BaseModel):
    url: str = Field(min_length=1)
    path: str | None = Field(
        default=None,
        description="Storage key in the vehicle images bucket; identifies the image across updates",
    )
    alt_text: str | None = None
    is_primary: bool = False
    sort_order: int | None = Field(default=None, ge=0)


class FeatureInputDTO(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None


class SpecificationInputDTO(BaseModel):
    name: str = Field(min_length=1)
    value: str | None = None


class CarCreateDTO(BaseModel):
    """Body for creating a car. The slug is derived from the name."""

    name: str = Field(examples=["Tesla Model 3"])
    category: str = Field(examples=["Electric"])
    description: str | None = None
    short_description: str | None = None
    available: bool | None = None
    featured: bool | None = None
    hidden: bool | None = None
    pricing: PricingInputDTO | None = None
    images: list[ImageInputDTO] = Field(default_factory=list)
    features: list[FeatureInputDTO] = Field(default_factory=list)
    specifications: list[SpecificationInputDTO] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Tesla Model 3",
                "category": "Electric",
                "short_description": "Long range, autopilot",
                "featured": True,
                "pricing": {"base_price": "89.00", "currency": "USD"},
                "images": [
                    {
                        "url": "https://cdn.example.com/vehicle-images/model-3/front.jpg",
                        "path": "model-3/front.jpg",
                        "is_primary": True,
                        "sort_order": 0,
                    }
                ],
                "features": [{"name": "Autopilot"}],
                "specifications": [{"name": "Range", "value": "358 mi"}],
            }
        }
    )


class CarUpdateDTO(BaseModel):
    """
    Body for a partial update.

    Omitted fields stay unchanged. null clears description or
    short_description and resets a flag to its default. A supplied list
    replaces the stored one; [] removes everything.
    """

    name: str | None = None
    category: str | None = None
    description: str | None = None
    short_description: str | None = None
    available: bool | None = None
    featured: bool | None = None
    hidden: bool | None = None
    pricing: PricingInputDTO | None = None
    images: list[ImageInputDTO] | None = None
    features: list[FeatureInputDTO] | None = None
    specifications: list[SpecificationInputDTO] | None = None
