from __future__ import annotations

from decimal import Decimal
from typing import Any

from rental_fleet.domain.car import (
    AdminCarListItem,
    AggregateCar,
    CarUpdate,
    CarWriteData,
    FeatureInput,
    FleetCarListItem,
    ImageInput,
    PricingInput,
    RelatedCarListItem,
    SpecificationInput,
)
from rental_fleet.entrypoints.http.dtos.cars import (
    AdminCarListItemDTO,
    CarCreateDTO,
    CarDetailDTO,
    CarUpdateDTO,
    FeatureDTO,
    FleetCarDTO,
    ImageDTO,
    PricingDTO,
    RelatedCarDTO,
    SpecificationDTO,
)

# Collections where null in an update body means "leave unchanged"
_COLLECTIONS = ("pricing", "images", "features", "specifications")


def _money(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


class CarMapper:
    """Maps between REST DTOs and domain models for cars."""

    # --- requests -----------------------------------------------------------

    @staticmethod
    def to_pricing(dto: Any) -> PricingInput:
        return PricingInput(
            base_price=dto.base_price,
            weekly_price=dto.weekly_price,
            monthly_price=dto.monthly_price,
            deposit=dto.deposit,
            currency=dto.currency,
        )

    @staticmethod
    def to_images(dtos: list[Any]) -> list[ImageInput]:
        return [
            ImageInput(
                url=dto.url,
                path=dto.path,
                alt_text=dto.alt_text,
                is_primary=dto.is_primary,
                sort_order=dto.sort_order,
            )
            for dto in dtos
        ]

    @staticmethod
    def to_write_data(dto: CarCreateDTO) -> CarWriteData:
        return CarWriteData(
            name=dto.name,
            category=dto.category,
            description=dto.description,
            short_description=dto.short_description,
            available=dto.available,
            featured=dto.featured,
            hidden=dto.hidden,
            pricing=CarMapper.to_pricing(dto.pricing) if dto.pricing else None,
            images=CarMapper.to_images(dto.images),
            features=[FeatureInput(name=f.name, description=f.description) for f in dto.features],
            specifications=[
                SpecificationInput(name=s.name, value=s.value) for s in dto.specifications
            ],
        )

    @staticmethod
    def to_update(dto: CarUpdateDTO) -> CarUpdate:
        """
        Only fields present in the request body end up in the CarUpdate;
        everything else stays UNSET.
        """
        supplied = dto.model_fields_set
        changes: dict[str, Any] = {
            field: getattr(dto, field) for field in supplied if field not in _COLLECTIONS
        }

        if "pricing" in supplied and dto.pricing is not None:
            changes["pricing"] = CarMapper.to_pricing(dto.pricing)
        if "images" in supplied and dto.images is not None:
            changes["images"] = CarMapper.to_images(dto.images)
        if "features" in supplied and dto.features is not None:
            changes["features"] = [
                FeatureInput(name=f.name, description=f.description) for f in dto.features
            ]
        if "specifications" in supplied and dto.specifications is not None:
            changes["specifications"] = [
                SpecificationInput(name=s.name, value=s.value) for s in dto.specifications
            ]

        return CarUpdate(**changes)

    # --- responses ----------------------------------------------------------

    @staticmethod
    def to_detail(aggregate: AggregateCar) -> CarDetailDTO:
        car = aggregate.car
        pricing = aggregate.pricing
        return CarDetailDTO(
            id=car.id,
            slug=car.slug,
            name=car.name,
            category=car.category,
            description=car.description,
            short_description=car.short_description,
            available=car.available,
            featured=car.featured,
            hidden=car.hidden,
            created_at=car.created_at,
            updated_at=car.updated_at,
            pricing=(
                PricingDTO(
                    id=pricing.id,
                    base_price=_money(pricing.base_price),
                    weekly_price=_money(pricing.weekly_price),
                    monthly_price=_money(pricing.monthly_price),
                    deposit=_money(pricing.deposit),
                    currency=pricing.currency,
                )
                if pricing
                else None
            ),
            images=[
                ImageDTO(
                    id=image.id,
                    url=image.url,
                    path=image.path,
                    alt_text=image.alt_text,
                    is_primary=image.is_primary,
                    sort_order=image.sort_order,
                )
                for image in aggregate.images
            ],
            features=[
                FeatureDTO(id=f.id, name=f.name, description=f.description)
                for f in aggregate.features
            ],
            specifications=[
                SpecificationDTO(id=s.id, name=s.name, value=s.value)
                for s in aggregate.specifications
            ],
        )

    @staticmethod
    def to_admin_item(item: AdminCarListItem) -> AdminCarListItemDTO:
        return AdminCarListItemDTO(
            id=item.id,
            slug=item.slug,
            name=item.name,
            category=item.category,
            available=item.available,
            featured=item.featured,
            hidden=item.hidden,
            created_at=item.created_at,
            primary_image_url=item.primary_image_url,
            price_per_day=_money(item.price_per_day),
        )

    @staticmethod
    def to_fleet_item(item: FleetCarListItem) -> FleetCarDTO:
        return FleetCarDTO(
            id=item.id,
            slug=item.slug,
            name=item.name,
            category=item.category,
            short_description=item.short_description,
            is_featured=item.is_featured,
            primary_image_url=item.primary_image_url,
            price_per_day=_money(item.price_per_day),
        )

    @staticmethod
    def to_related_item(item: RelatedCarListItem) -> RelatedCarDTO:
        return RelatedCarDTO(
            id=item.id,
            slug=item.slug,
            name=item.name,
            category=item.category,
            primary_image_url=item.primary_image_url,
            price_per_day=_money(item.price_per_day),
        )
