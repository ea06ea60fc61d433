"""Normalization of store rows into domain records.

Store adapters hand back plain mappings. Joined relations may arrive either
as a list or as a single mapping (one-to-one pricing), timestamps may be
datetimes or ISO strings and numerics may be Decimal, float or str. Every
read path funnels rows through these helpers so the shape rules live in
one place.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from rental_fleet.domain.car import (
    FLAG_DEFAULTS,
    AggregateCar,
    CarRecord,
    FeatureRecord,
    ImageRecord,
    PricingRecord,
    SpecificationRecord,
)

Row = Mapping[str, Any]


def first_or_null(value: Any) -> Any:
    """
    Collapse a joined to-one relation to a single value.

    A list yields its first element (None when empty), anything else passes
    through unchanged; None stays None.
    """
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def resolve_flags(row: Row) -> dict[str, bool]:
    """Visibility flags of a car row with FLAG_DEFAULTS applied to NULLs."""
    return {
        flag: default if row.get(flag) is None else bool(row[flag])
        for flag, default in FLAG_DEFAULTS.items()
    }


def _sort_order(image: Row | ImageRecord) -> int:
    value = image.get("sort_order") if isinstance(image, Mapping) else image.sort_order
    return value or 0


def sort_images(images: Iterable[Any]) -> list[Any]:
    """Images ascending by sort_order (missing = 0); ties keep store order."""
    return sorted(images or [], key=_sort_order)


def primary_image(images: Iterable[Row] | None) -> Row | None:
    """The image flagged primary after sorting, else the first one."""
    ordered = sort_images(images or [])
    for image in ordered:
        if image.get("is_primary"):
            return image
    return ordered[0] if ordered else None


def price_of(pricing: Any) -> Decimal | None:
    """base_price of a joined pricing relation (list-of-one or bare mapping)."""
    row = first_or_null(pricing)
    if not row:
        return None
    return to_decimal(row.get("base_price"))


def to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    # str() first so floats from JSON keep their printed precision
    return Decimal(str(value))


def to_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# ==============================================================================
# Row -> record
# ==============================================================================


def to_car_record(row: Row) -> CarRecord:
    return CarRecord(
        id=str(row["id"]),
        slug=row.get("slug") or "",
        name=row.get("name") or "",
        category=row.get("category"),
        description=row.get("description"),
        short_description=row.get("short_description"),
        created_at=to_datetime(row.get("created_at")),
        updated_at=to_datetime(row.get("updated_at")),
        created_by=_optional_str(row.get("created_by")),
        **resolve_flags(row),
    )


def to_pricing_record(row: Row) -> PricingRecord:
    return PricingRecord(
        id=str(row["id"]),
        car_id=str(row["car_id"]),
        base_price=to_decimal(row.get("base_price")),
        weekly_price=to_decimal(row.get("weekly_price")),
        monthly_price=to_decimal(row.get("monthly_price")),
        deposit=to_decimal(row.get("deposit")),
        currency=row.get("currency"),
    )


def to_image_record(row: Row) -> ImageRecord:
    return ImageRecord(
        id=str(row["id"]),
        car_id=str(row["car_id"]),
        url=row["url"],
        path=row.get("path"),
        alt_text=row.get("alt_text"),
        is_primary=bool(row.get("is_primary")),
        sort_order=row.get("sort_order"),
    )


def to_feature_record(row: Row) -> FeatureRecord:
    return FeatureRecord(
        id=str(row["id"]),
        car_id=str(row["car_id"]),
        name=row["name"],
        description=row.get("description"),
    )


def to_specification_record(row: Row) -> SpecificationRecord:
    return SpecificationRecord(
        id=str(row["id"]),
        car_id=str(row["car_id"]),
        name=row["name"],
        value=row.get("value"),
    )


def assemble_aggregate(
    car_row: Row,
    pricing: Any = None,
    images: Iterable[Row] | None = None,
    features: Iterable[Row] | None = None,
    specifications: Iterable[Row] | None = None,
) -> AggregateCar:
    """
    Compose a car row and its related rows into an AggregateCar.

    Related data missing from the arguments is looked up on the car row
    itself under "pricing", "images", "features" and "specifications",
    which is the shape of a joined fetch.
    """
    if pricing is None:
        pricing = car_row.get("pricing")
    if images is None:
        images = car_row.get("images")
    if features is None:
        features = car_row.get("features")
    if specifications is None:
        specifications = car_row.get("specifications")

    pricing_row = first_or_null(pricing)
    return AggregateCar(
        car=to_car_record(car_row),
        pricing=to_pricing_record(pricing_row) if pricing_row else None,
        images=[to_image_record(row) for row in sort_images(images or [])],
        features=[to_feature_record(row) for row in features or []],
        specifications=[to_specification_record(row) for row in specifications or []],
    )
