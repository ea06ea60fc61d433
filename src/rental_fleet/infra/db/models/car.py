from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rental_fleet.infra.db.models.base import Base


# Generated in the database as well, for writers that bypass the ORM (PostgREST)
def _primary_key() -> Mapped[uuid.UUID]:
    return mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )


def _car_fk() -> Mapped[uuid.UUID]:
    return mapped_column(
        UUID(as_uuid=True),
        ForeignKey("cars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class CarRow(Base):
    __tablename__ = "cars"

    id: Mapped[uuid.UUID] = _primary_key()
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    available: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)

    # Read-side joins only; writes go through table-level statements
    pricing: Mapped[CarPricingRow | None] = relationship(uselist=False, viewonly=True)
    images: Mapped[list[CarImageRow]] = relationship(viewonly=True)
    features: Mapped[list[CarFeatureRow]] = relationship(viewonly=True)
    specifications: Mapped[list[CarSpecificationRow]] = relationship(viewonly=True)


class CarPricingRow(Base):
    __tablename__ = "car_pricing"
    __table_args__ = (UniqueConstraint("car_id", name="uq_car_pricing_car_id"),)

    id: Mapped[uuid.UUID] = _primary_key()
    car_id: Mapped[uuid.UUID] = _car_fk()
    base_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    weekly_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    deposit: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class CarImageRow(Base):
    __tablename__ = "car_images"
    # Images are reconciled by path on update; the upsert relies on this
    __table_args__ = (UniqueConstraint("car_id", "path", name="uq_car_images_car_id_path"),)

    id: Mapped[uuid.UUID] = _primary_key()
    car_id: Mapped[uuid.UUID] = _car_fk()
    url: Mapped[str] = mapped_column(Text, nullable=False)
    path: Mapped[str | None] = mapped_column(Text, nullable=True)
    alt_text: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    sort_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class CarFeatureRow(Base):
    __tablename__ = "car_features"

    id: Mapped[uuid.UUID] = _primary_key()
    car_id: Mapped[uuid.UUID] = _car_fk()
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class CarSpecificationRow(Base):
    __tablename__ = "car_specifications"

    id: Mapped[uuid.UUID] = _primary_key()
    car_id: Mapped[uuid.UUID] = _car_fk()
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str | None] = mapped_column(String(200), nullable=True)


class HomepageSettingsRow(Base):
    __tablename__ = "homepage_settings"

    id: Mapped[uuid.UUID] = _primary_key()
    featured_car_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("cars.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
