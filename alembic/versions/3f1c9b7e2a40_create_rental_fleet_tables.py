"""Create rental fleet tables

Revision ID: 3f1c9b7e2a40
Revises:
Create Date: 2026-10-12 18:04:27.114305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9b7e2a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )


def _car_fk() -> sa.Column:
    return sa.Column(
        "car_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("cars.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "cars",
        _id(),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("short_description", sa.String(length=500), nullable=True),
        sa.Column("available", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("featured", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("hidden", sa.Boolean(), server_default="false", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index(op.f("ix_cars_category"), "cars", ["category"], unique=False)

    op.create_table(
        "car_pricing",
        _id(),
        _car_fk(),
        sa.Column("base_price", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("weekly_price", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("monthly_price", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("deposit", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("car_id", name="uq_car_pricing_car_id"),
    )
    op.create_index(op.f("ix_car_pricing_car_id"), "car_pricing", ["car_id"], unique=False)

    op.create_table(
        "car_images",
        _id(),
        _car_fk(),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("path", sa.Text(), nullable=True),
        sa.Column("alt_text", sa.String(length=200), nullable=True),
        sa.Column("is_primary", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("car_id", "path", name="uq_car_images_car_id_path"),
    )
    op.create_index(op.f("ix_car_images_car_id"), "car_images", ["car_id"], unique=False)

    op.create_table(
        "car_features",
        _id(),
        _car_fk(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_car_features_car_id"), "car_features", ["car_id"], unique=False)

    op.create_table(
        "car_specifications",
        _id(),
        _car_fk(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("value", sa.String(length=200), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_car_specifications_car_id"), "car_specifications", ["car_id"], unique=False
    )

    op.create_table(
        "homepage_settings",
        _id(),
        sa.Column(
            "featured_car_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("cars.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("homepage_settings")
    op.drop_index(op.f("ix_car_specifications_car_id"), table_name="car_specifications")
    op.drop_table("car_specifications")
    op.drop_index(op.f("ix_car_features_car_id"), table_name="car_features")
    op.drop_table("car_features")
    op.drop_index(op.f("ix_car_images_car_id"), table_name="car_images")
    op.drop_table("car_images")
    op.drop_index(op.f("ix_car_pricing_car_id"), table_name="car_pricing")
    op.drop_table("car_pricing")
    op.drop_index(op.f("ix_cars_category"), table_name="cars")
    op.drop_table("cars")
