"""PostgreSQL implementation of CarStore."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.orm import Session, selectinload

from rental_fleet.infra.db.models.base import Base
from rental_fleet.infra.db.models.car import (
    CarFeatureRow,
    CarImageRow,
    CarPricingRow,
    CarRow,
    CarSpecificationRow,
    HomepageSettingsRow,
)
from rental_fleet.ports.car_store import CarListQuery, CarStore, CarTable

_MODELS: dict[CarTable, type[Base]] = {
    CarTable.CARS: CarRow,
    CarTable.PRICING: CarPricingRow,
    CarTable.IMAGES: CarImageRow,
    CarTable.FEATURES: CarFeatureRow,
    CarTable.SPECIFICATIONS: CarSpecificationRow,
}

_UUID_COLUMNS = ("id", "car_id", "created_by", "featured_car_id")


class PostgresCarStore(CarStore):
    """
    PostgreSQL implementation of CarStore.

    - Reads use the ORM models with the related tables eager loaded
      (selectinload); pricing comes back as a single mapping
    - Writes are table-level INSERT/UPDATE/DELETE ... RETURNING statements
    - Every write runs in its own SAVEPOINT so a failed statement leaves the
      request transaction usable for compensating writes
    - Identifiers that are not valid UUIDs match nothing

    Bound to a single Session, so calls must not run concurrently.
    """

    supports_concurrent_calls = False

    def __init__(self, session: Session) -> None:
        """
        Initialize store with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    # --- cars ---------------------------------------------------------------

    def get_car(self, *, car_id: str | None = None, slug: str | None = None) -> dict[str, Any] | None:
        query = self._car_lookup(car_id=car_id, slug=slug)
        if query is None:
            return None
        row = self._session.execute(query).scalar_one_or_none()
        return _to_dict(row) if row else None

    def get_car_with_relations(
        self, *, car_id: str | None = None, slug: str | None = None
    ) -> dict[str, Any] | None:
        query = self._car_lookup(car_id=car_id, slug=slug)
        if query is None:
            return None
        query = query.options(
            selectinload(CarRow.pricing),
            selectinload(CarRow.images),
            selectinload(CarRow.features),
            selectinload(CarRow.specifications),
        )
        row = self._session.execute(query).scalar_one_or_none()
        if row is None:
            return None
        return {
            **_to_dict(row),
            "pricing": _to_dict(row.pricing) if row.pricing else None,
            "images": [_to_dict(image) for image in row.images],
            "features": [_to_dict(feature) for feature in row.features],
            "specifications": [_to_dict(spec) for spec in row.specifications],
        }

    def list_cars(self, query: CarListQuery) -> list[dict[str, Any]]:
        statement = select(CarRow).execution_options(populate_existing=True)

        if query.available is not None:
            statement = statement.where(CarRow.available == query.available)
        if query.hidden is not None:
            statement = statement.where(CarRow.hidden == query.hidden)
        if query.category is not None:
            statement = statement.where(CarRow.category == query.category)
        if query.exclude_id is not None:
            exclude = _uuid(query.exclude_id)
            if exclude is not None:
                statement = statement.where(CarRow.id != exclude)

        for column_name, descending in query.order_by:
            column = CarRow.__table__.c[column_name]
            statement = statement.order_by(column.desc() if descending else column.asc())

        if query.limit is not None:
            statement = statement.limit(query.limit)

        if query.with_relations:
            statement = statement.options(selectinload(CarRow.pricing), selectinload(CarRow.images))

        rows = self._session.execute(statement).scalars().all()
        if not query.with_relations:
            return [_to_dict(row) for row in rows]
        return [
            {
                **_to_dict(row),
                "pricing": _to_dict(row.pricing) if row.pricing else None,
                "images": [_to_dict(image) for image in row.images],
            }
            for row in rows
        ]

    def insert_car(self, values: dict[str, Any]) -> dict[str, Any]:
        table = _table(CarTable.CARS)
        statement = insert(table).values(**_coerce(values)).returning(*table.c)
        with self._session.begin_nested():
            row = self._session.execute(statement).mappings().one()
        return _stringify(row)

    def update_car(self, car_id: str, values: dict[str, Any]) -> None:
        key = _uuid(car_id)
        if key is None:
            return
        table = _table(CarTable.CARS)
        with self._session.begin_nested():
            self._session.execute(update(table).where(table.c.id == key).values(**_coerce(values)))

    def delete_car(self, car_id: str) -> None:
        key = _uuid(car_id)
        if key is None:
            return
        table = _table(CarTable.CARS)
        with self._session.begin_nested():
            self._session.execute(delete(table).where(table.c.id == key))

    # --- related tables -----------------------------------------------------

    def select_related(self, table: CarTable, car_id: str) -> list[dict[str, Any]]:
        key = _uuid(car_id)
        if key is None:
            return []
        sa_table = _table(table)
        rows = self._session.execute(select(sa_table).where(sa_table.c.car_id == key)).mappings().all()
        return [_stringify(row) for row in rows]

    def insert_related(self, table: CarTable, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        sa_table = _table(table)
        statement = insert(sa_table).values([_coerce(row) for row in rows]).returning(*sa_table.c)
        with self._session.begin_nested():
            inserted = self._session.execute(statement).mappings().all()
        return [_stringify(row) for row in inserted]

    def upsert_related(
        self,
        table: CarTable,
        rows: list[dict[str, Any]],
        on_conflict: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        if not rows:
            return []
        sa_table = _table(table)
        statement = pg_insert(sa_table).values([_coerce(row) for row in rows])
        replaced = {
            column: statement.excluded[column]
            for column in rows[0]
            if column not in on_conflict and column != "id"
        }
        statement = statement.on_conflict_do_update(
            index_elements=list(on_conflict),
            set_=replaced,
        ).returning(*sa_table.c)
        with self._session.begin_nested():
            written = self._session.execute(statement).mappings().all()
        return [_stringify(row) for row in written]

    def delete_related(self, table: CarTable, car_id: str, ids: list[str] | None = None) -> None:
        key = _uuid(car_id)
        if key is None:
            return
        sa_table = _table(table)
        statement = delete(sa_table).where(sa_table.c.car_id == key)
        if ids is not None:
            statement = statement.where(sa_table.c.id.in_([_uuid(value) for value in ids]))
        with self._session.begin_nested():
            self._session.execute(statement)

    # --- homepage settings --------------------------------------------------

    def get_homepage_settings(self) -> dict[str, Any] | None:
        table = HomepageSettingsRow.__table__
        row = self._session.execute(
            select(table).order_by(table.c.created_at.asc()).limit(1)
        ).mappings().first()
        return _stringify(row) if row else None

    def insert_homepage_settings(self, values: dict[str, Any]) -> dict[str, Any]:
        table = HomepageSettingsRow.__table__
        statement = insert(table).values(**_coerce(values)).returning(*table.c)
        with self._session.begin_nested():
            row = self._session.execute(statement).mappings().one()
        return _stringify(row)

    def update_homepage_settings(self, settings_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        key = _uuid(settings_id)
        if key is None:
            return None
        table = HomepageSettingsRow.__table__
        statement = update(table).where(table.c.id == key).values(**_coerce(values)).returning(*table.c)
        with self._session.begin_nested():
            row = self._session.execute(statement).mappings().first()
        return _stringify(row) if row else None

    # --- helpers ------------------------------------------------------------

    @staticmethod
    def _car_lookup(*, car_id: str | None, slug: str | None):
        statement = select(CarRow).execution_options(populate_existing=True)
        if car_id is not None:
            key = _uuid(car_id)
            if key is None:  # Invalid UUID format
                return None
            return statement.where(CarRow.id == key)
        if slug is not None:
            return statement.where(CarRow.slug == slug)
        raise ValueError("car_id or slug is required")


def _table(table: CarTable) -> Table:
    return _MODELS[table].__table__  # type: ignore[return-value]


def _uuid(value: Any) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert string identifiers to UUIDs for the UUID columns."""
    return {
        key: _uuid(value) if key in _UUID_COLUMNS and value is not None else value
        for key, value in values.items()
    }


def _stringify(row: Any) -> dict[str, Any]:
    return {
        key: str(value) if isinstance(value, uuid.UUID) else value
        for key, value in dict(row).items()
    }


def _to_dict(row: Base) -> dict[str, Any]:
    """Column values of an ORM row, identifiers as strings."""
    return _stringify({column.key: getattr(row, column.key) for column in row.__table__.columns})
