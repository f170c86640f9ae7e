"""SQLAlchemy table metadata for the local product store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from shelfsync.domain.model import (
    DEFAULT_BRAND,
    DEFAULT_CONDITION,
    DEFAULT_PRICE,
    DEFAULT_SIZE,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

product_table = Table(
    "product",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("merchant_key", String(255), nullable=False),
    Column("external_id", String(255), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("image_url", Text, nullable=False, default=""),
    Column("product_condition", String(100), nullable=False, default=DEFAULT_CONDITION),
    Column("brand", String(255), nullable=False, default=DEFAULT_BRAND),
    Column("size", String(100), nullable=False, default=DEFAULT_SIZE),
    Column("price", String(100), nullable=False, default=DEFAULT_PRICE),
    Column("inventory_quantity", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow),
    UniqueConstraint("merchant_key", "external_id", name="uq_product_merchant_external"),
    Index("ix_product_external_id", "external_id"),
    Index("ix_product_merchant_key", "merchant_key"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables without running migrations."""

    log.info("Creating all tables")
    metadata.create_all(engine)
