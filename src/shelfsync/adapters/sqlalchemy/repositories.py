"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select, update

from shelfsync.adapters.sqlalchemy.mappings import product_table, utcnow
from shelfsync.domain.model import ProductFields, ProductRecord, StoreStats, UpsertResult

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from shelfsync.domain.model import ExternalId, MerchantKey
    from shelfsync.domain.ports.persistence import ProductRepository


def _field_values(fields: ProductFields) -> dict[str, object]:
    return {
        "title": fields.title,
        "description": fields.description,
        "image_url": fields.image_url,
        "product_condition": fields.condition,
        "brand": fields.brand,
        "size": fields.size,
        "price": fields.price,
        "inventory_quantity": fields.inventory_quantity,
    }


def _to_record(row: Row[tuple[object, ...]]) -> ProductRecord:
    mapping = row._mapping  # noqa: SLF001
    return ProductRecord(
        id=mapping["id"],
        merchant_key=mapping["merchant_key"],
        external_id=mapping["external_id"],
        updated_at=mapping["updated_at"],
        fields=ProductFields(
            title=mapping["title"],
            description=mapping["description"],
            image_url=mapping["image_url"],
            condition=mapping["product_condition"],
            brand=mapping["brand"],
            size=mapping["size"],
            price=mapping["price"],
            inventory_quantity=max(mapping["inventory_quantity"] or 0, 0),
        ),
    )


class SqlAlchemyProductRepository:
    """Product rows of every merchant; each call is scoped by ``merchant_key``.

    Nothing is committed here; the unit of work owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_all(self, merchant_key: MerchantKey) -> list[ProductRecord]:
        stmt = (
            select(product_table)
            .where(product_table.c.merchant_key == merchant_key)
            .order_by(product_table.c.updated_at.desc(), product_table.c.id.desc())
        )
        return [_to_record(row) for row in self.session.execute(stmt)]

    def get_one(self, merchant_key: MerchantKey, internal_id: int) -> ProductRecord | None:
        stmt = (
            select(product_table)
            .where(product_table.c.merchant_key == merchant_key)
            .where(product_table.c.id == internal_id)
        )
        row = self.session.execute(stmt).first()
        return _to_record(row) if row is not None else None

    def upsert(
        self, merchant_key: MerchantKey, external_id: ExternalId, fields: ProductFields
    ) -> UpsertResult:
        if fields.inventory_quantity < 0:
            raise ValueError("inventory_quantity must be non-negative")
        values = _field_values(fields)
        existing = self.session.execute(
            select(product_table.c.id)
            .where(product_table.c.merchant_key == merchant_key)
            .where(product_table.c.external_id == external_id)
        ).scalar_one_or_none()
        if existing is None:
            self.session.execute(
                insert(product_table).values(
                    merchant_key=merchant_key, external_id=external_id, **values
                )
            )
            return UpsertResult(inserted=True)
        self.session.execute(
            update(product_table)
            .where(product_table.c.id == existing)
            .values(updated_at=utcnow(), **values)
        )
        return UpsertResult(inserted=False)

    def delete_all(self, merchant_key: MerchantKey) -> int:
        result = self.session.execute(
            delete(product_table).where(product_table.c.merchant_key == merchant_key)
        )
        return result.rowcount or 0

    def update_inventory(self, merchant_key: MerchantKey, internal_id: int, quantity: int) -> bool:
        if quantity < 0:
            raise ValueError("quantity must be non-negative")
        result = self.session.execute(
            update(product_table)
            .where(product_table.c.merchant_key == merchant_key)
            .where(product_table.c.id == internal_id)
            .values(inventory_quantity=quantity, updated_at=utcnow())
        )
        return bool(result.rowcount)

    def store_stats(self) -> list[StoreStats]:
        stmt = (
            select(
                product_table.c.merchant_key,
                func.count(product_table.c.id),
                func.coalesce(func.sum(product_table.c.inventory_quantity), 0),
            )
            .group_by(product_table.c.merchant_key)
            .order_by(product_table.c.merchant_key)
        )
        return [
            StoreStats(
                merchant_key=merchant_key,
                product_count=int(count),
                total_inventory=int(total),
            )
            for merchant_key, count, total in self.session.execute(stmt)
        ]


if TYPE_CHECKING:

    def _repository_check(session: Session) -> ProductRepository:
        return SqlAlchemyProductRepository(session)
