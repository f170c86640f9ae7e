"""Ports for persisting local inventory records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shelfsync.domain.model import (
        ExternalId,
        MerchantKey,
        ProductFields,
        ProductRecord,
        StoreStats,
        UpsertResult,
    )


@runtime_checkable
class ProductRepository(Protocol):
    """Local store contract; every call is scoped to one merchant."""

    def get_all(self, merchant_key: MerchantKey) -> list[ProductRecord]: ...

    def get_one(self, merchant_key: MerchantKey, internal_id: int) -> ProductRecord | None: ...

    def upsert(
        self, merchant_key: MerchantKey, external_id: ExternalId, fields: ProductFields
    ) -> UpsertResult: ...

    def delete_all(self, merchant_key: MerchantKey) -> int: ...

    def update_inventory(
        self, merchant_key: MerchantKey, internal_id: int, quantity: int
    ) -> bool: ...

    def store_stats(self) -> list[StoreStats]: ...
