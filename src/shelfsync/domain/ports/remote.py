"""Ports for writing back to the remote commerce platform."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelfsync.domain.model import (
        ExternalId,
        InventoryQuantity,
        MerchantKey,
        VariantRef,
        WriteResult,
    )


@runtime_checkable
class RemoteCatalogWriter(Protocol):
    """Single-field writes scoped to one merchant's remote catalog.

    Application-level rejections come back as ``WriteResult`` failures; transport
    errors and timeouts are raised.
    """

    def update_title(
        self, merchant_key: MerchantKey, external_id: ExternalId, title: str
    ) -> WriteResult: ...

    def query_variants(
        self, merchant_key: MerchantKey, external_id: ExternalId
    ) -> Sequence[VariantRef]: ...

    def set_inventory(
        self, merchant_key: MerchantKey, quantities: Sequence[InventoryQuantity]
    ) -> WriteResult: ...


__all__ = ["RemoteCatalogWriter"]
