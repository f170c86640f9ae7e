"""Port for the best-effort catalog sink."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shelfsync.domain.catalog import CatalogBatch
    from shelfsync.domain.model import MerchantKey


@runtime_checkable
class CatalogSink(Protocol):
    """Receives normalized catalog data; failures never affect reconciliation."""

    def publish(self, merchant_key: MerchantKey, batch: CatalogBatch) -> None: ...


__all__ = ["CatalogSink"]
