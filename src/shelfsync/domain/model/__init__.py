"""Public domain model surface."""

from __future__ import annotations

from shelfsync.domain.model.primitives import (
    PRICE_NOT_AVAILABLE,
    ExternalId,
    MerchantKey,
    Money,
    RemoteId,
    extract_external_id,
)
from shelfsync.domain.model.product import (
    DEFAULT_BRAND,
    DEFAULT_CONDITION,
    DEFAULT_DESCRIPTION,
    DEFAULT_IMAGE_URL,
    DEFAULT_PRICE,
    DEFAULT_SIZE,
    ProductFields,
    ProductRecord,
    StoreStats,
    UpsertResult,
)
from shelfsync.domain.model.remote import (
    InventoryQuantity,
    RemoteProduct,
    RemoteVariant,
    SelectedOption,
    VariantRef,
    WriteResult,
)

__all__ = [  # noqa: RUF022
    # primitives
    "ExternalId",
    "MerchantKey",
    "Money",
    "PRICE_NOT_AVAILABLE",
    "RemoteId",
    "extract_external_id",
    # local records
    "DEFAULT_BRAND",
    "DEFAULT_CONDITION",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_IMAGE_URL",
    "DEFAULT_PRICE",
    "DEFAULT_SIZE",
    "ProductFields",
    "ProductRecord",
    "StoreStats",
    "UpsertResult",
    # remote catalog
    "InventoryQuantity",
    "RemoteProduct",
    "RemoteVariant",
    "SelectedOption",
    "VariantRef",
    "WriteResult",
]
