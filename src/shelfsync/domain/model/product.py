"""Local inventory records and the values written to the local store."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final

from .primitives import PRICE_NOT_AVAILABLE

if TYPE_CHECKING:
    from datetime import datetime

    from .primitives import ExternalId, MerchantKey

DEFAULT_DESCRIPTION: Final[str] = ""
DEFAULT_IMAGE_URL: Final[str] = ""
DEFAULT_CONDITION: Final[str] = "Unknown"
DEFAULT_BRAND: Final[str] = "Luxury Brand"
DEFAULT_SIZE: Final[str] = "One Size"
DEFAULT_PRICE: Final[str] = PRICE_NOT_AVAILABLE


@dataclass(frozen=True, slots=True, kw_only=True)
class ProductFields:
    """Attributes written by an upsert; identity lives outside.

    Fields built from a remote snapshot keep the remote inventory as reported,
    which can be negative for oversold stock. ``for_storage`` gives the values a
    local row may hold.
    """

    title: str
    description: str = DEFAULT_DESCRIPTION
    image_url: str = DEFAULT_IMAGE_URL
    condition: str = DEFAULT_CONDITION
    brand: str = DEFAULT_BRAND
    size: str = DEFAULT_SIZE
    price: str = DEFAULT_PRICE
    inventory_quantity: int = 0

    def for_storage(self) -> ProductFields:
        if self.inventory_quantity >= 0:
            return self
        return replace(self, inventory_quantity=0)


@dataclass(frozen=True, slots=True, kw_only=True)
class ProductRecord:
    """One product row for one merchant.

    ``(merchant_key, external_id)`` is unique. ``id`` is the local row id and is
    ``None`` for records built from a remote snapshot.
    """

    merchant_key: MerchantKey
    external_id: ExternalId
    fields: ProductFields
    id: int | None = None
    updated_at: datetime | None = None

    @property
    def title(self) -> str:
        return self.fields.title

    @property
    def inventory_quantity(self) -> int:
        return self.fields.inventory_quantity

    def with_fields(self, **changes: object) -> ProductRecord:
        return replace(self, fields=replace(self.fields, **changes))


@dataclass(frozen=True, slots=True)
class UpsertResult:
    inserted: bool


@dataclass(frozen=True, slots=True)
class StoreStats:
    merchant_key: MerchantKey
    product_count: int
    total_inventory: int
