"""Remote catalog items as delivered by a snapshot fetcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .primitives import extract_external_id

if TYPE_CHECKING:
    from .primitives import ExternalId, Money, RemoteId


@dataclass(frozen=True, slots=True)
class SelectedOption:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class RemoteVariant:
    id: RemoteId
    inventory_quantity: int | None = None
    selected_options: tuple[SelectedOption, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteProduct:
    """A catalog item before classification.

    ``metafields`` keys are ``"namespace.key"``, or the bare key when the
    metafield has no namespace.
    """

    remote_id: RemoteId
    title: str
    description: str | None = None
    vendor: str | None = None
    product_type: str | None = None
    tags: tuple[str, ...] = ()
    total_inventory: int | None = None
    featured_image_url: str | None = None
    image_urls: tuple[str, ...] = ()
    variants: tuple[RemoteVariant, ...] = ()
    min_price: Money | None = None
    category_full_name: str | None = None
    metafields: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def external_id(self) -> ExternalId:
        return extract_external_id(self.remote_id)


@dataclass(frozen=True, slots=True)
class VariantRef:
    """Identifiers needed to address one variant's stock."""

    variant_id: RemoteId
    inventory_item_id: RemoteId


@dataclass(frozen=True, slots=True)
class InventoryQuantity:
    inventory_item_id: RemoteId
    location_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class WriteResult:
    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> WriteResult:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> WriteResult:
        return cls(success=False, error=error)
