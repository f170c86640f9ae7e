"""Heuristic classification of remote catalog items.

Every function here is pure: it looks at a :class:`RemoteProduct` and guesses
the merchant-facing attributes (condition, brand, size, price, inventory, main
image) that the remote platform does not expose as first-class fields.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from shelfsync.domain.model import (
    DEFAULT_BRAND,
    DEFAULT_CONDITION,
    DEFAULT_DESCRIPTION,
    DEFAULT_IMAGE_URL,
    DEFAULT_PRICE,
    DEFAULT_SIZE,
    ProductFields,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shelfsync.domain.model import RemoteProduct, RemoteVariant

CONDITION_TAGS: Final[tuple[str, ...]] = ("excellent", "very good", "good", "fair", "poor")
DEFAULT_VARIANT_TITLE: Final[str] = "Default Title"

_TITLE_SIZE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\b(XS|S|M|L|XL|XXL|XXXL)\b", re.IGNORECASE),
    re.compile(r"\b(2[0-9]|3[0-9]|4[0-9])\b"),
    re.compile(r"\b(Small|Medium|Large|One Size)\b", re.IGNORECASE),
)


@dataclass(frozen=True, slots=True)
class NormalizedFields:
    condition: str
    brand: str
    size: str
    price: str
    inventory: int
    image_url: str | None


type Classifier = Callable[[RemoteProduct], NormalizedFields]


def classify(product: RemoteProduct) -> NormalizedFields:
    return NormalizedFields(
        condition=extract_condition(product),
        brand=extract_brand(product),
        size=extract_size(product),
        price=extract_price(product),
        inventory=extract_inventory(product),
        image_url=extract_main_image(product),
    )


def to_product_fields(product: RemoteProduct, normalized: NormalizedFields) -> ProductFields:
    """Combine raw and classified values into what the local store keeps.

    Inventory is passed through unclamped so change detection sees oversold
    stock; clamp with ``ProductFields.for_storage`` before writing locally.
    """

    return ProductFields(
        title=product.title,
        description=product.description or DEFAULT_DESCRIPTION,
        image_url=normalized.image_url or DEFAULT_IMAGE_URL,
        condition=normalized.condition or DEFAULT_CONDITION,
        brand=normalized.brand or DEFAULT_BRAND,
        size=normalized.size or DEFAULT_SIZE,
        price=normalized.price or DEFAULT_PRICE,
        inventory_quantity=normalized.inventory,
    )


def _metafield_value(product: RemoteProduct, *needles: str) -> str | None:
    for key, value in product.metafields.items():
        lowered = key.lower()
        if any(needle in lowered for needle in needles) and value.strip():
            return value
    return None


def extract_condition(product: RemoteProduct) -> str:
    from_metafield = _metafield_value(product, "condition")
    if from_metafield is not None:
        return from_metafield

    for tag in product.tags:
        lowered = tag.lower()
        if any(condition in lowered for condition in CONDITION_TAGS):
            return tag[:1].upper() + tag[1:]

    return DEFAULT_CONDITION


def extract_brand(product: RemoteProduct) -> str:
    if product.vendor and product.vendor.strip():
        return product.vendor
    if product.product_type and product.product_type.strip():
        return product.product_type
    from_metafield = _metafield_value(product, "brand", "designer")
    if from_metafield is not None:
        return from_metafield
    return DEFAULT_BRAND


def size_option(variants: Iterable[RemoteVariant]) -> str | None:
    for variant in variants:
        for option in variant.selected_options:
            if "size" in option.name.lower() and option.value and (
                option.value != DEFAULT_VARIANT_TITLE
            ):
                return option.value
    return None


def extract_size(product: RemoteProduct) -> str:
    # only the first variant speaks for the listing
    from_variant = size_option(product.variants[:1])
    if from_variant is not None:
        return from_variant
    return size_from_text(product.title)


def size_from_text(text: str | None) -> str:
    if not text:
        return DEFAULT_SIZE
    for pattern in _TITLE_SIZE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return DEFAULT_SIZE


def extract_inventory(product: RemoteProduct) -> int:
    if product.total_inventory is not None:
        return product.total_inventory
    return sum(variant.inventory_quantity or 0 for variant in product.variants)


def extract_price(product: RemoteProduct) -> str:
    if product.min_price is None:
        return DEFAULT_PRICE
    return product.min_price.formatted()


def extract_main_image(product: RemoteProduct) -> str | None:
    if product.featured_image_url:
        return product.featured_image_url
    if product.image_urls:
        return product.image_urls[0]
    return None
