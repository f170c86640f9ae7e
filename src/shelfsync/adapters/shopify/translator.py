"""Translate Shopify product payloads into remote catalog items."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shelfsync.domain.model import (
    Money,
    RemoteProduct,
    RemoteVariant,
    SelectedOption,
    VariantRef,
)

if TYPE_CHECKING:
    from .schema import MetafieldPayload, ProductNode, ProductVariantsNode, VariantPayload


def translate_product(node: ProductNode) -> RemoteProduct:
    min_price = node.price_range.min_variant_price if node.price_range else None
    return RemoteProduct(
        remote_id=node.id,
        title=node.title,
        description=node.description,
        vendor=node.vendor,
        product_type=node.product_type,
        tags=tuple(node.tags),
        total_inventory=node.total_inventory,
        featured_image_url=node.featured_image.url if node.featured_image else None,
        image_urls=tuple(image.url for image in node.images.nodes if image.url),
        variants=tuple(_translate_variant(variant) for variant in node.variants.nodes),
        min_price=(
            Money.parse(min_price.amount, min_price.currency_code) if min_price else None
        ),
        category_full_name=node.category.full_name if node.category else None,
        metafields={
            _metafield_key(field): field.value
            for field in node.metafields.nodes
            if field.value is not None
        },
    )


def _metafield_key(field: MetafieldPayload) -> str:
    return f"{field.namespace}.{field.key}" if field.namespace else field.key


def _translate_variant(variant: VariantPayload) -> RemoteVariant:
    return RemoteVariant(
        id=variant.id,
        inventory_quantity=variant.inventory_quantity,
        selected_options=tuple(
            SelectedOption(name=option.name, value=option.value)
            for option in variant.selected_options
        ),
    )


def translate_variant_refs(node: ProductVariantsNode | None) -> list[VariantRef]:
    if node is None:
        return []
    return [
        VariantRef(variant_id=variant.id, inventory_item_id=variant.inventory_item.id)
        for variant in node.variants.nodes
    ]
