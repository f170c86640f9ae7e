"""Normalized catalog data forwarded to the secondary backend.

The sink is a best-effort side channel: nothing here feeds back into the
reconciliation loop.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Final

from shelfsync.domain.classification import size_option

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shelfsync.domain.model import RemoteProduct

UNTITLED_PRODUCT: Final[str] = "Untitled Product"
IMPORTED_DESCRIPTION: Final[str] = "Imported from Shopify"
UNKNOWN_BRAND: Final[str] = "Unknown Brand"
FALLBACK_CATEGORY: Final[str] = "Sports Equipment"
DESCRIPTION_LIMIT: Final[int] = 500

GENERIC_VENDORS: Final[tuple[str, ...]] = (
    "my-shop-dev",
    "shopify",
    "admin",
    "test",
    "demo",
    "unknown",
    "none",
)
GENERIC_BRANDS: Final[tuple[str, ...]] = (
    *GENERIC_VENDORS,
    "generic",
    "sample",
    "example",
    "default",
    "product",
)
GENERIC_SIZES: Final[tuple[str, ...]] = (
    "default title",
    "title",
    "default",
    "none",
    "unknown",
    "not specified",
)

# Ordered: the first category whose keyword appears in any tag wins.
TAG_CATEGORY_KEYWORDS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("Snowboards", ("snowboard", "snowboards", "board")),
    ("Ski Equipment", ("ski", "skis", "skiing", "wax")),
    ("Winter Sports", ("winter", "snow", "cold", "mountain")),
    ("Accessories", ("accessory", "accessories", "gear", "equipment")),
    ("Apparel", ("clothing", "apparel", "jacket", "pants", "gloves")),
    ("Electronics", ("electronic", "camera", "gopro", "video", "photography")),
    ("Gift Cards", ("gift", "giftcard", "voucher")),
    ("Collections", ("collection", "hydrogen", "oxygen", "liquid", "series")),
)
CATEGORY_NORMALIZATION: Final[tuple[tuple[str, str], ...]] = (
    ("snowboard", "Snowboards"),
    ("ski", "Ski Equipment"),
    ("winter", "Winter Sports"),
    ("accessory", "Accessories"),
    ("electronic", "Electronics"),
    ("gift", "Gift Cards"),
    ("giftcard", "Gift Cards"),
    ("collection", "Collections"),
)
TITLE_CATEGORY_KEYWORDS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("Snowboards", ("snowboard", "snow board")),
    ("Ski Equipment", ("ski wax", "ski")),
    ("Gift Cards", ("gift card", "giftcard")),
    ("Collections", ("hydrogen", "oxygen", "liquid")),
    ("Electronics", ("videographer", "camera")),
    ("Accessories", ("wax",)),
    (
        "Snowboards",
        (
            "minimal",
            "complete",
            "draft",
            "archived",
            "compare",
            "out of stock",
            "multi-location",
            "fulfilled",
        ),
    ),
)
CATEGORY_GROUPS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("Sporting Goods", ("snowboard", "ski", "winter sports")),
    ("Gift Cards", ("gift card", "gift")),
    ("Toys & Games", ("toy", "game")),
    ("Accessories", ("accessory", "gear")),
    ("Clothing", ("clothing", "apparel")),
    ("Footwear", ("shoe", "footwear")),
)
SIZE_NAMES: Final[dict[str, str]] = {
    "xs": "XS",
    "extra small": "XS",
    "extra-small": "XS",
    "s": "S",
    "small": "S",
    "m": "M",
    "medium": "M",
    "l": "L",
    "large": "L",
    "xl": "XL",
    "extra large": "XL",
    "extra-large": "XL",
    "x-large": "XL",
    "xxl": "XXL",
    "2xl": "XXL",
    "2x large": "XXL",
    "xxxl": "XXXL",
    "3xl": "XXXL",
    "3x large": "XXXL",
    "one size": "One Size",
    "osfa": "One Size",
    "one size fits all": "One Size",
}

_HTML_TAG = re.compile(r"<[^>]*>")
_NUMERIC_SIZE = re.compile(r"^(\d+(?:\.\d+)?)([A-Z]*)$", re.IGNORECASE)
_CATALOG_SIZE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\b(XS|S|M|L|XL|XXL|XXXL|2XL|3XL|4XL)\b", re.IGNORECASE),
    re.compile(
        r"\b(Extra Small|Small|Medium|Large|Extra Large|2X Large|3X Large)\b", re.IGNORECASE
    ),
    re.compile(r"\b(One Size|OSFA|One Size Fits All)\b", re.IGNORECASE),
)
_BRAND_TITLE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+"),
    re.compile(r"by\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)", re.IGNORECASE),
    re.compile(r"-\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)$", re.IGNORECASE),
)
_BRAND_NOISE = re.compile(
    r"\b(inc|llc|co|corporation|company|brand|shopify|test|demo)\b", re.IGNORECASE
)


@dataclass(frozen=True, slots=True)
class CatalogProduct:
    shopify_id: str
    title: str
    description: str
    brand: str
    category: str
    product_type: str
    tags: str
    quantity: int
    price: int
    condition: str
    shopify_product_id: str


@dataclass(frozen=True, slots=True)
class CatalogSize:
    standard_size: str
    product_title: str


@dataclass(frozen=True, slots=True)
class CatalogImage:
    product_title: str
    image_src: str
    shopify_product_id: str
    type: str


@dataclass(frozen=True, slots=True)
class CatalogCategory:
    name: str
    group: str
    source: str


@dataclass(frozen=True, slots=True)
class CatalogBatch:
    """Everything published to the sink for one merchant in one run."""

    products: tuple[CatalogProduct, ...] = ()
    brands: tuple[str, ...] = ()
    sizes: tuple[CatalogSize, ...] = ()
    images: tuple[CatalogImage, ...] = ()
    categories: tuple[CatalogCategory, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.products or self.brands or self.sizes or self.images or self.categories)


def build_catalog_batch(products: Sequence[RemoteProduct]) -> CatalogBatch:
    return CatalogBatch(
        products=tuple(catalog_product(product) for product in products),
        brands=extract_brands(products),
        sizes=extract_sizes(products),
        images=extract_images(products),
        categories=extract_categories(products),
    )


def catalog_product(product: RemoteProduct) -> CatalogProduct:
    amount = product.min_price.amount if product.min_price else Decimal(0)
    return CatalogProduct(
        shopify_id=product.remote_id,
        title=product.title or UNTITLED_PRODUCT,
        description=clean_description(product.description) or IMPORTED_DESCRIPTION,
        brand=product.vendor or UNKNOWN_BRAND,
        category=determine_category(product),
        product_type=product.product_type or "",
        tags=", ".join(product.tags),
        quantity=product.total_inventory or 0,
        price=int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP)),
        condition="new",
        shopify_product_id=product.remote_id,
    )


# Categories -------------------------------------------------------------------


def determine_category(product: RemoteProduct) -> str:
    """Product type, then tags, then a non-generic vendor, then the title."""

    if product.product_type and product.product_type.strip():
        return normalize_category(product.product_type)
    from_tags = category_from_tags(product.tags)
    if from_tags is not None:
        return from_tags
    if product.vendor and not is_generic_vendor(product.vendor):
        return normalize_category(product.vendor)
    return category_from_title(product.title)


def category_from_tags(tags: Iterable[str]) -> str | None:
    tag_list = [tag.strip().lower() for tag in tags]
    if not tag_list:
        return None
    for category, keywords in TAG_CATEGORY_KEYWORDS:
        for keyword in keywords:
            if any(keyword in tag for tag in tag_list):
                return category
    return None


def normalize_category(category: str | None) -> str:
    if not category:
        return "General"
    lowered = category.lower()
    for key, value in CATEGORY_NORMALIZATION:
        if key in lowered:
            return value
    return " ".join(word[:1].upper() + word[1:].lower() for word in category.split(" "))


def category_from_title(title: str | None) -> str:
    if not title:
        return FALLBACK_CATEGORY
    lowered = title.lower()
    for category, keywords in TITLE_CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def is_generic_vendor(vendor: str | None) -> bool:
    if not vendor:
        return True
    lowered = vendor.lower()
    return any(generic in lowered for generic in GENERIC_VENDORS)


def category_group(name: str | None) -> str:
    if not name:
        return "Other"
    lowered = name.lower()
    for group, keywords in CATEGORY_GROUPS:
        if any(keyword in lowered for keyword in keywords):
            return group
    return "Other"


def category_hierarchy(full_name: str | None) -> tuple[str, str]:
    """Split ``"Apparel > Tops > Shirts"`` into ``(group, name)``."""

    if not full_name:
        return "Other", "Uncategorized"
    parts = [part for part in full_name.split(" > ") if part.strip()]
    if not parts:
        return "Other", "Uncategorized"
    return parts[0], parts[-1]


def extract_categories(products: Iterable[RemoteProduct]) -> tuple[CatalogCategory, ...]:
    categories: dict[tuple[str, str], CatalogCategory] = {}
    for product in products:
        if product.category_full_name:
            group, name = category_hierarchy(product.category_full_name)
            source = "category_hierarchy"
        elif product.product_type and product.product_type.strip():
            name = product.product_type.strip()
            group = category_group(name)
            source = "product_types_fallback"
        else:
            continue
        categories[(group, name)] = CatalogCategory(name=name, group=group, source=source)
    return tuple(categories.values())


# Brands -----------------------------------------------------------------------


def is_generic_brand(name: str | None) -> bool:
    if not name:
        return True
    lowered = name.lower()
    return any(generic in lowered for generic in GENERIC_BRANDS)


def normalize_brand(name: str | None) -> str:
    if not name:
        return UNKNOWN_BRAND
    collapsed = re.sub(r"\s+", " ", name.strip())
    stripped = re.sub(r"[^\w\s-]", "", collapsed)
    stripped = _BRAND_NOISE.sub("", stripped)
    return re.sub(r"\s+", " ", stripped.strip())


def brand_from_title(title: str | None) -> str | None:
    if not title:
        return None
    lowered = title.lower()
    if any(term in lowered for term in ("gift card", "test product", "sample", "demo")):
        return None
    for pattern in _BRAND_TITLE_PATTERNS:
        match = pattern.search(title)
        if match and match.group(1):
            candidate = match.group(1).strip()
            if not is_generic_brand(candidate):
                return candidate
    return None


def brand_name(product: RemoteProduct) -> str | None:
    if product.vendor and product.vendor.strip():
        return product.vendor.strip()
    if product.product_type and product.product_type.strip():
        return product.product_type.strip()
    from_title = brand_from_title(product.title)
    if from_title:
        return from_title
    for key, value in product.metafields.items():
        if "brand" in key.lower() and value.strip():
            return value
    return None


def extract_brands(products: Iterable[RemoteProduct]) -> tuple[str, ...]:
    brands: dict[str, None] = {}
    for product in products:
        name = brand_name(product)
        if not name or is_generic_brand(name):
            continue
        normalized = normalize_brand(name)
        if normalized and normalized != UNKNOWN_BRAND and not is_generic_brand(normalized):
            brands[normalized] = None
    return tuple(brands)


# Sizes ------------------------------------------------------------------------


def is_generic_size(size: str | None) -> bool:
    if not size:
        return True
    lowered = size.lower()
    return any(generic in lowered for generic in GENERIC_SIZES)


def normalize_size(size: str | None) -> str:
    if not size:
        return "One Size"
    mapped = SIZE_NAMES.get(size.lower().strip())
    if mapped is not None:
        return mapped
    numeric = _NUMERIC_SIZE.match(size)
    if numeric:
        return f"{numeric.group(1)}{numeric.group(2)}".upper()
    return size[:1].upper() + size[1:].lower()


def catalog_size(product: RemoteProduct) -> str:
    from_variants = size_option(product.variants)
    if from_variants is not None:
        return from_variants
    if product.title:
        for pattern in _CATALOG_SIZE_PATTERNS:
            match = pattern.search(product.title)
            if match:
                return normalize_size(match.group(0))
    tag_list = [tag.strip().lower() for tag in product.tags]
    for tag in tag_list:
        if tag in SIZE_NAMES:
            return SIZE_NAMES[tag]
    return "One Size"


def extract_sizes(products: Iterable[RemoteProduct]) -> tuple[CatalogSize, ...]:
    sizes: list[CatalogSize] = []
    for product in products:
        size = catalog_size(product)
        if not size.strip() or is_generic_size(size):
            continue
        normalized = normalize_size(size)
        # "One Size" carries no information for the backend
        if normalized == "One Size" or not product.title:
            continue
        sizes.append(CatalogSize(standard_size=normalized, product_title=product.title))
    return tuple(sizes)


# Images -----------------------------------------------------------------------


def extract_images(products: Iterable[RemoteProduct]) -> tuple[CatalogImage, ...]:
    images: list[CatalogImage] = []
    for product in products:
        if product.featured_image_url:
            images.append(
                CatalogImage(
                    product_title=product.title,
                    image_src=product.featured_image_url,
                    shopify_product_id=product.remote_id,
                    type="featured",
                )
            )
        has_featured = bool(product.featured_image_url)
        for index, url in enumerate(product.image_urls):
            if url == product.featured_image_url:
                continue
            images.append(
                CatalogImage(
                    product_title=product.title,
                    image_src=url,
                    shopify_product_id=product.remote_id,
                    type="featured" if index == 0 and not has_featured else "additional",
                )
            )
    return tuple(images)


def clean_description(html: str | None) -> str:
    if not html:
        return ""
    text = _HTML_TAG.sub("", html).replace("&nbsp;", " ").strip()
    return text[:DESCRIPTION_LIMIT]
