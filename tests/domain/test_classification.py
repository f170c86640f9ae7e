from __future__ import annotations

from decimal import Decimal

from shelfsync.domain.classification import (
    classify,
    extract_brand,
    extract_condition,
    extract_inventory,
    extract_main_image,
    extract_price,
    extract_size,
    size_from_text,
    to_product_fields,
)
from shelfsync.domain.model import (
    DEFAULT_BRAND,
    DEFAULT_PRICE,
    Money,
    RemoteProduct,
    RemoteVariant,
    SelectedOption,
    extract_external_id,
)


def _product(**overrides: object) -> RemoteProduct:
    values: dict[str, object] = {"remote_id": "gid://shopify/Product/1", "title": "Item"}
    values.update(overrides)
    return RemoteProduct(**values)  # type: ignore[arg-type]


def test_extract_external_id_takes_last_path_segment() -> None:
    assert extract_external_id("gid://shopify/Product/123") == "123"
    assert extract_external_id("123") == "123"
    assert extract_external_id(None) == ""


def test_condition_from_tags_is_capitalised() -> None:
    assert extract_condition(_product(tags=("summer", "very good"))) == "Very good"


def test_condition_from_metafield_wins_over_tags() -> None:
    product = _product(tags=("fair",), metafields={"custom.condition": "Pristine"})

    assert extract_condition(product) == "Pristine"


def test_condition_from_metafield_namespace() -> None:
    product = _product(tags=("fair",), metafields={"condition.grade": "Like new"})

    assert extract_condition(product) == "Like new"


def test_condition_defaults_to_unknown() -> None:
    assert extract_condition(_product()) == "Unknown"


def test_brand_prefers_vendor_then_product_type() -> None:
    assert extract_brand(_product(vendor="Gucci", product_type="Bags")) == "Gucci"
    assert extract_brand(_product(vendor=" ", product_type="Bags")) == "Bags"
    assert extract_brand(_product(metafields={"designer": "Prada"})) == "Prada"
    assert extract_brand(_product()) == DEFAULT_BRAND


def test_size_from_first_variant_option() -> None:
    variants = (
        RemoteVariant(id="v1", selected_options=(SelectedOption("Size", "38"),)),
        RemoteVariant(id="v2", selected_options=(SelectedOption("Size", "40"),)),
    )

    assert extract_size(_product(variants=variants)) == "38"


def test_default_variant_title_falls_back_to_title() -> None:
    variants = (RemoteVariant(id="v1", selected_options=(SelectedOption("Size", "Default Title"),)),)

    assert extract_size(_product(title="Blazer M", variants=variants)) == "M"


def test_size_from_text_patterns() -> None:
    assert size_from_text("Jeans 32") == "32"
    assert size_from_text("Scarf Medium") == "Medium"
    assert size_from_text("Handbag") == "One Size"
    assert size_from_text(None) == "One Size"


def test_inventory_prefers_total_then_sums_variants() -> None:
    variants = (
        RemoteVariant(id="v1", inventory_quantity=2),
        RemoteVariant(id="v2", inventory_quantity=None),
        RemoteVariant(id="v3", inventory_quantity=5),
    )

    assert extract_inventory(_product(total_inventory=4, variants=variants)) == 4
    assert extract_inventory(_product(variants=variants)) == 7


def test_price_formatting() -> None:
    assert extract_price(_product(min_price=Money(Decimal("120.00"), "EUR"))) == "120 EUR"
    assert extract_price(_product(min_price=Money(Decimal("99.5"), "USD"))) == "99.50 USD"
    assert extract_price(_product()) == DEFAULT_PRICE


def test_money_parse_rejects_garbage() -> None:
    assert Money.parse("abc", "EUR") is None
    assert Money.parse("10", None) is None
    assert Money.parse("10.5", "EUR") == Money(Decimal("10.5"), "EUR")


def test_main_image_prefers_featured() -> None:
    assert extract_main_image(_product(featured_image_url="a", image_urls=("b",))) == "a"
    assert extract_main_image(_product(image_urls=("b", "c"))) == "b"
    assert extract_main_image(_product()) is None


def test_to_product_fields_applies_defaults_and_keeps_oversold_inventory() -> None:
    product = _product(title="Coat", total_inventory=-3)

    fields = to_product_fields(product, classify(product))

    assert fields.title == "Coat"
    assert fields.description == ""
    assert fields.image_url == ""
    assert fields.condition == "Unknown"
    assert fields.brand == DEFAULT_BRAND
    assert fields.size == "One Size"
    assert fields.price == DEFAULT_PRICE
    assert fields.inventory_quantity == -3
    assert fields.for_storage().inventory_quantity == 0
    assert fields.for_storage().title == "Coat"
