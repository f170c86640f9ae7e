"""Pydantic models describing the Shopify Admin GraphQL payloads we consume."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLError(ShopifyBaseModel):
    message: str = "API error"


class UserError(ShopifyBaseModel):
    field: list[str] | None = None
    message: str = "Sync error"


class PageInfo(ShopifyBaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class ImagePayload(ShopifyBaseModel):
    url: str


class ImageConnection(ShopifyBaseModel):
    nodes: list[ImagePayload] = Field(default_factory=list[ImagePayload])


class MoneyPayload(ShopifyBaseModel):
    amount: str
    currency_code: str = Field(alias="currencyCode")


class PriceRange(ShopifyBaseModel):
    min_variant_price: MoneyPayload | None = Field(default=None, alias="minVariantPrice")


class SelectedOptionPayload(ShopifyBaseModel):
    name: str
    value: str


class VariantPayload(ShopifyBaseModel):
    id: str
    inventory_quantity: int | None = Field(default=None, alias="inventoryQuantity")
    selected_options: list[SelectedOptionPayload] = Field(
        default_factory=list[SelectedOptionPayload], alias="selectedOptions"
    )


class VariantConnection(ShopifyBaseModel):
    nodes: list[VariantPayload] = Field(default_factory=list[VariantPayload])


class CategoryPayload(ShopifyBaseModel):
    full_name: str | None = Field(default=None, alias="fullName")


class MetafieldPayload(ShopifyBaseModel):
    namespace: str | None = None
    key: str
    value: str | None = None


class MetafieldConnection(ShopifyBaseModel):
    nodes: list[MetafieldPayload] = Field(default_factory=list[MetafieldPayload])


class ProductNode(ShopifyBaseModel):
    id: str
    title: str = ""
    description: str | None = None
    vendor: str | None = None
    product_type: str | None = Field(default=None, alias="productType")
    tags: list[str] = Field(default_factory=list[str])
    total_inventory: int | None = Field(default=None, alias="totalInventory")
    featured_image: ImagePayload | None = Field(default=None, alias="featuredImage")
    images: ImageConnection = Field(default_factory=ImageConnection)
    variants: VariantConnection = Field(default_factory=VariantConnection)
    price_range: PriceRange | None = Field(default=None, alias="priceRange")
    category: CategoryPayload | None = None
    metafields: MetafieldConnection = Field(default_factory=MetafieldConnection)

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, value: object) -> object:
        return "" if value is None else value


class ProductConnection(ShopifyBaseModel):
    nodes: list[ProductNode] = Field(default_factory=list[ProductNode])
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class ProductsData(ShopifyBaseModel):
    products: ProductConnection


class InventoryItemRef(ShopifyBaseModel):
    id: str


class VariantRefPayload(ShopifyBaseModel):
    id: str
    inventory_item: InventoryItemRef = Field(alias="inventoryItem")


class VariantRefConnection(ShopifyBaseModel):
    nodes: list[VariantRefPayload] = Field(default_factory=list[VariantRefPayload])


class ProductVariantsNode(ShopifyBaseModel):
    id: str
    variants: VariantRefConnection = Field(default_factory=VariantRefConnection)


class ProductVariantsData(ShopifyBaseModel):
    product: ProductVariantsNode | None = None


class MutationPayload(ShopifyBaseModel):
    user_errors: list[UserError] = Field(default_factory=list[UserError], alias="userErrors")


class ProductUpdateData(ShopifyBaseModel):
    product_update: MutationPayload | None = Field(default=None, alias="productUpdate")


class InventorySetQuantitiesData(ShopifyBaseModel):
    inventory_set_quantities: MutationPayload | None = Field(
        default=None, alias="inventorySetQuantities"
    )


class GraphQLResponse(ShopifyBaseModel):
    """Envelope shared by every Admin GraphQL response."""

    data: dict[str, object] | None = None
    errors: list[GraphQLError] = Field(default_factory=list[GraphQLError])

    @field_validator("errors", mode="before")
    @classmethod
    def _none_errors(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def first_error(self) -> str | None:
        if not self.errors:
            return None
        return self.errors[0].message
