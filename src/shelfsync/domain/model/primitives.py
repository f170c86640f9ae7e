"""Domain primitives: scalar aliases + small value objects.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

type MerchantKey = str
type ExternalId = str
type RemoteId = str

PRICE_NOT_AVAILABLE = "Price not available"


@dataclass(frozen=True, slots=True)
class Money:
    amount: Decimal
    currency_code: str

    @classmethod
    def parse(cls, amount: str | float | Decimal | None, currency_code: str | None) -> Money | None:
        if amount is None or not currency_code:
            return None
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            return None
        if not value.is_finite():
            return None
        return cls(amount=value, currency_code=currency_code)

    def formatted(self) -> str:
        """Render as ``"<amount> <currency>"``; whole amounts drop the decimals."""

        if self.amount == self.amount.to_integral_value():
            amount = f"{self.amount:.0f}"
        else:
            amount = f"{self.amount:.2f}"
        return f"{amount} {self.currency_code}"


def extract_external_id(raw: str | None) -> ExternalId:
    """Strip a path-style remote id (``gid://shopify/Product/123``) to its last segment."""

    if raw is None:
        return ""
    value = raw.strip()
    if "/" in value:
        return value.rsplit("/", 1)[-1]
    return value
