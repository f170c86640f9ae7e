"""Pushing local -> remote deltas to the remote catalog."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsync.domain.model import InventoryQuantity, WriteResult

from .contracts import DeltaField, PushSummary

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfsync.domain.model import MerchantKey
    from shelfsync.domain.ports.remote import RemoteCatalogWriter

    from .contracts import Delta, DetectedChanges

log = getLogger(__name__)

DEFAULT_PUSH_DELAY_SECONDS = 0.05
NO_VARIANTS_ERROR = "No variants found for product"


@dataclass(slots=True)
class DeltaPusher:
    """Apply deltas one remote call at a time.

    Calls are sequential with ``delay_seconds`` between successive deltas and are
    never retried here; a failure is counted and the next delta proceeds.
    """

    writer: RemoteCatalogWriter
    location_id: str
    delay_seconds: float = DEFAULT_PUSH_DELAY_SECONDS
    sleep: Callable[[float], None] = field(default=time.sleep)

    def push(self, merchant_key: MerchantKey, changes: DetectedChanges) -> PushSummary:
        summary = PushSummary()
        pending = (*changes.title_deltas, *changes.inventory_deltas)
        for index, delta in enumerate(pending):
            if index and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            result = self._push_one(merchant_key, delta)
            if result.success:
                if delta.field is DeltaField.TITLE:
                    summary.title_pushed += 1
                else:
                    summary.inventory_pushed += 1
                log.info(
                    "Pushed %s for %s [%s]: %r",
                    delta.field,
                    delta.external_id,
                    merchant_key,
                    delta.local_value,
                )
                continue
            summary.errors += 1
            summary.failed.append(delta)
            log.warning(
                "Push of %s for %s failed [%s]: %s",
                delta.field,
                delta.external_id,
                merchant_key,
                result.error,
            )
        return summary

    def _push_one(self, merchant_key: MerchantKey, delta: Delta) -> WriteResult:
        try:
            if delta.field is DeltaField.TITLE:
                return self.push_title(merchant_key, delta)
            return self.push_inventory(merchant_key, delta)
        except Exception as exc:  # noqa: BLE001
            log.debug("Remote write raised", exc_info=True)
            return WriteResult.failed(str(exc) or type(exc).__name__)

    def push_title(self, merchant_key: MerchantKey, delta: Delta) -> WriteResult:
        return self.writer.update_title(merchant_key, delta.external_id, str(delta.local_value))

    def push_inventory(self, merchant_key: MerchantKey, delta: Delta) -> WriteResult:
        """Set every variant of the product to the local quantity in one call."""

        variants = self.writer.query_variants(merchant_key, delta.external_id)
        if not variants:
            return WriteResult.failed(NO_VARIANTS_ERROR)

        quantity = int(delta.local_value)
        quantities = [
            InventoryQuantity(
                inventory_item_id=variant.inventory_item_id,
                location_id=self.location_id,
                quantity=quantity,
            )
            for variant in variants
        ]
        log.debug(
            "Setting %s variant(s) of %s to %s [%s]",
            len(quantities),
            delta.external_id,
            quantity,
            merchant_key,
        )
        return self.writer.set_inventory(merchant_key, quantities)
