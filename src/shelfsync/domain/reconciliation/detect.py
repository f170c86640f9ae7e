"""Change detection between a local and a remote snapshot."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import Delta, DeltaField, DetectedChanges

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shelfsync.domain.model import ExternalId, MerchantKey, ProductRecord

log = getLogger(__name__)


def detect_changes(
    local_records: Iterable[ProductRecord],
    remote_records: Iterable[ProductRecord],
    merchant_key: MerchantKey,
) -> DetectedChanges:
    """Return local -> remote title and inventory deltas for ``merchant_key``.

    Pure: the inputs are only read. Remote duplicates are shadowed by the first
    occurrence. Local records without an external id never match. Remote
    records without a local counterpart are reported in ``remote_only`` and
    produce no delta; remote absence never implies deletion.
    """

    remote_by_id: dict[ExternalId, ProductRecord] = {}
    for record in remote_records:
        if record.merchant_key != merchant_key:
            log.warning(
                "Ignoring remote record %s of merchant %s while reconciling %s",
                record.external_id,
                record.merchant_key,
                merchant_key,
            )
            continue
        if not record.external_id:
            continue
        remote_by_id.setdefault(record.external_id, record)

    title_deltas: list[Delta] = []
    inventory_deltas: list[Delta] = []
    local_ids: set[ExternalId] = set()

    for local in local_records:
        if local.merchant_key != merchant_key:
            log.warning(
                "Ignoring local record %s of merchant %s while reconciling %s",
                local.id,
                local.merchant_key,
                merchant_key,
            )
            continue
        if not local.external_id or local.external_id in local_ids:
            continue
        local_ids.add(local.external_id)

        remote = remote_by_id.get(local.external_id)
        if remote is None:
            continue

        if local.title != remote.title:
            log.debug(
                "Title difference [%s] %s: local=%r remote=%r",
                merchant_key,
                local.external_id,
                local.title,
                remote.title,
            )
            title_deltas.append(
                Delta(
                    record_id=local.id,
                    external_id=local.external_id,
                    field=DeltaField.TITLE,
                    local_value=local.title,
                    remote_value=remote.title,
                )
            )

        local_inventory = local.inventory_quantity or 0
        remote_inventory = remote.inventory_quantity or 0
        if local_inventory != remote_inventory:
            log.debug(
                "Inventory difference [%s] %s: local=%s remote=%s",
                merchant_key,
                local.external_id,
                local_inventory,
                remote_inventory,
            )
            inventory_deltas.append(
                Delta(
                    record_id=local.id,
                    external_id=local.external_id,
                    field=DeltaField.INVENTORY,
                    local_value=local_inventory,
                    remote_value=remote_inventory,
                )
            )

    remote_only = tuple(
        external_id for external_id in remote_by_id if external_id not in local_ids
    )
    if remote_only:
        log.info("%s product(s) only present remotely for %s", len(remote_only), merchant_key)

    log.info(
        "Detected %s title and %s inventory change(s) local -> remote for %s",
        len(title_deltas),
        len(inventory_deltas),
        merchant_key,
    )
    return DetectedChanges(
        title_deltas=tuple(title_deltas),
        inventory_deltas=tuple(inventory_deltas),
        remote_only=remote_only,
    )
