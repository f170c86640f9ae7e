"""Orchestrator for one merchant's bidirectional catalog reconciliation.

Phases, in order:
1) read the local snapshot (storage handle released afterwards)
2) fetch and classify the remote snapshot
3) detect local -> remote deltas
4) push deltas to the remote catalog, one call at a time
5) overwrite the local store from the remote snapshot, one commit per record
6) optionally publish normalized catalog data to the sink

No network call is made while a unit of work is open. Per-record failures are
counted, never raised; only an unreachable snapshot or local store (or an
overlapping run) fails the run as a whole.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsync.domain.catalog import build_catalog_batch
from shelfsync.domain.classification import classify, to_product_fields
from shelfsync.domain.model import ProductRecord

from .contracts import DeltaField, OverwritePolicy
from .detect import detect_changes
from .errors import ReconciliationInProgressError
from .locks import PROCESS_LOCKS, MerchantLocks

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from shelfsync.domain.classification import Classifier
    from shelfsync.domain.model import ExternalId, MerchantKey, RemoteProduct
    from shelfsync.domain.ports.catalog import CatalogSink
    from shelfsync.domain.ports.fetching import SnapshotFetcher
    from shelfsync.domain.ports.unit_of_work import ProductUnitOfWork

    from .contracts import Delta
    from .push import DeltaPusher

log = getLogger(__name__)


@dataclass(slots=True)
class SyncReport:
    """Aggregate counters for one run; never persisted."""

    records_inserted: int = 0
    records_updated: int = 0
    records_failed: int = 0
    title_deltas_pushed: int = 0
    inventory_deltas_pushed: int = 0
    push_errors: int = 0
    remote_only: int = 0
    sink_delivered: bool | None = None

    def summary(self, merchant_key: MerchantKey) -> str:
        parts = [
            f"Sync completed for {merchant_key}:",
            f"{self.title_deltas_pushed} title(s) and "
            f"{self.inventory_deltas_pushed} inventory update(s) pushed,",
            f"{self.records_updated} updated and {self.records_inserted} new from remote",
        ]
        if self.push_errors or self.records_failed:
            parts.append(f"({self.push_errors} push error(s), {self.records_failed} failed)")
        return " ".join(parts)


@dataclass(slots=True, kw_only=True)
class ReconcileResult:
    success: bool
    message: str
    report: SyncReport = field(default_factory=SyncReport)
    products: tuple[ProductRecord, ...] | None = None


class _RunAbortedError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(slots=True)
class ReconciliationEngine:
    """Run the full reconciliation for one merchant at a time."""

    unit_of_work_factory: Callable[[], ProductUnitOfWork]
    fetcher: SnapshotFetcher
    pusher: DeltaPusher
    classifier: Classifier = classify
    sink: CatalogSink | None = None
    overwrite_policy: OverwritePolicy = OverwritePolicy.REMOTE_WINS
    locks: MerchantLocks = field(default_factory=lambda: PROCESS_LOCKS)
    return_snapshot: bool = True

    def reconcile(self, merchant_key: MerchantKey) -> ReconcileResult:
        try:
            with self.locks.hold(merchant_key):
                return self._run(merchant_key)
        except ReconciliationInProgressError as exc:
            log.warning(str(exc))
            return ReconcileResult(success=False, message=str(exc))

    def _run(self, merchant_key: MerchantKey) -> ReconcileResult:
        report = SyncReport()
        log.info("Starting reconciliation for %s", merchant_key)
        try:
            local_records = self._load_local(merchant_key)
            remote_products = self._fetch_remote(merchant_key)
            classified = self._classify(merchant_key, remote_products, report)
            remote_records = [record for _, record in classified]

            changes = detect_changes(local_records, remote_records, merchant_key)
            report.remote_only = len(changes.remote_only)

            pushed = self.pusher.push(merchant_key, changes)
            report.title_deltas_pushed = pushed.title_pushed
            report.inventory_deltas_pushed = pushed.inventory_pushed
            report.push_errors = pushed.errors

            overwrite = self._apply_policy(remote_records, local_records, pushed.failed)
            self._overwrite_local(merchant_key, overwrite, report)
        except _RunAbortedError as exc:
            log.error("Reconciliation for %s aborted: %s", merchant_key, exc.message)
            return ReconcileResult(success=False, message=exc.message, report=report)

        if self.sink is not None:
            report.sink_delivered = self._publish(
                merchant_key, [product for product, _ in classified]
            )

        products = self._snapshot_after_run(merchant_key) if self.return_snapshot else None
        message = report.summary(merchant_key)
        log.info(message)
        return ReconcileResult(success=True, message=message, report=report, products=products)

    # Phase 1 ------------------------------------------------------------------

    def _load_local(self, merchant_key: MerchantKey) -> list[ProductRecord]:
        try:
            with self.unit_of_work_factory() as uow:
                records = uow.repositories.products.get_all(merchant_key)
        except Exception as exc:
            log.exception("Could not read local products for %s", merchant_key)
            raise _RunAbortedError(f"Local store unavailable: {exc}") from exc
        log.info("Local snapshot for %s: %s product(s)", merchant_key, len(records))
        return records

    # Phase 2 ------------------------------------------------------------------

    def _fetch_remote(self, merchant_key: MerchantKey) -> list[RemoteProduct]:
        try:
            products = list(self.fetcher(merchant_key))
        except Exception as exc:
            log.exception("Could not fetch remote snapshot for %s", merchant_key)
            raise _RunAbortedError(f"Remote snapshot unavailable: {exc}") from exc
        log.info("Remote snapshot for %s: %s product(s)", merchant_key, len(products))
        return products

    def _classify(
        self,
        merchant_key: MerchantKey,
        products: Sequence[RemoteProduct],
        report: SyncReport,
    ) -> list[tuple[RemoteProduct, ProductRecord]]:
        classified: list[tuple[RemoteProduct, ProductRecord]] = []
        seen: set[ExternalId] = set()
        for product in products:
            external_id = product.external_id
            if not external_id:
                log.warning("Remote product %r has no id; skipped", product.title)
                report.records_failed += 1
                continue
            if external_id in seen:
                log.debug("Duplicate remote id %s shadowed by first occurrence", external_id)
                continue
            try:
                fields = to_product_fields(product, self.classifier(product))
            except Exception:  # noqa: BLE001
                log.exception("Could not classify remote product %s", external_id)
                report.records_failed += 1
                continue
            seen.add(external_id)
            record = ProductRecord(merchant_key=merchant_key, external_id=external_id, fields=fields)
            classified.append((product, record))
        return classified

    # Phase 5 ------------------------------------------------------------------

    def _apply_policy(
        self,
        remote_records: list[ProductRecord],
        local_records: list[ProductRecord],
        failed: list[Delta],
    ) -> list[ProductRecord]:
        """Decide what the overwrite writes.

        ``REMOTE_WINS`` writes the pre-push remote snapshot verbatim, so a local
        edit whose push failed is replaced. ``PRESERVE_PENDING`` keeps the local
        value of every field whose push failed.
        """

        if self.overwrite_policy is OverwritePolicy.REMOTE_WINS or not failed:
            return remote_records

        local_by_id = {record.external_id: record for record in local_records}
        pending: dict[ExternalId, dict[str, object]] = {}
        for delta in failed:
            local = local_by_id.get(delta.external_id)
            if local is None:
                continue
            changes = pending.setdefault(delta.external_id, {})
            if delta.field is DeltaField.TITLE:
                changes["title"] = local.title
            else:
                changes["inventory_quantity"] = local.inventory_quantity

        merged: list[ProductRecord] = []
        for record in remote_records:
            changes = pending.get(record.external_id)
            if changes:
                log.info("Keeping pending local edit of %s: %s", record.external_id, changes)
                merged.append(record.with_fields(**changes))
            else:
                merged.append(record)
        return merged

    def _overwrite_local(
        self,
        merchant_key: MerchantKey,
        records: list[ProductRecord],
        report: SyncReport,
    ) -> None:
        with ExitStack() as stack:
            try:
                uow = stack.enter_context(self.unit_of_work_factory())
            except Exception as exc:
                log.exception("Could not open local store for %s", merchant_key)
                raise _RunAbortedError(f"Local store unavailable: {exc}") from exc

            repository = uow.repositories.products
            for record in records:
                try:
                    result = repository.upsert(
                        merchant_key, record.external_id, record.fields.for_storage()
                    )
                    uow.commit()
                except Exception:  # noqa: BLE001
                    log.exception("Could not store %s for %s", record.external_id, merchant_key)
                    uow.rollback()
                    report.records_failed += 1
                    continue
                if result.inserted:
                    report.records_inserted += 1
                else:
                    report.records_updated += 1

    # Phase 6 ------------------------------------------------------------------

    def _publish(self, merchant_key: MerchantKey, products: list[RemoteProduct]) -> bool:
        if self.sink is None:
            return False
        try:
            self.sink.publish(merchant_key, build_catalog_batch(products))
        except Exception:  # noqa: BLE001
            log.exception("Catalog sink publish failed for %s", merchant_key)
            return False
        return True

    def _snapshot_after_run(self, merchant_key: MerchantKey) -> tuple[ProductRecord, ...] | None:
        try:
            with self.unit_of_work_factory() as uow:
                return tuple(uow.repositories.products.get_all(merchant_key))
        except Exception:  # noqa: BLE001
            log.exception("Could not read back local products for %s", merchant_key)
            return None
