"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsync.adapters.catalog_sink import HttpCatalogSink
from shelfsync.adapters.shopify import (
    ShopifyAdminClient,
    ShopifyRemoteWriter,
    ShopifySnapshotFetcher,
)
from shelfsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProductUnitOfWork,
    is_started,
    startup,
)
from shelfsync.config import get_catalog_sink_config, get_shopify_config, get_sync_config
from shelfsync.domain.ports.unit_of_work import ProductUnitOfWork
from shelfsync.domain.reconciliation import (
    DeltaPusher,
    OverwritePolicy,
    ReconcileResult,
    ReconciliationEngine,
)

if TYPE_CHECKING:
    from shelfsync.config import SyncConfig
    from shelfsync.domain.model import MerchantKey, ProductRecord, StoreStats
    from shelfsync.domain.ports.catalog import CatalogSink
    from shelfsync.domain.ports.fetching import SnapshotFetcher
    from shelfsync.domain.ports.remote import RemoteCatalogWriter

UnitOfWorkFactory = Callable[[], ProductUnitOfWork]

log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def reconcile_store(
    merchant_key: MerchantKey | None = None,
    *,
    fetcher: SnapshotFetcher | None = None,
    writer: RemoteCatalogWriter | None = None,
    sink: CatalogSink | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    location_id: str | None = None,
    sync_config: SyncConfig | None = None,
    publish_to_sink: bool | None = None,
    preserve_pending: bool | None = None,
) -> ReconcileResult:
    """Reconcile one shop using the configured adapters.

    Adapters that are not passed in are built from the environment. Without an
    explicit ``merchant_key`` the configured shop domain is used.
    """

    config = sync_config or get_sync_config()
    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyProductUnitOfWork

    if fetcher is None or writer is None or location_id is None or merchant_key is None:
        shopify = get_shopify_config(sync=config)
        admin = ShopifyAdminClient(shopify)
        fetcher = fetcher or ShopifySnapshotFetcher(admin, page_size=config.page_size)
        writer = writer or ShopifyRemoteWriter(admin)
        location_id = location_id or shopify.location_id
        merchant_key = merchant_key or shopify.shop_domain

    should_publish = config.publish_to_sink if publish_to_sink is None else publish_to_sink
    if sink is None and should_publish:
        sink = HttpCatalogSink(get_catalog_sink_config())
    if not should_publish:
        sink = None

    keep_pending = config.preserve_pending_edits if preserve_pending is None else preserve_pending
    engine = ReconciliationEngine(
        unit_of_work_factory=effective_uow,
        fetcher=fetcher,
        pusher=DeltaPusher(
            writer=writer,
            location_id=location_id,
            delay_seconds=config.push_delay_seconds,
        ),
        sink=sink,
        overwrite_policy=(
            OverwritePolicy.PRESERVE_PENDING if keep_pending else OverwritePolicy.REMOTE_WINS
        ),
    )
    log.info(
        "Starting reconciliation: merchant=%s, sink=%s, policy=%s",
        merchant_key,
        sink is not None,
        engine.overwrite_policy,
    )
    return engine.reconcile(merchant_key)


def list_products(
    merchant_key: MerchantKey,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[ProductRecord]:
    """Return the local snapshot of one merchant, newest first."""

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyProductUnitOfWork
    with effective_uow() as uow:
        return uow.repositories.products.get_all(merchant_key)


def store_stats(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[StoreStats]:
    """Return every merchant with its product count and total inventory."""

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyProductUnitOfWork
    with effective_uow() as uow:
        return uow.repositories.products.store_stats()


def purge_store(
    merchant_key: MerchantKey,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Delete every local product of a merchant, e.g. after the app was uninstalled."""

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyProductUnitOfWork
    with effective_uow() as uow:
        deleted = uow.repositories.products.delete_all(merchant_key)
        uow.commit()
    log.info("Deleted %s product(s) of %s", deleted, merchant_key)
    return deleted


def fetch_sink_products(
    merchant_key: MerchantKey,
    *,
    sink: HttpCatalogSink | None = None,
) -> list[dict[str, object]]:
    """Read back what the catalog backend holds for a merchant."""

    effective_sink = sink or HttpCatalogSink(get_catalog_sink_config())
    return effective_sink.fetch_products(merchant_key)
