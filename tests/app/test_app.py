from __future__ import annotations

from typing import TYPE_CHECKING

from shelfsync.app import (
    fetch_sink_products,
    list_products,
    purge_store,
    reconcile_store,
    store_stats,
)
from shelfsync.config import SyncConfig
from tests.helpers.products import (
    OTHER_SHOP,
    SHOP,
    FakeFetcher,
    FakeSink,
    FakeWriter,
    make_remote,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyProductUnitOfWork

    type UowFactory = Callable[[], SqlAlchemyProductUnitOfWork]


QUIET_SYNC = SyncConfig(push_delay_seconds=0, publish_to_sink=False)


def test_reconcile_store_against_sqlite(
    sqlite_unit_of_work: UowFactory, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("1", title="Jacket", inventory=2, price="120")]

    result = reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
    )

    assert result.success
    assert result.message.startswith(f"Sync completed for {SHOP}")
    (record,) = list_products(SHOP, unit_of_work_factory=sqlite_unit_of_work)
    assert record.external_id == "1"
    assert record.title == "Jacket"
    assert record.inventory_quantity == 2
    assert record.fields.price == "120 EUR"


def test_local_edit_is_pushed_then_overwritten(
    sqlite_unit_of_work: UowFactory, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("1", title="Remote", inventory=3)]
    reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
    )
    with sqlite_unit_of_work() as uow:
        (record,) = uow.repositories.products.get_all(SHOP)
        assert record.id is not None
        uow.repositories.products.update_inventory(SHOP, record.id, 8)
        uow.commit()

    result = reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
    )

    assert result.report.inventory_deltas_pushed == 1
    ((_, quantities),) = writer.calls_named("set_inventory")  # type: ignore[misc]
    assert [quantity.quantity for quantity in quantities] == [8]
    (record,) = list_products(SHOP, unit_of_work_factory=sqlite_unit_of_work)
    assert record.inventory_quantity == 3


def test_sink_is_skipped_when_publishing_disabled(
    sqlite_unit_of_work: UowFactory, fetcher: FakeFetcher, writer: FakeWriter, sink: FakeSink
) -> None:
    fetcher.products = [make_remote("1", title="Jacket")]

    result = reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        sink=sink,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
    )

    assert result.report.sink_delivered is None
    assert sink.published == []


def test_sink_receives_batch_when_publishing_enabled(
    sqlite_unit_of_work: UowFactory, fetcher: FakeFetcher, writer: FakeWriter, sink: FakeSink
) -> None:
    fetcher.products = [make_remote("1", title="Jacket")]

    result = reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        sink=sink,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
        publish_to_sink=True,
    )

    assert result.report.sink_delivered is True
    assert [merchant for merchant, _ in sink.published] == [SHOP]


def test_store_stats_and_purge(
    sqlite_unit_of_work: UowFactory, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("1", inventory=2), make_remote("2", inventory=5)]
    reconcile_store(
        SHOP,
        fetcher=fetcher,
        writer=writer,
        unit_of_work_factory=sqlite_unit_of_work,
        location_id="777",
        sync_config=QUIET_SYNC,
    )

    (stats,) = store_stats(unit_of_work_factory=sqlite_unit_of_work)
    assert (stats.merchant_key, stats.product_count, stats.total_inventory) == (SHOP, 2, 7)

    assert purge_store(OTHER_SHOP, unit_of_work_factory=sqlite_unit_of_work) == 0
    assert purge_store(SHOP, unit_of_work_factory=sqlite_unit_of_work) == 2
    assert list_products(SHOP, unit_of_work_factory=sqlite_unit_of_work) == []


class _BackendStub:
    def fetch_products(self, merchant_key: str) -> list[dict[str, object]]:
        return [{"shop_domain": merchant_key}]


def test_fetch_sink_products_delegates_to_sink() -> None:
    products = fetch_sink_products(SHOP, sink=_BackendStub())  # type: ignore[arg-type]

    assert products == [{"shop_domain": SHOP}]
