from __future__ import annotations

import pytest

from shelfsync.domain.classification import NormalizedFields
from shelfsync.domain.model import RemoteProduct
from shelfsync.domain.reconciliation import (
    DeltaPusher,
    MerchantLocks,
    OverwritePolicy,
    ReconciliationEngine,
    detect_changes,
)
from tests.helpers.products import (
    SHOP,
    FakeFetcher,
    FakeSink,
    FakeWriter,
    InMemoryStore,
    make_record,
    make_remote,
)


def _engine(
    store: InMemoryStore,
    fetcher: FakeFetcher,
    writer: FakeWriter,
    *,
    sink: FakeSink | None = None,
    policy: OverwritePolicy = OverwritePolicy.REMOTE_WINS,
    locks: MerchantLocks | None = None,
) -> ReconciliationEngine:
    return ReconciliationEngine(
        unit_of_work_factory=store.unit_of_work_factory(),
        fetcher=fetcher,
        pusher=DeltaPusher(writer=writer, location_id="777", delay_seconds=0),
        sink=sink,
        overwrite_policy=policy,
        locks=locks or MerchantLocks(),
    )


def test_title_edit_is_pushed_and_remote_values_overwrite_local(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.seed(make_record("1", title="Old", inventory=5))
    fetcher.products = [make_remote("1", title="New", inventory=5)]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert result.report.title_deltas_pushed == 1
    assert result.report.inventory_deltas_pushed == 0
    assert result.report.push_errors == 0
    assert writer.calls_named("update_title") == [(SHOP, "1", "Old")]
    row = store.records()["1"]
    assert row.title == "New"
    assert row.inventory_quantity == 5
    assert result.report.records_updated == 1


def test_failed_title_push_still_ends_with_remote_title(
    store: InMemoryStore, fetcher: FakeFetcher
) -> None:
    writer = FakeWriter(failing_titles={"1": "Title is invalid"})
    store.seed(make_record("1", title="Old", inventory=5))
    fetcher.products = [make_remote("1", title="New", inventory=5)]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert result.report.push_errors == 1
    assert result.report.title_deltas_pushed == 0
    assert store.records()["1"].title == "New"


def test_remote_only_record_is_inserted_without_deltas(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("2", title="Brand New", inventory=0)]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert result.report.records_inserted == 1
    assert result.report.remote_only == 1
    assert writer.calls == []
    row = store.records()["2"]
    assert row.title == "Brand New"
    assert row.inventory_quantity == 0


def test_local_store_converges_to_remote_snapshot(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.seed(
        make_record("1", title="Local A", inventory=9),
        make_record("2", title="Same", inventory=2),
    )
    fetcher.products = [
        make_remote("1", title="Remote A", inventory=1),
        make_remote("2", title="Same", inventory=2),
        make_remote("3", title="Remote C", inventory=7),
    ]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    rows = store.records()
    assert {key: (row.title, row.inventory_quantity) for key, row in rows.items()} == {
        "1": ("Remote A", 1),
        "2": ("Same", 2),
        "3": ("Remote C", 7),
    }
    assert result.report.records_updated == 2
    assert result.report.records_inserted == 1
    assert result.products is not None
    assert len(result.products) == 3


def test_local_rows_absent_remotely_are_kept(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.seed(make_record("5", title="Only local"))
    fetcher.products = []

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert set(store.records()) == {"5"}


def test_zero_variant_inventory_delta_counts_as_push_error(
    store: InMemoryStore, fetcher: FakeFetcher
) -> None:
    writer = FakeWriter(variants={"1": []})
    store.seed(make_record("1", title="Same", inventory=12))
    fetcher.products = [make_remote("1", title="Same", inventory=10)]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.report.push_errors == 1
    assert writer.calls_named("set_inventory") == []
    assert store.records()["1"].inventory_quantity == 10


def test_fetch_failure_fails_run_and_leaves_local_untouched(
    store: InMemoryStore, writer: FakeWriter
) -> None:
    store.seed(make_record("1", title="Keep me", inventory=3))
    fetcher = FakeFetcher(error=ConnectionError("shop unreachable"))

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert not result.success
    assert "shop unreachable" in result.message
    assert writer.calls == []
    assert store.records()["1"].title == "Keep me"
    assert store.commits == 0


def test_unreachable_local_store_fails_run_before_fetch(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.unavailable = True

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert not result.success
    assert "Local store unavailable" in result.message
    assert fetcher.calls == []


def test_local_store_lost_before_overwrite_fails_run(
    store: InMemoryStore, writer: FakeWriter
) -> None:
    store.seed(make_record("1", title="Keep me", inventory=3))

    def lose_store() -> None:
        store.unavailable = True

    fetcher = FakeFetcher(
        products=[make_remote("1", title="Keep me", inventory=3), make_remote("2", title="New")],
        on_call=lose_store,
    )

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert not result.success
    assert "Local store unavailable" in result.message
    assert result.report.records_inserted == 0
    assert result.report.records_updated == 0
    assert set(store.records()) == {"1"}
    assert store.records()["1"].title == "Keep me"
    assert store.commits == 0


def test_oversold_remote_inventory_is_pushed_and_stored_as_zero(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.seed(make_record("1", title="Jacket", inventory=0))
    fetcher.products = [make_remote("1", title="Jacket", inventory=-2)]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert result.report.inventory_deltas_pushed == 1
    assert result.report.records_failed == 0
    ((_, quantities),) = writer.calls_named("set_inventory")  # type: ignore[misc]
    assert [quantity.quantity for quantity in quantities] == [0]
    assert store.records()["1"].inventory_quantity == 0


def test_failing_record_is_counted_and_others_still_written(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    store.failing_ids = {"2"}
    fetcher.products = [
        make_remote("1", title="A"),
        make_remote("2", title="B"),
        make_remote("3", title="C"),
    ]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.success
    assert result.report.records_failed == 1
    assert result.report.records_inserted == 2
    assert set(store.records()) == {"1", "3"}
    assert store.rollbacks == 1


def test_remote_items_without_id_are_counted_as_failed(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("", title="No id"), make_remote("1", title="A")]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.report.records_failed == 1
    assert set(store.records()) == {"1"}


def test_duplicate_remote_ids_write_first_occurrence(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    fetcher.products = [make_remote("1", title="First"), make_remote("1", title="Second")]

    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.report.records_inserted == 1
    assert result.report.records_updated == 0
    assert store.records()["1"].title == "First"


def test_no_unit_of_work_is_open_during_network_calls(
    store: InMemoryStore, writer: FakeWriter
) -> None:
    store.seed(make_record("1", title="Old"))
    open_during_fetch: list[int] = []
    fetcher = FakeFetcher(
        products=[make_remote("1", title="New")],
        on_call=lambda: open_during_fetch.append(store.open_units),
    )

    _engine(store, fetcher, writer).reconcile(SHOP)

    assert open_during_fetch == [0]
    assert store.open_units == 0


def test_sink_receives_classified_snapshot(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter, sink: FakeSink
) -> None:
    fetcher.products = [make_remote("1", title="Jacket", vendor="Arc'teryx", price="120")]

    result = _engine(store, fetcher, writer, sink=sink).reconcile(SHOP)

    assert result.report.sink_delivered is True
    ((merchant_key, batch),) = sink.published
    assert merchant_key == SHOP
    assert [product.shopify_id for product in batch.products] == ["gid://shopify/Product/1"]


def test_sink_failure_does_not_fail_run(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    sink = FakeSink(error=RuntimeError("backend down"))
    fetcher.products = [make_remote("1", title="A")]

    result = _engine(store, fetcher, writer, sink=sink).reconcile(SHOP)

    assert result.success
    assert result.report.sink_delivered is False
    assert set(store.records()) == {"1"}


def test_sink_disabled_reports_none(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    result = _engine(store, fetcher, writer).reconcile(SHOP)

    assert result.report.sink_delivered is None


def test_overlapping_run_for_same_merchant_is_rejected(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    locks = MerchantLocks()
    engine = _engine(store, fetcher, writer, locks=locks)

    with locks.hold(SHOP):
        result = engine.reconcile(SHOP)

    assert not result.success
    assert "already in progress" in result.message
    assert fetcher.calls == []
    assert not locks.is_held(SHOP)


def test_lock_is_released_after_failed_run(store: InMemoryStore, writer: FakeWriter) -> None:
    locks = MerchantLocks()
    fetcher = FakeFetcher(error=ConnectionError("down"))

    _engine(store, fetcher, writer, locks=locks).reconcile(SHOP)

    assert not locks.is_held(SHOP)


def test_preserve_pending_keeps_local_title_whose_push_failed(
    store: InMemoryStore, fetcher: FakeFetcher
) -> None:
    writer = FakeWriter(
        failing_titles={"1": "Title is invalid"}, failing_inventory="Location not found"
    )
    store.seed(
        make_record("1", title="Local edit", inventory=5),
        make_record("2", title="Pushed edit", inventory=5),
    )
    fetcher.products = [
        make_remote("1", title="Remote", inventory=8),
        make_remote("2", title="Remote", inventory=5),
    ]

    result = _engine(
        store, fetcher, writer, policy=OverwritePolicy.PRESERVE_PENDING
    ).reconcile(SHOP)

    assert result.report.push_errors == 2
    rows = store.records()
    assert rows["1"].title == "Local edit"
    assert rows["1"].inventory_quantity == 5
    assert rows["2"].title == "Remote"


def test_classifier_output_is_what_gets_stored(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter
) -> None:
    def classifier(product: RemoteProduct) -> NormalizedFields:
        return NormalizedFields(
            condition="Excellent",
            brand="Chanel",
            size="M",
            price="10 EUR",
            inventory=3,
            image_url=None,
        )

    fetcher.products = [make_remote("1", title="Bag", inventory=99)]
    engine = _engine(store, fetcher, writer)
    engine.classifier = classifier

    engine.reconcile(SHOP)

    fields = store.records()["1"].fields
    assert (fields.condition, fields.brand, fields.size, fields.price) == (
        "Excellent",
        "Chanel",
        "M",
        "10 EUR",
    )
    assert fields.inventory_quantity == 3
    assert fields.image_url == ""


@pytest.mark.parametrize("runs", [1, 2])
def test_repeated_runs_are_stable(
    store: InMemoryStore, fetcher: FakeFetcher, writer: FakeWriter, runs: int
) -> None:
    fetcher.products = [make_remote("1", title="A", inventory=2)]
    engine = _engine(store, fetcher, writer)

    for _ in range(runs):
        result = engine.reconcile(SHOP)

    assert result.success
    assert writer.calls == []
    local = list(store.records().values())
    remote = [make_record("1", title="A", inventory=2, record_id=None)]
    assert detect_changes(local, remote, SHOP).is_empty
