from __future__ import annotations

from shelfsync.domain.reconciliation import DeltaField, Direction, detect_changes
from tests.helpers.products import OTHER_SHOP, SHOP, make_record


def test_no_inputs_yield_no_deltas() -> None:
    changes = detect_changes([], [], SHOP)

    assert changes.is_empty
    assert changes.remote_only == ()


def test_identical_snapshots_yield_no_deltas() -> None:
    local = [make_record("1", title="Jacket", inventory=3), make_record("2", title="Boots")]
    remote = [
        make_record("1", title="Jacket", inventory=3, record_id=None),
        make_record("2", title="Boots", record_id=None),
    ]

    assert detect_changes(local, remote, SHOP).is_empty


def test_title_difference_produces_one_title_delta() -> None:
    local = [make_record("42", title="New Name", inventory=5, record_id=7)]
    remote = [make_record("42", title="Old Name", inventory=5, record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert changes.inventory_deltas == ()
    (delta,) = changes.title_deltas
    assert delta.record_id == 7
    assert delta.external_id == "42"
    assert delta.field is DeltaField.TITLE
    assert delta.local_value == "New Name"
    assert delta.remote_value == "Old Name"
    assert delta.direction is Direction.LOCAL_TO_REMOTE


def test_inventory_difference_produces_one_inventory_delta() -> None:
    local = [make_record("42", inventory=12)]
    remote = [make_record("42", inventory=10, record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert changes.title_deltas == ()
    (delta,) = changes.inventory_deltas
    assert delta.local_value == 12
    assert delta.remote_value == 10


def test_both_fields_differing_yields_two_deltas() -> None:
    local = [make_record("42", title="A", inventory=1)]
    remote = [make_record("42", title="B", inventory=2, record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert [d.field for d in changes.title_deltas] == [DeltaField.TITLE]
    assert [d.field for d in changes.inventory_deltas] == [DeltaField.INVENTORY]


def test_title_comparison_is_exact() -> None:
    local = [make_record("1", title="jacket ")]
    remote = [make_record("1", title="Jacket", record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert len(changes.title_deltas) == 1


def test_remote_only_record_is_reported_without_delta() -> None:
    remote = [make_record("99", title="Only remote", inventory=4, record_id=None)]

    changes = detect_changes([], remote, SHOP)

    assert changes.is_empty
    assert changes.remote_only == ("99",)


def test_local_only_record_produces_nothing() -> None:
    changes = detect_changes([make_record("5", title="Only local")], [], SHOP)

    assert changes.is_empty
    assert changes.remote_only == ()


def test_local_record_without_external_id_is_skipped() -> None:
    local = [make_record("", title="Orphan", inventory=3)]
    remote = [make_record("1", title="Other", record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert changes.is_empty
    assert changes.remote_only == ("1",)


def test_duplicate_remote_ids_match_first_occurrence() -> None:
    local = [make_record("1", title="First")]
    remote = [
        make_record("1", title="First", record_id=None),
        make_record("1", title="Second", record_id=None),
    ]

    assert detect_changes(local, remote, SHOP).is_empty


def test_records_of_other_merchants_are_ignored() -> None:
    local = [
        make_record("1", title="Mine"),
        make_record("2", title="Theirs", merchant_key=OTHER_SHOP),
    ]
    remote = [
        make_record("1", title="Mine", record_id=None),
        make_record("2", title="Changed", record_id=None, merchant_key=OTHER_SHOP),
    ]

    changes = detect_changes(local, remote, SHOP)

    assert changes.is_empty
    assert changes.remote_only == ()


def test_at_most_one_delta_per_external_id_and_field() -> None:
    local = [make_record("1", title="A", record_id=1), make_record("1", title="B", record_id=2)]
    remote = [make_record("1", title="C", record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    assert len(changes.title_deltas) == 1
    assert changes.title_deltas[0].record_id == 1


def test_inputs_are_not_modified() -> None:
    local = [make_record("1", title="A", inventory=1)]
    remote = [make_record("1", title="B", inventory=2, record_id=None)]
    local_before = list(local)
    remote_before = list(remote)

    detect_changes(local, remote, SHOP)

    assert local == local_before
    assert remote == remote_before


def test_same_snapshots_give_identical_changes() -> None:
    local = [
        make_record("1", title="A", inventory=1, record_id=1),
        make_record("2", title="Same", inventory=4, record_id=2),
        make_record("3", title="C", inventory=0, record_id=3),
    ]
    remote = [
        make_record("3", title="C", inventory=2, record_id=None),
        make_record("1", title="B", inventory=1, record_id=None),
        make_record("4", title="New", record_id=None),
    ]

    first = detect_changes(local, remote, SHOP)
    second = detect_changes(local, remote, SHOP)

    assert first.title_deltas
    assert first.inventory_deltas
    assert first == second


def test_oversold_remote_inventory_is_a_delta() -> None:
    local = [make_record("1", inventory=0)]
    remote = [make_record("1", inventory=-2, record_id=None)]

    changes = detect_changes(local, remote, SHOP)

    (delta,) = changes.inventory_deltas
    assert (delta.local_value, delta.remote_value) == (0, -2)
