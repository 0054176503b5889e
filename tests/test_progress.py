import itertools

import pytest

from pipetrack.core.errors import ValidationError
from pipetrack.services.progress import (
    LedgerEntry,
    Process,
    SubOrderCounters,
    SubOrderStatus,
    available_stock,
    counter_column,
    derive_sub_order_status,
    is_in_production,
    is_production_done,
    normalize_process,
    progress_percent,
    remaining_to_ship,
    replay,
    rollup_order_status,
    validate_quantity,
)


@pytest.mark.parametrize(
    "planned, produced, shipped, expected",
    [
        (10, 0, 0, SubOrderStatus.NEW),
        (10, 5, 0, SubOrderStatus.PRODUCTION_PARTIAL),
        (10, 10, 0, SubOrderStatus.PRODUCTION_COMPLETED),
        (10, 12, 0, SubOrderStatus.PRODUCTION_COMPLETED),
        (10, 5, 3, SubOrderStatus.SHIPPING_DURING_PRODUCTION),
        (10, 0, 3, SubOrderStatus.SHIPPING_DURING_PRODUCTION),
        (10, 10, 3, SubOrderStatus.SHIPPING_COMPLETED_PRODUCTION),
        (10, 10, 10, SubOrderStatus.COMPLETED),
        (10, 10, 11, SubOrderStatus.COMPLETED),
    ],
)
def test_derive_status_rules(planned, produced, shipped, expected):
    assert derive_sub_order_status(planned, produced, shipped) is expected


def test_full_shipment_completes_even_when_production_is_short():
    assert derive_sub_order_status(10, 5, 10) is SubOrderStatus.COMPLETED


def test_zero_planned_with_no_activity_is_new():
    assert derive_sub_order_status(0, 0, 0) is SubOrderStatus.NEW


def test_normalize_process_defaults_to_packaging():
    assert normalize_process(None) is Process.PACKAGING
    assert normalize_process("") is Process.PACKAGING
    assert normalize_process("  ") is Process.PACKAGING
    assert normalize_process("lining") is Process.LINING


def test_normalize_process_rejects_unknown_tag():
    with pytest.raises(ValidationError):
        normalize_process("welding")


@pytest.mark.parametrize("bad", [0, -1, 1.5, "3", True, None])
def test_validate_quantity_rejects_non_positive_integers(bad):
    with pytest.raises(ValidationError):
        validate_quantity(bad)


def test_counter_column_mapping():
    assert counter_column(LedgerEntry("production", 1)) == "produced_quantity"
    assert counter_column(LedgerEntry("production", 1, "packaging")) == "produced_quantity"
    assert counter_column(LedgerEntry("production", 1, "pulling")) == "pulling_quantity"
    assert counter_column(LedgerEntry("production", 1, "hydrostatic")) == "hydrostatic_quantity"
    assert counter_column(LedgerEntry("production", 1, "coating")) == "coating_quantity"
    assert counter_column(LedgerEntry("shipping", 1)) == "shipped_quantity"


def test_process_counters_do_not_move_status():
    counters = replay(
        10,
        [
            LedgerEntry("production", 10, "pulling"),
            LedgerEntry("production", 10, "hydrostatic"),
            LedgerEntry("production", 10, "lining"),
            LedgerEntry("production", 10, "coating"),
        ],
    )
    assert counters.status is SubOrderStatus.NEW
    assert counters.pulling == counters.hydrostatic == counters.lining == counters.coating == 10
    assert counters.produced == 0


def test_replay_is_order_independent():
    entries = [
        LedgerEntry("production", 4),
        LedgerEntry("production", 6),
        LedgerEntry("shipping", 3),
        LedgerEntry("production", 2, "lining"),
        LedgerEntry("shipping", 7),
    ]
    results = {
        (tuple(sorted(replay(10, perm).as_columns().items())), replay(10, perm).status)
        for perm in itertools.permutations(entries)
    }
    assert len(results) == 1
    (_, status), = results
    assert status is SubOrderStatus.COMPLETED


def test_incremental_apply_matches_replay():
    entries = [LedgerEntry("production", 5), LedgerEntry("production", 5), LedgerEntry("shipping", 4)]
    incremental = SubOrderCounters(planned=10)
    for entry in entries:
        incremental.apply(entry)
    assert incremental == replay(10, entries)
    assert incremental.status is SubOrderStatus.SHIPPING_COMPLETED_PRODUCTION


def test_replay_is_idempotent():
    entries = [LedgerEntry("production", 3), LedgerEntry("shipping", 1)]
    assert replay(10, entries) == replay(10, entries)


def test_rollup_takes_least_advanced_line():
    assert rollup_order_status([]) is SubOrderStatus.NEW
    assert rollup_order_status(["completed", "completed"]) is SubOrderStatus.COMPLETED
    assert rollup_order_status(["completed", "production_partial"]) is SubOrderStatus.PRODUCTION_PARTIAL
    assert rollup_order_status(["shipping_during_production", "production_completed"]) is (
        SubOrderStatus.PRODUCTION_COMPLETED
    )
    assert rollup_order_status(["new", "completed"]) is SubOrderStatus.NEW


def test_summary_flags():
    assert not is_in_production([])
    assert not is_in_production(["new", "new"])
    assert is_in_production(["new", "production_partial"])
    assert not is_production_done([])
    assert not is_production_done(["production_completed", "production_partial"])
    assert is_production_done(["production_completed", "shipping_completed_production", "completed"])


def test_progress_helpers():
    assert progress_percent(5, 10) == 50
    assert progress_percent(1, 3) == 33
    assert progress_percent(12, 10) == 120
    assert progress_percent(5, 0) == 0
    assert available_stock(5, 8) == -3
    assert remaining_to_ship(10, 4) == 6
    assert remaining_to_ship(10, 12) == 0


def test_zero_planned_line_advances_once_something_is_recorded():
    assert derive_sub_order_status(0, 3, 0) is SubOrderStatus.PRODUCTION_COMPLETED
    assert derive_sub_order_status(0, 3, 1) is SubOrderStatus.COMPLETED
