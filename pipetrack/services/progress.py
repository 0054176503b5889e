"""
Sub-order progress state machine and order-level rollup.

Every mutation path (ledger appends, order recompute) derives status through
the functions in this module so the rules live in exactly one place. The
functions are pure: they work on plain integers and strings and know nothing
about sessions or rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Iterable, Literal, Optional

from pipetrack.core.errors import ValidationError


class SubOrderStatus(str, Enum):
    """Sub-order lifecycle states, listed from least to most advanced."""

    NEW = "new"
    PRODUCTION_PARTIAL = "production_partial"
    PRODUCTION_COMPLETED = "production_completed"
    SHIPPING_DURING_PRODUCTION = "shipping_during_production"
    SHIPPING_COMPLETED_PRODUCTION = "shipping_completed_production"
    COMPLETED = "completed"


# Orders share the sub-order vocabulary; see rollup_order_status.
OrderStatus = SubOrderStatus

STATUS_PRECEDENCE: tuple[SubOrderStatus, ...] = tuple(SubOrderStatus)
_RANK: Dict[SubOrderStatus, int] = {s: i for i, s in enumerate(STATUS_PRECEDENCE)}


class Process(str, Enum):
    """Manufacturing stage a production record applies to."""

    PULLING = "pulling"
    HYDROSTATIC = "hydrostatic"
    LINING = "lining"
    COATING = "coating"
    PACKAGING = "packaging"


# Column on sub_orders that each process accumulates into.
PROCESS_COUNTERS: Dict[Process, str] = {
    Process.PULLING: "pulling_quantity",
    Process.HYDROSTATIC: "hydrostatic_quantity",
    Process.LINING: "lining_quantity",
    Process.COATING: "coating_quantity",
    Process.PACKAGING: "produced_quantity",
}
SHIPPED_COUNTER = "shipped_quantity"


# PUBLIC_INTERFACE
def normalize_process(value: Optional[str]) -> Process:
    """
    Resolve a process tag. Missing or blank tags mean packaging (finished goods).

    Raises:
        ValidationError: the tag is not a recognised production stage.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Process.PACKAGING
    if isinstance(value, Process):
        return value
    try:
        return Process(value.strip())
    except ValueError:
        allowed = ", ".join(p.value for p in Process)
        raise ValidationError(f"Unknown process '{value}'. Expected one of: {allowed}")


# PUBLIC_INTERFACE
def validate_quantity(quantity) -> int:
    """Return quantity as int if it is a positive integer, else raise ValidationError."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be a positive integer", details={"quantity": quantity})
    if quantity <= 0:
        raise ValidationError("Quantity must be a positive integer", details={"quantity": quantity})
    return quantity


# PUBLIC_INTERFACE
def derive_sub_order_status(planned: int, produced: int, shipped: int) -> SubOrderStatus:
    """
    Derive a sub-order's status from its counters.

    Rules are evaluated in order and the first match wins:
      1. shipped >= planned                       -> completed
      2. shipped > 0 and produced >= planned      -> shipping_completed_production
         shipped > 0                              -> shipping_during_production
      3. produced >= planned                      -> production_completed
      4. produced > 0                             -> production_partial
      5.                                          -> new

    Rule 1 wins even when production is short of plan: a full shipment closes
    the line regardless of the packaging count.

    Rules 1 and 3 also require a non-zero count, which only matters for a
    line planned at 0. Order creation rejects those, but replay and
    recompute accept whatever is stored. Such a line stays `new` until
    something is recorded, then follows the ladder as if the plan were met.
    """
    planned = planned or 0
    produced = produced or 0
    shipped = shipped or 0

    if shipped >= planned and shipped > 0:
        return SubOrderStatus.COMPLETED
    if shipped > 0:
        if produced >= planned:
            return SubOrderStatus.SHIPPING_COMPLETED_PRODUCTION
        return SubOrderStatus.SHIPPING_DURING_PRODUCTION
    if produced >= planned and produced > 0:
        return SubOrderStatus.PRODUCTION_COMPLETED
    if produced > 0:
        return SubOrderStatus.PRODUCTION_PARTIAL
    return SubOrderStatus.NEW


@dataclass(frozen=True)
class LedgerEntry:
    """Minimal view of a ledger record needed to replay counters."""

    kind: Literal["production", "shipping"]
    quantity: int
    process: Optional[str] = None


@dataclass
class SubOrderCounters:
    """Accumulated quantities for one sub-order."""

    planned: int
    produced: int = 0
    pulling: int = 0
    hydrostatic: int = 0
    lining: int = 0
    coating: int = 0
    shipped: int = 0
    _by_column: ClassVar[Dict[str, str]] = {
        "produced_quantity": "produced",
        "pulling_quantity": "pulling",
        "hydrostatic_quantity": "hydrostatic",
        "lining_quantity": "lining",
        "coating_quantity": "coating",
        "shipped_quantity": "shipped",
    }

    @property
    def status(self) -> SubOrderStatus:
        return derive_sub_order_status(self.planned, self.produced, self.shipped)

    def apply(self, entry: LedgerEntry) -> "SubOrderCounters":
        """Add one ledger entry to the counters in place and return self."""
        column = counter_column(entry)
        attr = self._by_column[column]
        setattr(self, attr, getattr(self, attr) + entry.quantity)
        return self

    def as_columns(self) -> Dict[str, int]:
        """Counters keyed by sub_orders column name."""
        return {column: getattr(self, attr) for column, attr in self._by_column.items()}


# PUBLIC_INTERFACE
def counter_column(entry: LedgerEntry) -> str:
    """Return the sub_orders column a ledger entry increments."""
    if entry.kind == "shipping":
        return SHIPPED_COUNTER
    return PROCESS_COUNTERS[normalize_process(entry.process)]


# PUBLIC_INTERFACE
def replay(planned: int, entries: Iterable[LedgerEntry]) -> SubOrderCounters:
    """
    Rebuild a sub-order's counters from its full ledger.

    Summation is commutative, so any ordering of the same entries produces the
    same counters and therefore the same terminal status.
    """
    counters = SubOrderCounters(planned=planned)
    for entry in entries:
        counters.apply(entry)
    return counters


# PUBLIC_INTERFACE
def rollup_order_status(child_statuses: Iterable[str]) -> OrderStatus:
    """
    Summarise an order from its sub-order statuses.

    The order is as far along as its least advanced line: the minimum of the
    children on STATUS_PRECEDENCE. It is therefore `completed` only when every
    line is completed. An order without lines is `new`.
    """
    ranks = [_RANK[SubOrderStatus(s)] for s in child_statuses]
    if not ranks:
        return SubOrderStatus.NEW
    return STATUS_PRECEDENCE[min(ranks)]


# PUBLIC_INTERFACE
def is_in_production(child_statuses: Iterable[str]) -> bool:
    """True once any line has left `new`."""
    return any(SubOrderStatus(s) is not SubOrderStatus.NEW for s in child_statuses)


# PUBLIC_INTERFACE
def is_production_done(child_statuses: Iterable[str]) -> bool:
    """True when every line is at `production_completed` or later (and there is at least one)."""
    statuses = [SubOrderStatus(s) for s in child_statuses]
    threshold = _RANK[SubOrderStatus.PRODUCTION_COMPLETED]
    return bool(statuses) and all(_RANK[s] >= threshold for s in statuses)


# PUBLIC_INTERFACE
def progress_percent(done: int, planned: int) -> int:
    """Rounded completion percentage; may exceed 100. Zero when nothing is planned."""
    if not planned or planned <= 0:
        return 0
    return int(round((done or 0) * 100 / planned))


# PUBLIC_INTERFACE
def available_stock(produced: int, shipped: int) -> int:
    """Finished pipes on hand (may be negative after an over-shipment)."""
    return (produced or 0) - (shipped or 0)


# PUBLIC_INTERFACE
def remaining_to_ship(planned: int, shipped: int) -> int:
    """Pipes still to ship; never negative."""
    return max((planned or 0) - (shipped or 0), 0)
