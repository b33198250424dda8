"""Segment leaderboards over filtered sales.

Three independent groupings of the same filtered sales set (by store, by
employee, by status), each ranked by total descending. Every sale lands in
exactly one group per dimension, so each leaderboard sums to the flat total.
Truncation to a top N is left to callers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from app.core.logging import get_logger
from app.features.dashboard.schemas import (
    DEFAULT_SALES_STATUS,
    AttendanceRecord,
    AttendanceStatus,
    Directory,
    DirectoryEntry,
    MissingDirectoryEntryError,
    ProductSummary,
    SalesRecord,
    SegmentBoard,
    SegmentSummary,
)

logger = get_logger(__name__)

UNSPECIFIED_LABEL = "unspecified"


@dataclass
class _Accumulator:
    key: str
    label: str
    total: Decimal = Decimal("0")
    transactions: int = 0
    quantity: int = 0

    def add(self, sale: SalesRecord) -> None:
        self.total += sale.total_amount
        self.transactions += 1
        self.quantity += sale.quantity


@dataclass
class _ProductAccumulator:
    code: str
    name: str
    total: Decimal = Decimal("0")
    quantity: int = 0


@dataclass
class _LabelResolver:
    """Directory label lookup with raw-id fallback, memoized per build."""

    lookup: Callable[[str], DirectoryEntry]
    cache: dict[str, str] = field(default_factory=dict)

    def __call__(self, entry_id: str) -> str:
        if not entry_id:
            return UNSPECIFIED_LABEL
        if entry_id not in self.cache:
            try:
                self.cache[entry_id] = self.lookup(entry_id).name
            except MissingDirectoryEntryError as e:
                logger.debug("dashboard.directory_miss", kind=e.kind, entry_id=e.entry_id)
                self.cache[entry_id] = entry_id
        return self.cache[entry_id]


def _rank(summaries: Iterable[SegmentSummary]) -> list[SegmentSummary]:
    return sorted(summaries, key=lambda s: (-s.total, s.label.casefold(), s.key))


class SegmentAggregator:
    """Build store, employee and status leaderboards.

    Attributes:
        directory: Employee/store lookups used for labels.
    """

    def __init__(self, directory: Directory | None = None) -> None:
        self.directory = directory or Directory()

    def by_store(
        self,
        sales: Sequence[SalesRecord],
        attendance: Sequence[AttendanceRecord] = (),
    ) -> list[SegmentSummary]:
        """Sales per store, with active employees and check-ins from attendance."""
        label_for = _LabelResolver(self.directory.store)
        groups: dict[str, _Accumulator] = {}
        for sale in sales:
            key = sale.store_id
            if key not in groups:
                groups[key] = _Accumulator(key=key, label=label_for(key))
            groups[key].add(sale)

        check_ins: dict[str, int] = {}
        employees: dict[str, set[str]] = {}
        for record in attendance:
            if record.status != AttendanceStatus.CHECK_IN:
                continue
            check_ins[record.store_id] = check_ins.get(record.store_id, 0) + 1
            employees.setdefault(record.store_id, set()).add(record.employee_id)

        return _rank(
            SegmentSummary(
                key=group.key,
                label=group.label,
                total=group.total,
                transactions=group.transactions,
                quantity=group.quantity,
                active_employees=len(employees.get(group.key, ())),
                check_ins=check_ins.get(group.key, 0),
            )
            for group in groups.values()
        )

    def by_employee(
        self,
        sales: Sequence[SalesRecord],
        attendance: Sequence[AttendanceRecord] = (),
    ) -> list[SegmentSummary]:
        """Sales per employee, listing the stores each one sold or checked in at."""
        label_for = _LabelResolver(self.directory.employee)
        store_label_for = _LabelResolver(self.directory.store)
        groups: dict[str, _Accumulator] = {}
        stores: dict[str, set[str]] = {}
        for sale in sales:
            key = sale.employee_id
            if key not in groups:
                groups[key] = _Accumulator(key=key, label=label_for(key))
            groups[key].add(sale)
            stores.setdefault(key, set()).add(store_label_for(sale.store_id))

        for record in attendance:
            if record.employee_id in groups and record.status == AttendanceStatus.CHECK_IN:
                stores[record.employee_id].add(store_label_for(record.store_id))

        return _rank(
            SegmentSummary(
                key=group.key,
                label=group.label,
                total=group.total,
                transactions=group.transactions,
                quantity=group.quantity,
                stores=sorted(stores.get(group.key, ()), key=str.casefold),
            )
            for group in groups.values()
        )

    def by_status(self, sales: Sequence[SalesRecord]) -> list[SegmentSummary]:
        """Sales per status label, grouped case-insensitively."""
        groups: dict[str, _Accumulator] = {}
        for sale in sales:
            label = sale.status or DEFAULT_SALES_STATUS
            key = label.casefold()
            if key not in groups:
                groups[key] = _Accumulator(key=key, label=label)
            groups[key].add(sale)

        return _rank(
            SegmentSummary(
                key=group.key,
                label=group.label,
                total=group.total,
                transactions=group.transactions,
                quantity=group.quantity,
            )
            for group in groups.values()
        )

    def build(
        self,
        sales: Sequence[SalesRecord],
        attendance: Sequence[AttendanceRecord] = (),
    ) -> SegmentBoard:
        """All three leaderboards for one filtered record set."""
        return SegmentBoard(
            by_store=self.by_store(sales, attendance),
            by_employee=self.by_employee(sales, attendance),
            by_status=self.by_status(sales),
        )


def rank_products(sales: Iterable[SalesRecord]) -> list[ProductSummary]:
    """Aggregate product lines by code (or name when no code) ranked by total."""
    products: dict[str, _ProductAccumulator] = {}
    for sale in sales:
        for line in sale.product_lines:
            key = line.product_code or line.product_name
            entry = products.get(key)
            if entry is None:
                entry = products[key] = _ProductAccumulator(
                    code=line.product_code,
                    name=line.product_name or line.product_code or UNSPECIFIED_LABEL,
                )
            entry.total += line.amount
            entry.quantity += line.quantity

    ranked = sorted(products.values(), key=lambda p: (-p.total, p.name.casefold()))
    return [
        ProductSummary(
            product_code=p.code,
            product_name=p.name,
            total=p.total,
            quantity=p.quantity,
        )
        for p in ranked
    ]


def available_statuses(statuses: Iterable[str]) -> list[str]:
    """Distinct status labels plus the default 'completed', sorted."""
    distinct = {status.strip() for status in statuses if status and status.strip()}
    distinct.add(DEFAULT_SALES_STATUS)
    return sorted(distinct, key=lambda s: (s.casefold(), s))
