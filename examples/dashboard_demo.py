#!/usr/bin/env python
"""Compute dashboard metrics over in-memory records.

Usage:
    uv run python examples/dashboard_demo.py

No database needed: the in-memory source stands in for the SQL tables and a
fixed clock pins "now" to 2024-03-15 12:00 Bangkok time.
"""

import asyncio
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from app.core.clock import FixedClock
from app.features.dashboard.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    DashboardFilters,
    Directory,
    DirectoryEntry,
    RangeMode,
    SalesRecord,
)
from app.features.dashboard.service import DashboardService
from app.features.dashboard.sources import InMemoryRecordSource

BANGKOK = ZoneInfo("Asia/Bangkok")


def at(day: int, hour: int) -> datetime:
    return datetime(2024, 3, day, hour, tzinfo=BANGKOK)


def check_in(employee_id: str, store_id: str, when: datetime) -> AttendanceRecord:
    return AttendanceRecord(
        employee_id=employee_id,
        store_id=store_id,
        timestamp=when,
        status=AttendanceStatus.CHECK_IN,
    )


def sale(employee_id: str, store_id: str, when: datetime, amount: str, qty: int) -> SalesRecord:
    return SalesRecord(
        employee_id=employee_id,
        store_id=store_id,
        timestamp=when,
        total_amount=Decimal(amount),
        quantity=qty,
    )


async def main() -> None:
    directory = Directory.from_entries(
        employees=[DirectoryEntry(id="E1", name="Somchai"), DirectoryEntry(id="E2", name="Anong")],
        stores=[
            DirectoryEntry(id="S1", name="Central World"),
            DirectoryEntry(id="S2", name="Siam Paragon"),
        ],
    )
    source = InMemoryRecordSource(
        attendance=[
            check_in("E1", "S1", at(11, 8)),
            check_in("E2", "S2", at(12, 9)),
            check_in("E1", "S1", at(5, 8)),
        ],
        sales=[
            sale("E1", "S1", at(11, 10), "450.00", 3),
            sale("E2", "S2", at(12, 14), "300.00", 2),
            sale("E1", "S1", at(5, 11), "1200.00", 6),
        ],
        directory=directory,
    )
    service = DashboardService(source, FixedClock(at(15, 12)))

    metrics = await service.compute_metrics(
        DashboardFilters(range_mode=RangeMode.WEEK, range_value="2024-03-13")
    )

    print("StorePulse - Dashboard Demo")
    print("=" * 28)
    print(f"Week of {metrics.filters.range_value} ({metrics.filters.time_zone})")
    print(f"Sales:      {metrics.kpis.sales.value} ({metrics.kpis.sales.delta_percent:+.1f}%)")
    print(f"Check-ins:  {metrics.kpis.attendance.value}")
    print(f"Avg ticket: {metrics.kpis.average_ticket.value}")
    print(f"Alerts:     {', '.join(metrics.alerts) or 'none'}")
    print()
    for segment in metrics.segments.by_store:
        print(f"  {segment.label:<15} {segment.total:>10}")


if __name__ == "__main__":
    asyncio.run(main())
