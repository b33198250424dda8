"""Daily timeline aggregation.

Attendance and sales are keyed independently by local calendar day and then
merged on the day key: a day present on only one side gets zeros for the
other, and a day with activity on both sides yields exactly one bucket.
Days without any activity are not synthesized (use fill_daily_gaps for a
dense series).

Also provides the weekday x hour heatmaps and the check-ins/sales
correlation computed over the same filtered records.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Literal
from zoneinfo import ZoneInfo

import numpy as np

from app.features.dashboard.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    Correlation,
    Heatmaps,
    Period,
    SalesRecord,
    TimelineBucket,
)

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24

Strength = Literal["strong", "moderate", "weak"]


def day_key(instant: datetime, zone: ZoneInfo) -> str:
    """Local ISO date key for an instant."""
    return instant.astimezone(zone).date().isoformat()


@dataclass
class _SalesDay:
    total: Decimal = Decimal("0")
    quantity: int = 0
    transactions: int = 0


@dataclass
class _AttendanceDay:
    check_ins: int = 0
    check_outs: int = 0


class TimelineAggregator:
    """Merge filtered attendance and sales into a per-day series."""

    def build(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
        period: Period,
    ) -> list[TimelineBucket]:
        """Build one bucket per local day with activity, oldest first.

        Args:
            attendance: Filtered attendance records.
            sales: Filtered sales records.
            period: Period whose time zone defines the day boundaries.

        Returns:
            Buckets with unique, strictly increasing date keys.
        """
        zone = period.zone

        sales_days: dict[str, _SalesDay] = {}
        for sale in sales:
            day = sales_days.setdefault(day_key(sale.timestamp, zone), _SalesDay())
            day.total += sale.total_amount
            day.quantity += sale.quantity
            day.transactions += 1

        attendance_days: dict[str, _AttendanceDay] = {}
        for record in attendance:
            att = attendance_days.setdefault(day_key(record.timestamp, zone), _AttendanceDay())
            if record.status == AttendanceStatus.CHECK_IN:
                att.check_ins += 1
            else:
                att.check_outs += 1

        buckets: list[TimelineBucket] = []
        for key in sorted(sales_days.keys() | attendance_days.keys()):
            sales_day = sales_days.get(key, _SalesDay())
            attendance_day = attendance_days.get(key, _AttendanceDay())
            buckets.append(
                TimelineBucket(
                    date_key=key,
                    sales_total=sales_day.total,
                    sales_quantity=sales_day.quantity,
                    check_ins=attendance_day.check_ins,
                    check_outs=attendance_day.check_outs,
                    transactions=sales_day.transactions,
                )
            )
        return buckets


def fill_daily_gaps(
    buckets: Sequence[TimelineBucket],
    first_day: date,
    days: int,
) -> list[TimelineBucket]:
    """Dense daily series of `days` days starting at `first_day`.

    Existing buckets are kept as-is; missing days get zeroed buckets.
    Buckets outside the range are dropped.
    """
    by_key = {bucket.date_key: bucket for bucket in buckets}
    dense: list[TimelineBucket] = []
    for offset in range(days):
        key = (first_day + timedelta(days=offset)).isoformat()
        bucket = by_key.get(key)
        dense.append(bucket if bucket is not None else TimelineBucket(date_key=key))
    return dense


def build_heatmaps(
    attendance: Sequence[AttendanceRecord],
    sales: Sequence[SalesRecord],
    period: Period,
) -> Heatmaps:
    """Weekday x hour grids of check-ins and sales totals in local time."""
    zone = period.zone
    check_ins: np.ndarray[Any, np.dtype[np.int64]] = np.zeros(
        (DAYS_PER_WEEK, HOURS_PER_DAY), dtype=np.int64
    )
    revenue: np.ndarray[Any, np.dtype[np.float64]] = np.zeros(
        (DAYS_PER_WEEK, HOURS_PER_DAY), dtype=np.float64
    )

    for record in attendance:
        if record.status != AttendanceStatus.CHECK_IN:
            continue
        local = record.timestamp.astimezone(zone)
        check_ins[local.weekday(), local.hour] += 1

    for sale in sales:
        local = sale.timestamp.astimezone(zone)
        revenue[local.weekday(), local.hour] += float(sale.total_amount)

    return Heatmaps(
        attendance=check_ins.tolist(),
        sales=np.round(revenue, 2).tolist(),
    )


def correlation_strength(value: float) -> Strength:
    """Bucket an absolute correlation into strong / moderate / weak."""
    magnitude = abs(value)
    if magnitude > 0.7:
        return "strong"
    if magnitude > 0.4:
        return "moderate"
    return "weak"


def timeline_correlation(buckets: Sequence[TimelineBucket]) -> Correlation:
    """Pearson correlation between daily check-ins and daily sales totals.

    Returns 0 (weak) for fewer than two days or when either series is flat.
    """
    if len(buckets) < 2:
        return Correlation(value=0.0, strength="weak")

    check_ins = np.array([bucket.check_ins for bucket in buckets], dtype=np.float64)
    totals = np.array([float(bucket.sales_total) for bucket in buckets], dtype=np.float64)
    if np.std(check_ins) == 0 or np.std(totals) == 0:
        return Correlation(value=0.0, strength="weak")

    value = round(float(np.corrcoef(check_ins, totals)[0, 1]), 3)
    return Correlation(value=value, strength=correlation_strength(value))
