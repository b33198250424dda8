"""Record filtering for dashboard periods and filter sets."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from app.features.dashboard.schemas import (
    AttendanceRecord,
    AttendanceStatusFilter,
    DashboardFilters,
    Period,
    SalesRecord,
)

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
ALL_STATUSES = "all"


def sanitize_time(value: str | None) -> str | None:
    """Normalize an H:MM / HH:MM string to HH:MM.

    Returns None for blanks and anything that is not a valid 24h time, which
    leaves that bound of the time-of-day window unset.
    """
    if value is None:
        return None
    match = TIME_PATTERN.match(value.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def time_to_minutes(value: str | None) -> int | None:
    """Minutes since midnight for a sanitized HH:MM string."""
    if value is None:
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True)
class FilterCriteria:
    """Normalized record predicates derived from DashboardFilters.

    Attributes:
        store: Store id to match exactly, or None for all stores.
        employee: Employee id to match exactly, or None for all employees.
        attendance_status: Attendance status restriction.
        sales_status: Sales status label as given, or None for all statuses.
        time_from: Sanitized lower time-of-day bound (inclusive).
        time_to: Sanitized upper time-of-day bound (inclusive).
    """

    store: str | None = None
    employee: str | None = None
    attendance_status: AttendanceStatusFilter = AttendanceStatusFilter.ALL
    sales_status: str | None = None
    time_from: str | None = None
    time_to: str | None = None

    @classmethod
    def from_filters(cls, filters: DashboardFilters) -> FilterCriteria:
        """Normalize raw filters (blank values mean unrestricted)."""
        sales_status = _clean(filters.sales_status)
        if sales_status is not None and sales_status.casefold() == ALL_STATUSES:
            sales_status = None
        return cls(
            store=_clean(filters.store),
            employee=_clean(filters.employee),
            attendance_status=filters.attendance_status,
            sales_status=sales_status,
            time_from=sanitize_time(filters.time_from),
            time_to=sanitize_time(filters.time_to),
        )

    @property
    def sales_status_label(self) -> str:
        """Sales status as echoed back to callers ('all' when unrestricted)."""
        return self.sales_status if self.sales_status is not None else ALL_STATUSES

    def matches_time_of_day(self, local: datetime) -> bool:
        """Check the local wall-clock minute against the window.

        The check is a plain inclusive range: a window whose start is after
        its end (e.g. 22:00-06:00) matches nothing.
        """
        lower = time_to_minutes(self.time_from)
        upper = time_to_minutes(self.time_to)
        if lower is None and upper is None:
            return True
        minutes = local.hour * 60 + local.minute
        if lower is not None and minutes < lower:
            return False
        if upper is not None and minutes > upper:
            return False
        return True


class RecordFilterer:
    """Narrow attendance and sales records to a period and filter set."""

    def __init__(self, criteria: FilterCriteria | None = None) -> None:
        self.criteria = criteria or FilterCriteria()

    def _matches_common(
        self,
        employee_id: str,
        store_id: str,
        timestamp: datetime,
        period: Period,
    ) -> bool:
        criteria = self.criteria
        if not period.contains(timestamp):
            return False
        if criteria.store is not None and store_id != criteria.store:
            return False
        if criteria.employee is not None and employee_id != criteria.employee:
            return False
        return criteria.matches_time_of_day(timestamp.astimezone(period.zone))

    def filter_attendance(
        self,
        records: Iterable[AttendanceRecord],
        period: Period,
    ) -> list[AttendanceRecord]:
        """Attendance records inside `period` that match the criteria."""
        status = self.criteria.attendance_status
        return [
            record
            for record in records
            if (status == AttendanceStatusFilter.ALL or record.status.value == status.value)
            and self._matches_common(record.employee_id, record.store_id, record.timestamp, period)
        ]

    def filter_sales(
        self,
        records: Iterable[SalesRecord],
        period: Period,
    ) -> list[SalesRecord]:
        """Sales records inside `period` that match the criteria."""
        wanted = self.criteria.sales_status
        wanted_key = wanted.casefold() if wanted is not None else None
        return [
            record
            for record in records
            if (wanted_key is None or record.status.casefold() == wanted_key)
            and self._matches_common(record.employee_id, record.store_id, record.timestamp, period)
        ]
