"""API routes for the dashboard.

Two read-only endpoints: a coarse snapshot for first paint and a fully
filter-driven metrics payload. Responses are never cached because they
depend on "now".
"""

from fastapi import APIRouter, Depends, Query, Response

from app.core.clock import Clock, get_clock
from app.core.logging import get_logger
from app.features.dashboard.schemas import (
    AttendanceStatusFilter,
    DashboardFilters,
    Metrics,
    RangeMode,
    Snapshot,
)
from app.features.dashboard.service import DashboardService
from app.features.dashboard.sources import RecordSource, get_record_source

logger = get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

NO_STORE = "no-store"


@router.get(
    "/snapshot",
    response_model=Snapshot,
    summary="Dashboard snapshot",
    description="""
Coarse overview for the dashboard's first paint, independent of filters.

**Contents**:
- Directory sizes and record counts for the current snapshot period (week by default)
- KPIs against the previous period, with alerts
- Daily sales/attendance trend over the last 7 days (zero-filled)
- Top products by sales
""",
)
async def get_snapshot(
    response: Response,
    source: RecordSource = Depends(get_record_source),
    clock: Clock = Depends(get_clock),
) -> Snapshot:
    """Compute the dashboard snapshot.

    Args:
        response: Outgoing response (for cache headers).
        source: Record source.
        clock: Injected clock.

    Returns:
        Snapshot for the current period.
    """
    response.headers["Cache-Control"] = NO_STORE
    service = DashboardService(source=source, clock=clock)
    return await service.compute_snapshot()


@router.get(
    "/metrics",
    response_model=Metrics,
    summary="Filtered dashboard metrics",
    description="""
Compute dashboard metrics for a period and filter set.

**Range**:
- `range_mode`: day, week, month (default) or year
- `range_value`: YYYY-MM-DD (day, week), YYYY-MM (month), YYYY (year).
  Missing or malformed values fall back to the current period; the resolved
  value is echoed in `filters.range_value`.

**Filters**: store, employee, attendance status, sales status
(case-insensitive, `all` for any) and a local time-of-day window
`time_from`-`time_to` (HH:MM, inclusive).

**Example Use Cases**:
1. This month: `GET /dashboard/metrics`
2. One store in March 2024: `GET /dashboard/metrics?range_mode=month&range_value=2024-03&store=S1`
3. Morning check-ins this week: `GET /dashboard/metrics?range_mode=week&attendance_status=check-in&time_from=06:00&time_to=12:00`
""",
)
async def get_metrics(
    response: Response,
    range_mode: RangeMode | None = Query(
        None,
        description="Period granularity: day, week, month or year.",
    ),
    range_value: str | None = Query(
        None,
        description="Period reference value for the chosen mode.",
    ),
    store: str | None = Query(None, description="Store id; omit for all stores."),
    employee: str | None = Query(None, description="Employee id; omit for all employees."),
    attendance_status: AttendanceStatusFilter = Query(
        AttendanceStatusFilter.ALL,
        description="all, check-in or check-out.",
    ),
    sales_status: str | None = Query(
        None,
        description="Sales status label (case-insensitive); 'all' or omit for any.",
    ),
    time_from: str | None = Query(None, description="Local time-of-day lower bound, HH:MM."),
    time_to: str | None = Query(None, description="Local time-of-day upper bound, HH:MM."),
    source: RecordSource = Depends(get_record_source),
    clock: Clock = Depends(get_clock),
) -> Metrics:
    """Compute dashboard metrics for the requested filters.

    Args:
        response: Outgoing response (for cache headers).
        range_mode: Period granularity.
        range_value: Period reference value.
        store: Store filter.
        employee: Employee filter.
        attendance_status: Attendance status filter.
        sales_status: Sales status filter.
        time_from: Time-of-day lower bound.
        time_to: Time-of-day upper bound.
        source: Record source.
        clock: Injected clock.

    Returns:
        Metrics for the resolved period and filters.
    """
    response.headers["Cache-Control"] = NO_STORE
    filters = DashboardFilters(
        range_mode=range_mode,
        range_value=range_value,
        store=store,
        employee=employee,
        attendance_status=attendance_status,
        sales_status=sales_status,
        time_from=time_from,
        time_to=time_to,
    )
    service = DashboardService(source=source, clock=clock)
    return await service.compute_metrics(filters)
