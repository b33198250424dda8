"""Pydantic schemas for the dashboard metrics engine.

Three groups live here:
- Source records (attendance, sales, directory) handed to the engine.
- Filters and periods that select which records count.
- Derived results (timeline, segments, KPIs) and the two response shapes,
  Snapshot (first paint) and Metrics (fully filter-driven).

Monetary amounts are Decimal and serialize as strings, matching the
analytics responses elsewhere in the API.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

DEFAULT_SALES_STATUS = "completed"

# =============================================================================
# Enums
# =============================================================================


class RangeMode(str, Enum):
    """Calendar granularity of the selected dashboard period."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class AttendanceStatus(str, Enum):
    """Kind of attendance event."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class AttendanceStatusFilter(str, Enum):
    """Attendance status filter; ALL leaves attendance unrestricted."""

    ALL = "all"
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


# =============================================================================
# Source Records
# =============================================================================


class AttendanceRecord(BaseModel):
    """A single check-in or check-out event."""

    model_config = ConfigDict(frozen=True)

    employee_id: str = Field(..., description="Employee who checked in/out.")
    store_id: str = Field(..., description="Store where the event was captured.")
    timestamp: AwareDatetime = Field(..., description="Instant of the event.")
    status: AttendanceStatus = Field(..., description="check-in or check-out.")


class ProductLine(BaseModel):
    """Per-product breakdown of a sales record."""

    model_config = ConfigDict(frozen=True)

    product_code: str = Field("", description="Catalog code (may be blank).")
    product_name: str = Field(..., description="Product display name.")
    quantity: int = Field(0, ge=0, description="Units sold on this line.")
    amount: Decimal = Field(Decimal("0"), description="Line total.")


class SalesRecord(BaseModel):
    """A submitted sales entry."""

    model_config = ConfigDict(frozen=True)

    employee_id: str = Field(..., description="Employee who entered the sale.")
    store_id: str = Field(..., description="Store the sale belongs to.")
    timestamp: AwareDatetime = Field(..., description="Instant of the sale.")
    status: str = Field(
        DEFAULT_SALES_STATUS,
        description="Free-text workflow label. Blank normalizes to 'completed'.",
    )
    total_amount: Decimal = Field(..., description="Sale total.")
    quantity: int = Field(0, ge=0, description="Units sold.")
    product_lines: tuple[ProductLine, ...] = Field(
        default=(),
        description="Per-product breakdown used for top-product ranking.",
    )
    transaction_id: str | None = Field(
        None,
        description="Receipt reference. Records sharing one count as a single "
        "transaction for the average ticket.",
    )

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: object) -> str:
        """Strip the label and default blanks to 'completed'."""
        if v is None:
            return DEFAULT_SALES_STATUS
        text = str(v).strip()
        return text or DEFAULT_SALES_STATUS


# =============================================================================
# Directory
# =============================================================================


class MissingDirectoryEntryError(KeyError):
    """Raised when an employee or store id has no directory entry."""

    def __init__(self, kind: str, entry_id: str) -> None:
        super().__init__(f"{kind} '{entry_id}' not found in directory")
        self.kind = kind
        self.entry_id = entry_id


class DirectoryEntry(BaseModel):
    """Employee or store directory entry used for label resolution."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    province: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class Directory(BaseModel):
    """Employee and store lookups keyed by id."""

    employees: dict[str, DirectoryEntry] = Field(default_factory=dict)
    stores: dict[str, DirectoryEntry] = Field(default_factory=dict)

    @classmethod
    def from_entries(
        cls,
        employees: Iterable[DirectoryEntry] = (),
        stores: Iterable[DirectoryEntry] = (),
    ) -> "Directory":
        """Build a directory from flat entry lists."""
        return cls(
            employees={entry.id: entry for entry in employees},
            stores={entry.id: entry for entry in stores},
        )

    def employee(self, employee_id: str) -> DirectoryEntry:
        """Look up an employee.

        Raises:
            MissingDirectoryEntryError: If the id is unknown.
        """
        try:
            return self.employees[employee_id]
        except KeyError:
            raise MissingDirectoryEntryError("employee", employee_id) from None

    def store(self, store_id: str) -> DirectoryEntry:
        """Look up a store.

        Raises:
            MissingDirectoryEntryError: If the id is unknown.
        """
        try:
            return self.stores[store_id]
        except KeyError:
            raise MissingDirectoryEntryError("store", store_id) from None


# =============================================================================
# Filters and Periods
# =============================================================================


class DashboardFilters(BaseModel):
    """Filter set driving a metrics computation.

    All fields are optional: missing values fall back to defaults (current
    month, all stores/employees/statuses, whole day).
    """

    range_mode: RangeMode | None = Field(
        None,
        description="Period granularity. Defaults to the configured mode (month).",
    )
    range_value: str | None = Field(
        None,
        description="Period reference: YYYY-MM-DD (day/week Monday), YYYY-MM (month) "
        "or YYYY (year). Missing or malformed values select the current period.",
    )
    store: str | None = Field(None, description="Store id; blank means all stores.")
    employee: str | None = Field(None, description="Employee id; blank means all.")
    attendance_status: AttendanceStatusFilter = Field(
        AttendanceStatusFilter.ALL,
        description="Restrict attendance records to check-ins or check-outs.",
    )
    sales_status: str | None = Field(
        None,
        description="Sales status label (case-insensitive); blank or 'all' means all.",
    )
    time_from: str | None = Field(None, description="Local time-of-day lower bound HH:MM.")
    time_to: str | None = Field(None, description="Local time-of-day upper bound HH:MM.")


class Period(BaseModel):
    """Half-open aggregation window [start, end) in a time zone."""

    model_config = ConfigDict(frozen=True)

    start: AwareDatetime
    end: AwareDatetime
    mode: RangeMode | None = Field(
        None,
        description="Calendar granularity; None for ad-hoc lookback windows.",
    )
    time_zone: str

    @property
    def zone(self) -> ZoneInfo:
        """ZoneInfo for the period's time zone."""
        return ZoneInfo(self.time_zone)

    def contains(self, instant: datetime) -> bool:
        """Check start <= instant < end."""
        return self.start <= instant < self.end

    def first_day(self) -> date:
        """Local calendar date of the period start."""
        return self.start.astimezone(self.zone).date()

    def day_keys(self) -> list[str]:
        """Local ISO date keys covering [start, end), in order."""
        zone = self.zone
        day = self.start.astimezone(zone).date()
        last = (self.end.astimezone(zone) - timedelta(microseconds=1)).date()
        keys: list[str] = []
        while day <= last:
            keys.append(day.isoformat())
            day += timedelta(days=1)
        return keys


class PeriodWindow(BaseModel):
    """Current period, the immediately preceding one, and the resolved value."""

    model_config = ConfigDict(frozen=True)

    current: Period
    previous: Period
    range_value: str = Field(..., description="Resolved reference value for the current period.")
    defaulted: bool = Field(
        False,
        description="True when the requested value was missing or invalid and the "
        "current period was substituted.",
    )


class AppliedFilters(BaseModel):
    """Resolved filters echoed back so callers can sync UI/URL state."""

    range_mode: RangeMode
    range_value: str
    store: str | None
    employee: str | None
    attendance_status: AttendanceStatusFilter
    sales_status: str
    time_from: str | None
    time_to: str | None
    range_start: AwareDatetime
    range_end: AwareDatetime
    time_zone: str


# =============================================================================
# Derived Results
# =============================================================================


class TimelineBucket(BaseModel):
    """One local calendar day's merged attendance and sales totals."""

    date_key: str = Field(..., description="Local date, YYYY-MM-DD.")
    sales_total: Decimal = Field(Decimal("0"), description="Sum of sale totals.")
    sales_quantity: int = Field(0, ge=0, description="Sum of units sold.")
    check_ins: int = Field(0, ge=0)
    check_outs: int = Field(0, ge=0)
    transactions: int = Field(0, ge=0, description="Number of sales records.")


class SegmentSummary(BaseModel):
    """Sales contribution of one store, employee or status."""

    key: str = Field(..., description="Grouping key (id or lowercased status).")
    label: str = Field(..., description="Display label; falls back to the raw key.")
    total: Decimal
    transactions: int = Field(0, ge=0)
    quantity: int = Field(0, ge=0)
    active_employees: int | None = Field(
        None,
        description="Store segment only: distinct employees with a check-in.",
    )
    check_ins: int | None = Field(None, description="Store segment only: check-in count.")
    stores: list[str] | None = Field(
        None,
        description="Employee segment only: stores the employee sold or checked in at.",
    )


class SegmentBoard(BaseModel):
    """The three sales leaderboards, each sorted by total descending."""

    by_store: list[SegmentSummary] = Field(default_factory=list)
    by_employee: list[SegmentSummary] = Field(default_factory=list)
    by_status: list[SegmentSummary] = Field(default_factory=list)


class ProductSummary(BaseModel):
    """Aggregated product-line sales for top-product ranking."""

    product_code: str
    product_name: str
    total: Decimal
    quantity: int = Field(0, ge=0)


class KPI(BaseModel):
    """Current value, previous-period value and percentage delta."""

    value: Decimal
    previous_value: Decimal
    delta_percent: float = Field(
        ...,
        description="(value - previous) / previous * 100 rounded to one decimal; "
        "0 when previous is 0.",
    )


class KPISet(BaseModel):
    """Tracked KPIs for a pair of periods."""

    sales: KPI
    attendance: KPI
    average_ticket: KPI
    transaction_count: KPI
    active_employees: KPI


class AttendanceSummary(BaseModel):
    """Attendance counts for the current filtered period."""

    total: int = 0
    check_ins: int = 0
    check_outs: int = 0
    unique_employees: int = 0


class SalesSummary(BaseModel):
    """Sales totals for the current filtered period."""

    total_revenue: Decimal = Decimal("0")
    total_quantity: int = 0
    transactions: int = 0
    average_ticket: Decimal = Decimal("0")


class Heatmaps(BaseModel):
    """Weekday x hour grids (row 0 = Monday, column = local hour)."""

    attendance: list[list[int]]
    sales: list[list[float]]


class Correlation(BaseModel):
    """Pearson correlation between daily check-ins and daily sales."""

    value: float
    strength: Literal["strong", "moderate", "weak"]


# =============================================================================
# Response Shapes
# =============================================================================


class SnapshotTotals(BaseModel):
    """Directory sizes and record counts for the snapshot period."""

    employees: int = Field(0, ge=0)
    stores: int = Field(0, ge=0)
    products: int = Field(0, ge=0)
    attendance_records: int = Field(0, ge=0)
    sales_records: int = Field(0, ge=0)


class SnapshotAttendance(BaseModel):
    """Attendance overview for the snapshot period."""

    check_ins: int = 0
    active_employees: int = 0


class SnapshotSales(BaseModel):
    """Sales overview for the snapshot period."""

    daily_trend: list[TimelineBucket] = Field(
        default_factory=list,
        description="Zero-filled daily series over the trend lookback window.",
    )
    top_products: list[ProductSummary] = Field(default_factory=list)
    total_revenue: Decimal = Decimal("0")
    total_quantity: int = 0


class Snapshot(BaseModel):
    """Coarse first-paint overview, independent of user filters."""

    totals: SnapshotTotals
    period: PeriodWindow
    kpis: KPISet
    alerts: list[str]
    attendance: SnapshotAttendance
    sales: SnapshotSales
    generated_at: AwareDatetime
    time_zone: str


class Metrics(BaseModel):
    """Fully filter-driven dashboard payload."""

    filters: AppliedFilters
    period: PeriodWindow
    attendance: AttendanceSummary
    sales: SalesSummary
    kpis: KPISet
    alerts: list[str]
    timeline: list[TimelineBucket]
    segments: SegmentBoard
    available_statuses: list[str]
    heatmaps: Heatmaps
    correlation: Correlation
    generated_at: AwareDatetime
