"""Dashboard engine: composes periods, filtering and aggregations.

The engine is synchronous and holds no state between calls. Given the same
records, filters and clock it returns the same Snapshot/Metrics. Records
are fetched by the caller (see DashboardService) and may span more than the
requested periods; the engine applies period and filter predicates itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from app.core.clock import Clock
from app.core.config import Settings
from app.features.dashboard.alerts import AlertEvaluator, AlertThresholds
from app.features.dashboard.filtering import FilterCriteria, RecordFilterer
from app.features.dashboard.kpis import KPICalculator
from app.features.dashboard.periods import PeriodResolver
from app.features.dashboard.schemas import (
    AppliedFilters,
    AttendanceRecord,
    AttendanceSummary,
    DashboardFilters,
    Directory,
    Metrics,
    Period,
    PeriodWindow,
    RangeMode,
    SalesRecord,
    SalesSummary,
    Snapshot,
    SnapshotAttendance,
    SnapshotSales,
    SnapshotTotals,
)
from app.features.dashboard.segments import (
    SegmentAggregator,
    available_statuses,
    rank_products,
)
from app.features.dashboard.timeline import (
    TimelineAggregator,
    build_heatmaps,
    fill_daily_gaps,
    timeline_correlation,
)


class DashboardEngine:
    """Build dashboard Snapshot and Metrics payloads from raw records.

    Attributes:
        time_zone: IANA zone for all calendar boundaries.
        clock: Source of "now" for defaulted periods and generated_at.
        default_range_mode: Mode used when filters omit one.
        snapshot_range_mode: Mode of the snapshot's KPI window.
        trend_days: Length of the snapshot's daily trend.
        top_products: Number of products listed in the snapshot.
    """

    def __init__(
        self,
        time_zone: str,
        clock: Clock,
        *,
        default_range_mode: RangeMode = RangeMode.MONTH,
        snapshot_range_mode: RangeMode = RangeMode.WEEK,
        trend_days: int = 7,
        top_products: int = 5,
        thresholds: AlertThresholds | None = None,
    ) -> None:
        self.time_zone = time_zone
        self.clock = clock
        self.default_range_mode = default_range_mode
        self.snapshot_range_mode = snapshot_range_mode
        self.trend_days = trend_days
        self.top_products = top_products
        self.resolver = PeriodResolver(time_zone, clock)
        self.kpi_calculator = KPICalculator()
        self.alert_evaluator = AlertEvaluator(thresholds)
        self.timeline_aggregator = TimelineAggregator()

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock) -> DashboardEngine:
        """Engine configured from application settings."""
        return cls(
            settings.dashboard_time_zone,
            clock,
            default_range_mode=RangeMode(settings.dashboard_default_range_mode),
            snapshot_range_mode=RangeMode(settings.dashboard_snapshot_range_mode),
            trend_days=settings.dashboard_trend_days,
            top_products=settings.dashboard_top_products,
            thresholds=AlertThresholds.from_settings(settings),
        )

    # -------------------------------------------------------------------------
    # Periods
    # -------------------------------------------------------------------------

    def resolve_window(self, filters: DashboardFilters) -> PeriodWindow:
        """Current/previous window selected by the filters' range."""
        mode = filters.range_mode or self.default_range_mode
        return self.resolver.resolve(mode, filters.range_value)

    def snapshot_window(self) -> PeriodWindow:
        """Current/previous window for the snapshot range mode."""
        return self.resolver.current(self.snapshot_range_mode)

    def trend_period(self) -> Period:
        """Lookback window for the snapshot's daily trend."""
        return self.resolver.trailing_days(self.trend_days)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def compute_metrics(
        self,
        filters: DashboardFilters,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
        directory: Directory | None = None,
        known_statuses: Iterable[str] = (),
        window: PeriodWindow | None = None,
    ) -> Metrics:
        """Compute the filter-driven Metrics payload.

        Args:
            filters: Raw dashboard filters.
            attendance: Attendance records covering at least both periods.
            sales: Sales records covering at least both periods.
            directory: Employee/store labels (ids are used when missing).
            known_statuses: Extra sales status labels to offer as filters.
            window: Pre-resolved window; resolved from filters when omitted.

        Returns:
            Metrics for the current period compared with the previous one.
        """
        window = window or self.resolve_window(filters)
        criteria = FilterCriteria.from_filters(filters)
        filterer = RecordFilterer(criteria)

        current_attendance = filterer.filter_attendance(attendance, window.current)
        current_sales = filterer.filter_sales(sales, window.current)
        previous_attendance = filterer.filter_attendance(attendance, window.previous)
        previous_sales = filterer.filter_sales(sales, window.previous)

        current = self.kpi_calculator.totals(current_attendance, current_sales)
        previous = self.kpi_calculator.totals(previous_attendance, previous_sales)
        kpis = self.kpi_calculator.compare(current, previous)

        timeline = self.timeline_aggregator.build(
            current_attendance, current_sales, window.current
        )
        segments = SegmentAggregator(directory).build(current_sales, current_attendance)
        statuses = available_statuses([*known_statuses, *(sale.status for sale in sales)])

        applied = AppliedFilters(
            range_mode=window.current.mode or self.default_range_mode,
            range_value=window.range_value,
            store=criteria.store,
            employee=criteria.employee,
            attendance_status=criteria.attendance_status,
            sales_status=criteria.sales_status_label,
            time_from=criteria.time_from,
            time_to=criteria.time_to,
            range_start=window.current.start,
            range_end=window.current.end,
            time_zone=self.time_zone,
        )

        return Metrics(
            filters=applied,
            period=window,
            attendance=AttendanceSummary(
                total=current.attendance_total,
                check_ins=current.check_ins,
                check_outs=current.check_outs,
                unique_employees=len({record.employee_id for record in current_attendance}),
            ),
            sales=SalesSummary(
                total_revenue=current.sales_total,
                total_quantity=current.sales_quantity,
                transactions=current.transaction_count,
                average_ticket=current.average_ticket,
            ),
            kpis=kpis,
            alerts=self.alert_evaluator.evaluate(kpis),
            timeline=timeline,
            segments=segments,
            available_statuses=statuses,
            heatmaps=build_heatmaps(current_attendance, current_sales, window.current),
            correlation=timeline_correlation(timeline),
            generated_at=self.clock.now(),
        )

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def compute_snapshot(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
        directory: Directory | None = None,
        product_count: int = 0,
        window: PeriodWindow | None = None,
    ) -> Snapshot:
        """Compute the unfiltered first-paint Snapshot.

        Args:
            attendance: Attendance covering the snapshot window and trend.
            sales: Sales covering the snapshot window and trend.
            directory: Employee/store directory (sizes feed the totals).
            product_count: Number of catalog products.
            window: Pre-resolved snapshot window.

        Returns:
            Snapshot for the current snapshot-mode period.
        """
        directory = directory or Directory()
        window = window or self.snapshot_window()
        filterer = RecordFilterer()

        current_attendance = filterer.filter_attendance(attendance, window.current)
        current_sales = filterer.filter_sales(sales, window.current)
        kpis = self.kpi_calculator.compute(
            current_attendance,
            current_sales,
            filterer.filter_attendance(attendance, window.previous),
            filterer.filter_sales(sales, window.previous),
        )
        totals = self.kpi_calculator.totals(current_attendance, current_sales)

        trend_period = self.trend_period()
        trend = fill_daily_gaps(
            self.timeline_aggregator.build(
                filterer.filter_attendance(attendance, trend_period),
                filterer.filter_sales(sales, trend_period),
                trend_period,
            ),
            trend_period.first_day(),
            self.trend_days,
        )

        return Snapshot(
            totals=SnapshotTotals(
                employees=len(directory.employees),
                stores=len(directory.stores),
                products=product_count,
                attendance_records=totals.attendance_total,
                sales_records=totals.transaction_count,
            ),
            period=window,
            kpis=kpis,
            alerts=self.alert_evaluator.evaluate(kpis),
            attendance=SnapshotAttendance(
                check_ins=totals.check_ins,
                active_employees=totals.active_employees,
            ),
            sales=SnapshotSales(
                daily_trend=trend,
                top_products=rank_products(current_sales)[: self.top_products],
                total_revenue=totals.sales_total,
                total_quantity=totals.sales_quantity,
            ),
            generated_at=self.clock.now(),
            time_zone=self.time_zone,
        )
