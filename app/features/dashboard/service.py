"""Service layer for dashboard operations.

Fetches records from a RecordSource and hands them to the synchronous
DashboardEngine. Awaits run one after another because the SQL source
shares a single session per request.
"""

import time

from app.core.clock import Clock
from app.core.config import Settings, get_settings
from app.core.logging import get_logger
from app.features.dashboard.engine import DashboardEngine
from app.features.dashboard.filtering import FilterCriteria
from app.features.dashboard.schemas import DashboardFilters, Metrics, Snapshot
from app.features.dashboard.sources import RecordSource

logger = get_logger(__name__)


class DashboardService:
    """Compute dashboard payloads from a record source.

    Attributes:
        source: Attendance/sales/directory source.
        engine: Engine configured from settings and the injected clock.
    """

    def __init__(
        self,
        source: RecordSource,
        clock: Clock,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.source = source
        self.engine = DashboardEngine.from_settings(self.settings, clock)

    async def compute_metrics(self, filters: DashboardFilters) -> Metrics:
        """Compute filter-driven metrics.

        Args:
            filters: Dashboard filters from the request.

        Returns:
            Metrics for the resolved period.

        Raises:
            SourceUnavailableError: If any record source fails.
        """
        started = time.perf_counter()
        window = self.engine.resolve_window(filters)
        criteria = FilterCriteria.from_filters(filters)

        attendance = await self.source.fetch_attendance(
            window.previous.start,
            window.current.end,
            store=criteria.store,
            employee=criteria.employee,
        )
        sales = await self.source.fetch_sales(
            window.previous.start,
            window.current.end,
            store=criteria.store,
            employee=criteria.employee,
        )
        statuses = await self.source.list_sales_statuses()
        directory = await self.source.load_directory()

        metrics = self.engine.compute_metrics(
            filters,
            attendance,
            sales,
            directory=directory,
            known_statuses=statuses,
            window=window,
        )

        logger.info(
            "dashboard.metrics_computed",
            range_mode=metrics.filters.range_mode.value,
            range_value=metrics.filters.range_value,
            defaulted=window.defaulted,
            attendance_records=metrics.attendance.total,
            sales_records=metrics.sales.transactions,
            alerts=len(metrics.alerts),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return metrics

    async def compute_snapshot(self) -> Snapshot:
        """Compute the unfiltered first-paint snapshot.

        Raises:
            SourceUnavailableError: If any record source fails.
        """
        started = time.perf_counter()
        window = self.engine.snapshot_window()
        trend = self.engine.trend_period()
        start = min(window.previous.start, trend.start)
        end = max(window.current.end, trend.end)

        attendance = await self.source.fetch_attendance(start, end)
        sales = await self.source.fetch_sales(start, end)
        directory = await self.source.load_directory()
        product_count = await self.source.count_products()

        snapshot = self.engine.compute_snapshot(
            attendance,
            sales,
            directory=directory,
            product_count=product_count,
            window=window,
        )

        logger.info(
            "dashboard.snapshot_computed",
            range_value=window.range_value,
            attendance_records=snapshot.totals.attendance_records,
            sales_records=snapshot.totals.sales_records,
            alerts=len(snapshot.alerts),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return snapshot
