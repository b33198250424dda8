"""Tests for the dashboard service."""

from datetime import datetime
from decimal import Decimal

import pytest

from app.core.clock import FixedClock
from app.core.config import Settings
from app.core.exceptions import SourceUnavailableError
from app.features.dashboard.schemas import (
    AttendanceRecord,
    DashboardFilters,
    Directory,
    RangeMode,
    SalesRecord,
)
from app.features.dashboard.service import DashboardService
from app.features.dashboard.sources import InMemoryRecordSource


class UnavailableSource(InMemoryRecordSource):
    """Source whose sales backend is down."""

    async def fetch_sales(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[SalesRecord]:
        raise SourceUnavailableError("Could not read sales records", details={"source": "sales"})


class RecordingSource(InMemoryRecordSource):
    """Source that remembers the windows it was asked for."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[datetime, datetime, str | None, str | None]] = []

    async def fetch_attendance(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[AttendanceRecord]:
        self.calls.append((start, end, store, employee))
        return await super().fetch_attendance(start, end, store, employee)


@pytest.fixture
def settings() -> Settings:
    return Settings(dashboard_time_zone="Asia/Bangkok")


class TestDashboardService:
    """Tests for DashboardService."""

    async def test_compute_metrics(
        self,
        memory_source: InMemoryRecordSource,
        fixed_clock: FixedClock,
        settings: Settings,
    ) -> None:
        service = DashboardService(memory_source, fixed_clock, settings=settings)

        metrics = await service.compute_metrics(DashboardFilters())

        assert metrics.sales.total_revenue == Decimal("1000.00")
        assert metrics.kpis.sales.previous_value == Decimal("400.00")
        assert "refunded" in metrics.available_statuses
        assert metrics.segments.by_employee[0].label == "Somchai"

    async def test_fetch_spans_both_periods(
        self,
        fixed_clock: FixedClock,
        settings: Settings,
    ) -> None:
        source = RecordingSource()
        service = DashboardService(source, fixed_clock, settings=settings)

        metrics = await service.compute_metrics(
            DashboardFilters(range_mode=RangeMode.DAY, range_value="2024-03-15", store=" S1 ")
        )

        start, end, store, employee = source.calls[0]
        assert start == metrics.period.previous.start
        assert end == metrics.period.current.end
        assert store == "S1"
        assert employee is None

    async def test_compute_snapshot(
        self,
        memory_source: InMemoryRecordSource,
        fixed_clock: FixedClock,
        settings: Settings,
    ) -> None:
        service = DashboardService(memory_source, fixed_clock, settings=settings)

        snapshot = await service.compute_snapshot()

        assert snapshot.totals.products == 2
        assert snapshot.totals.employees == 3
        assert snapshot.sales.total_revenue == Decimal("500.00")

    async def test_source_failure_propagates(
        self,
        fixed_clock: FixedClock,
        settings: Settings,
    ) -> None:
        service = DashboardService(UnavailableSource(directory=Directory()), fixed_clock, settings)

        with pytest.raises(SourceUnavailableError):
            await service.compute_metrics(DashboardFilters())
        with pytest.raises(SourceUnavailableError):
            await service.compute_snapshot()
