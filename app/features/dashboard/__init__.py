"""Dashboard module: period-over-period retail metrics.

Turns attendance and sales records into KPIs, alerts, a daily timeline
and store/employee/status leaderboards for a selected period.
"""

from app.features.dashboard.engine import DashboardEngine
from app.features.dashboard.routes import router
from app.features.dashboard.schemas import (
    DashboardFilters,
    Metrics,
    RangeMode,
    Snapshot,
)
from app.features.dashboard.service import DashboardService
from app.features.dashboard.sources import InMemoryRecordSource, SqlRecordSource

__all__ = [
    "DashboardEngine",
    "DashboardFilters",
    "DashboardService",
    "InMemoryRecordSource",
    "Metrics",
    "RangeMode",
    "Snapshot",
    "SqlRecordSource",
    "router",
]
