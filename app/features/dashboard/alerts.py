"""Qualitative alerts derived from KPI deltas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import Settings
from app.features.dashboard.schemas import KPI, KPISet

SALES_DOWN_SHARPLY = "sales down sharply"
FEWER_CHECK_INS = "fewer check-ins than previous period"
POSSIBLE_DATA_ANOMALY = "possible data anomaly"


class AlertThresholds(BaseModel):
    """Percent-delta thresholds for each alert rule.

    Attributes:
        sales_drop_percent: Sales delta at or below this fires a sales alert.
        attendance_drop_percent: Check-in delta at or below this fires an alert.
        ticket_spike_percent: Average-ticket delta at or above this, without a
            rise in transaction count, fires an anomaly alert.
    """

    model_config = ConfigDict(frozen=True)

    sales_drop_percent: float = Field(default=-20.0, le=0)
    attendance_drop_percent: float = Field(default=-20.0, le=0)
    ticket_spike_percent: float = Field(default=50.0, ge=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> AlertThresholds:
        """Thresholds from application settings."""
        return cls(
            sales_drop_percent=settings.alert_sales_drop_percent,
            attendance_drop_percent=settings.alert_attendance_drop_percent,
            ticket_spike_percent=settings.alert_ticket_spike_percent,
        )


def _has_baseline(kpi: KPI) -> bool:
    return kpi.previous_value != 0


class AlertEvaluator:
    """Turn KPI deltas into an ordered list of alert strings."""

    def __init__(self, thresholds: AlertThresholds | None = None) -> None:
        self.thresholds = thresholds or AlertThresholds()

    def evaluate(self, kpis: KPISet) -> list[str]:
        """Evaluate all rules in a fixed order.

        A rule never fires when its metric has no previous-period baseline.

        Args:
            kpis: Computed KPIs.

        Returns:
            Alert strings, empty when nothing triggers.
        """
        alerts: list[str] = []
        thresholds = self.thresholds

        if _has_baseline(kpis.sales) and kpis.sales.delta_percent <= thresholds.sales_drop_percent:
            alerts.append(SALES_DOWN_SHARPLY)

        if (
            _has_baseline(kpis.attendance)
            and kpis.attendance.delta_percent <= thresholds.attendance_drop_percent
        ):
            alerts.append(FEWER_CHECK_INS)

        if (
            _has_baseline(kpis.average_ticket)
            and kpis.average_ticket.delta_percent >= thresholds.ticket_spike_percent
            and kpis.transaction_count.delta_percent <= 0
        ):
            alerts.append(POSSIBLE_DATA_ANOMALY)

        return alerts
