"""Tests for alert evaluation."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.features.dashboard.alerts import (
    FEWER_CHECK_INS,
    POSSIBLE_DATA_ANOMALY,
    SALES_DOWN_SHARPLY,
    AlertEvaluator,
    AlertThresholds,
)
from app.features.dashboard.kpis import KPICalculator
from app.features.dashboard.schemas import KPISet


def make_kpis(
    sales: tuple[int, int] = (100, 100),
    attendance: tuple[int, int] = (10, 10),
    average_ticket: tuple[int, int] = (50, 50),
    transaction_count: tuple[int, int] = (2, 2),
) -> KPISet:
    kpi = KPICalculator.kpi
    return KPISet(
        sales=kpi(*sales),
        attendance=kpi(*attendance),
        average_ticket=kpi(*average_ticket),
        transaction_count=kpi(*transaction_count),
        active_employees=kpi(5, 5),
    )


class TestAlertEvaluator:
    """Tests for AlertEvaluator.evaluate."""

    def test_steady_state_has_no_alerts(self) -> None:
        assert AlertEvaluator().evaluate(make_kpis()) == []

    def test_sales_drop(self) -> None:
        alerts = AlertEvaluator().evaluate(make_kpis(sales=(75, 100)))
        assert alerts == [SALES_DOWN_SHARPLY]

    def test_threshold_is_inclusive(self) -> None:
        alerts = AlertEvaluator().evaluate(make_kpis(sales=(80, 100)))
        assert alerts == [SALES_DOWN_SHARPLY]

    def test_small_drop_does_not_fire(self) -> None:
        assert AlertEvaluator().evaluate(make_kpis(sales=(81, 100))) == []

    def test_fewer_check_ins(self) -> None:
        alerts = AlertEvaluator().evaluate(make_kpis(attendance=(5, 10)))
        assert alerts == [FEWER_CHECK_INS]

    def test_ticket_spike_without_more_transactions(self) -> None:
        alerts = AlertEvaluator().evaluate(make_kpis(average_ticket=(80, 50)))
        assert alerts == [POSSIBLE_DATA_ANOMALY]

    def test_ticket_spike_with_more_transactions(self) -> None:
        kpis = make_kpis(average_ticket=(80, 50), transaction_count=(3, 2))
        assert AlertEvaluator().evaluate(kpis) == []

    def test_no_baseline_never_alerts(self) -> None:
        kpis = make_kpis(sales=(0, 0), attendance=(0, 0), average_ticket=(100, 0))
        assert AlertEvaluator().evaluate(kpis) == []

    def test_alerts_are_ordered(self) -> None:
        kpis = make_kpis(sales=(50, 100), attendance=(1, 10), average_ticket=(100, 50))
        assert AlertEvaluator().evaluate(kpis) == [
            SALES_DOWN_SHARPLY,
            FEWER_CHECK_INS,
            POSSIBLE_DATA_ANOMALY,
        ]

    def test_custom_thresholds(self) -> None:
        evaluator = AlertEvaluator(AlertThresholds(sales_drop_percent=-5.0))
        assert evaluator.evaluate(make_kpis(sales=(90, 100))) == [SALES_DOWN_SHARPLY]


class TestAlertThresholds:
    """Tests for threshold configuration."""

    def test_from_settings(self) -> None:
        settings = Settings(
            alert_sales_drop_percent=-10.0,
            alert_attendance_drop_percent=-30.0,
            alert_ticket_spike_percent=25.0,
        )

        thresholds = AlertThresholds.from_settings(settings)

        assert thresholds.sales_drop_percent == -10.0
        assert thresholds.attendance_drop_percent == -30.0
        assert thresholds.ticket_spike_percent == 25.0

    def test_drop_threshold_must_not_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AlertThresholds(sales_drop_percent=10.0)
