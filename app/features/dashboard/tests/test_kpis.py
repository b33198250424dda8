"""Tests for KPI calculation."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

import pytest

from app.features.dashboard.kpis import KPICalculator, delta_percent
from app.features.dashboard.schemas import AttendanceRecord, AttendanceStatus, SalesRecord


class TestDeltaPercent:
    """Tests for percentage delta."""

    def test_zero_baseline_is_zero(self) -> None:
        """No baseline yields 0, never inf/NaN."""
        assert delta_percent(0, 0) == 0.0
        assert delta_percent(100, 0) == 0.0

    @pytest.mark.parametrize(
        ("value", "previous", "expected"),
        [
            (150, 100, 50.0),
            (50, 100, -50.0),
            (100, 100, 0.0),
            (1, 3, -66.7),
            (Decimal("100.05"), 100, 0.1),
            (Decimal("99.95"), 100, -0.1),
        ],
    )
    def test_known_values(self, value: Decimal | int, previous: int, expected: float) -> None:
        assert delta_percent(value, previous) == expected


class TestKPICalculator:
    """Tests for KPICalculator."""

    def test_totals(
        self,
        local_time: Callable[..., datetime],
        sale_factory: Callable[..., SalesRecord],
        attendance_factory: Callable[..., AttendanceRecord],
    ) -> None:
        sales = [
            sale_factory(local_time(2024, 3, 1), "100.00", quantity=1, transaction_id="T1"),
            sale_factory(local_time(2024, 3, 1), "50.00", quantity=2, transaction_id="T1"),
            sale_factory(local_time(2024, 3, 1), "150.00", quantity=3),
        ]
        attendance = [
            attendance_factory(local_time(2024, 3, 1, 8), employee_id="E1"),
            attendance_factory(local_time(2024, 3, 1, 9), employee_id="E2"),
            attendance_factory(local_time(2024, 3, 2, 8), employee_id="E1"),
            attendance_factory(
                local_time(2024, 3, 1, 17), employee_id="E3", status=AttendanceStatus.CHECK_OUT
            ),
        ]

        totals = KPICalculator().totals(attendance, sales)

        assert totals.sales_total == Decimal("300.00")
        assert totals.sales_quantity == 6
        assert totals.transaction_count == 3
        # T1 shared by two records, one record without an id
        assert totals.distinct_transactions == 2
        assert totals.average_ticket == Decimal("150.00")
        assert totals.attendance_total == 4
        assert totals.check_ins == 3
        assert totals.check_outs == 1
        assert totals.active_employees == 2

    def test_average_ticket_rounds_to_cents(
        self,
        local_time: Callable[..., datetime],
        sale_factory: Callable[..., SalesRecord],
    ) -> None:
        sales = [sale_factory(local_time(2024, 3, 1), "100.00") for _ in range(3)]

        totals = KPICalculator().totals([], sales)

        assert totals.average_ticket == Decimal("33.33")

    def test_empty_period(self) -> None:
        totals = KPICalculator().totals([], [])

        assert totals.sales_total == Decimal("0")
        assert totals.average_ticket == Decimal("0")
        assert totals.active_employees == 0

    def test_compute_against_previous(
        self,
        local_time: Callable[..., datetime],
        sale_factory: Callable[..., SalesRecord],
        attendance_factory: Callable[..., AttendanceRecord],
    ) -> None:
        current_sales = [sale_factory(local_time(2024, 3, 1), "150.00")]
        previous_sales = [sale_factory(local_time(2024, 2, 1), "100.00")]
        current_attendance = [attendance_factory(local_time(2024, 3, 1, 8))]
        previous_attendance = [
            attendance_factory(local_time(2024, 2, 1, 8)),
            attendance_factory(local_time(2024, 2, 2, 8)),
        ]

        kpis = KPICalculator().compute(
            current_attendance, current_sales, previous_attendance, previous_sales
        )

        assert kpis.sales.value == Decimal("150.00")
        assert kpis.sales.previous_value == Decimal("100.00")
        assert kpis.sales.delta_percent == 50.0
        assert kpis.attendance.value == 1
        assert kpis.attendance.delta_percent == -50.0
        assert kpis.transaction_count.delta_percent == 0.0
        assert kpis.active_employees.value == 1

    def test_compute_without_previous_data(
        self,
        local_time: Callable[..., datetime],
        sale_factory: Callable[..., SalesRecord],
    ) -> None:
        kpis = KPICalculator().compute([], [sale_factory(local_time(2024, 3, 1), "10.00")], [], [])

        assert kpis.sales.value == Decimal("10.00")
        assert kpis.sales.delta_percent == 0.0
