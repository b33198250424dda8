"""KPI calculation across the current and previous periods.

CRITICAL: a zero baseline yields a delta of 0, not +inf/NaN. The dashboard
shows "0%" when there is nothing to compare against.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.features.dashboard.schemas import (
    KPI,
    AttendanceRecord,
    AttendanceStatus,
    KPISet,
    SalesRecord,
)

CENTS = Decimal("0.01")
ONE_DECIMAL = Decimal("0.1")


def delta_percent(value: Decimal | int, previous: Decimal | int) -> float:
    """Percentage change from previous to value, rounded to one decimal.

    Formula: (value - previous) / previous * 100

    Args:
        value: Current-period value.
        previous: Previous-period value.

    Returns:
        Delta in percent; 0.0 when previous is 0.
    """
    current = Decimal(value)
    baseline = Decimal(previous)
    if baseline == 0:
        return 0.0
    change = (current - baseline) / baseline * 100
    return float(change.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PeriodTotals:
    """Raw per-period figures the KPIs are derived from.

    Attributes:
        sales_total: Sum of total_amount.
        sales_quantity: Sum of units sold.
        transaction_count: Number of sales records.
        distinct_transactions: Distinct transaction ids (records without one
            count individually).
        average_ticket: sales_total / distinct_transactions, 0 if none.
        attendance_total: Number of attendance records.
        check_ins: Number of check-in records.
        check_outs: Number of check-out records.
        active_employees: Distinct employees with at least one check-in.
    """

    sales_total: Decimal
    sales_quantity: int
    transaction_count: int
    distinct_transactions: int
    average_ticket: Decimal
    attendance_total: int
    check_ins: int
    check_outs: int
    active_employees: int


class KPICalculator:
    """Compute per-period totals and current-vs-previous KPIs."""

    def totals(
        self,
        attendance: Sequence[AttendanceRecord],
        sales: Sequence[SalesRecord],
    ) -> PeriodTotals:
        """Aggregate one period's filtered records."""
        sales_total = sum((sale.total_amount for sale in sales), Decimal("0"))
        sales_quantity = sum(sale.quantity for sale in sales)

        transaction_keys: set[str] = set()
        for index, sale in enumerate(sales):
            transaction_keys.add(
                f"id:{sale.transaction_id}" if sale.transaction_id else f"row:{index}"
            )
        distinct_transactions = len(transaction_keys)
        average_ticket = (
            (sales_total / distinct_transactions).quantize(CENTS, rounding=ROUND_HALF_UP)
            if distinct_transactions > 0
            else Decimal("0")
        )

        check_ins = 0
        check_outs = 0
        employees: set[str] = set()
        for record in attendance:
            if record.status == AttendanceStatus.CHECK_IN:
                check_ins += 1
                employees.add(record.employee_id)
            else:
                check_outs += 1

        return PeriodTotals(
            sales_total=sales_total,
            sales_quantity=sales_quantity,
            transaction_count=len(sales),
            distinct_transactions=distinct_transactions,
            average_ticket=average_ticket,
            attendance_total=len(attendance),
            check_ins=check_ins,
            check_outs=check_outs,
            active_employees=len(employees),
        )

    @staticmethod
    def kpi(value: Decimal | int, previous: Decimal | int) -> KPI:
        """Build a single KPI with its delta."""
        return KPI(
            value=Decimal(value),
            previous_value=Decimal(previous),
            delta_percent=delta_percent(value, previous),
        )

    def compare(self, current: PeriodTotals, previous: PeriodTotals) -> KPISet:
        """KPIs from precomputed totals of both periods."""
        return KPISet(
            sales=self.kpi(current.sales_total, previous.sales_total),
            attendance=self.kpi(current.check_ins, previous.check_ins),
            average_ticket=self.kpi(current.average_ticket, previous.average_ticket),
            transaction_count=self.kpi(current.transaction_count, previous.transaction_count),
            active_employees=self.kpi(current.active_employees, previous.active_employees),
        )

    def compute(
        self,
        current_attendance: Sequence[AttendanceRecord],
        current_sales: Sequence[SalesRecord],
        previous_attendance: Sequence[AttendanceRecord],
        previous_sales: Sequence[SalesRecord],
    ) -> KPISet:
        """KPIs for the current period against the previous one.

        Args:
            current_attendance: Filtered attendance, current period.
            current_sales: Filtered sales, current period.
            previous_attendance: Filtered attendance, previous period.
            previous_sales: Filtered sales, previous period.

        Returns:
            One KPI per tracked metric.
        """
        return self.compare(
            self.totals(current_attendance, current_sales),
            self.totals(previous_attendance, previous_sales),
        )
