"""Test fixtures for dashboard module.

The fixed clock sits at 2024-03-15 12:00 Asia/Bangkok (a Friday), so the
default month is March 2024 and the default week starts Monday 2024-03-11.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.clock import FixedClock, get_clock
from app.features.dashboard.engine import DashboardEngine
from app.features.dashboard.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    Directory,
    DirectoryEntry,
    ProductLine,
    SalesRecord,
)
from app.features.dashboard.sources import InMemoryRecordSource, get_record_source
from app.main import app

TIME_ZONE = "Asia/Bangkok"
BANGKOK = ZoneInfo(TIME_ZONE)


def local(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Aware datetime in Asia/Bangkok."""
    return datetime(year, month, day, hour, minute, tzinfo=BANGKOK)


def make_sale(
    timestamp: datetime,
    amount: str,
    *,
    employee_id: str = "E1",
    store_id: str = "S1",
    status: str = "completed",
    quantity: int = 1,
    transaction_id: str | None = None,
    product_lines: tuple[ProductLine, ...] = (),
) -> SalesRecord:
    """Build a SalesRecord with sensible defaults."""
    return SalesRecord(
        employee_id=employee_id,
        store_id=store_id,
        timestamp=timestamp,
        status=status,
        total_amount=Decimal(amount),
        quantity=quantity,
        transaction_id=transaction_id,
        product_lines=product_lines,
    )


def make_attendance(
    timestamp: datetime,
    *,
    employee_id: str = "E1",
    store_id: str = "S1",
    status: AttendanceStatus = AttendanceStatus.CHECK_IN,
) -> AttendanceRecord:
    """Build an AttendanceRecord with sensible defaults."""
    return AttendanceRecord(
        employee_id=employee_id,
        store_id=store_id,
        timestamp=timestamp,
        status=status,
    )


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock frozen at 2024-03-15 12:00 Bangkok time."""
    return FixedClock(local(2024, 3, 15, 12, 0))


@pytest.fixture
def engine(fixed_clock: FixedClock) -> DashboardEngine:
    """Engine with default modes (month for metrics, week for snapshot)."""
    return DashboardEngine(TIME_ZONE, fixed_clock)


@pytest.fixture
def directory() -> Directory:
    """Two stores and three employees; E9/S9 are intentionally missing."""
    return Directory.from_entries(
        employees=[
            DirectoryEntry(id="E1", name="Somchai"),
            DirectoryEntry(id="E2", name="Anong"),
            DirectoryEntry(id="E3", name="Boon"),
        ],
        stores=[
            DirectoryEntry(id="S1", name="Central World", province="Bangkok"),
            DirectoryEntry(id="S2", name="Siam Paragon", province="Bangkok"),
        ],
    )


@pytest.fixture
def sale_factory() -> Callable[..., SalesRecord]:
    """Expose make_sale as a fixture."""
    return make_sale


@pytest.fixture
def attendance_factory() -> Callable[..., AttendanceRecord]:
    """Expose make_attendance as a fixture."""
    return make_attendance


@pytest.fixture
def local_time() -> Callable[..., datetime]:
    """Expose local() as a fixture."""
    return local


@pytest.fixture
def march_sales() -> list[SalesRecord]:
    """Sales across March 2024 (current) and February 2024 (previous)."""
    shampoo = ProductLine(
        product_code="P1", product_name="Shampoo", quantity=2, amount=Decimal("200")
    )
    soap = ProductLine(product_code="P2", product_name="Soap", quantity=1, amount=Decimal("50"))
    return [
        make_sale(
            local(2024, 3, 1, 10),
            "300.00",
            transaction_id="T1",
            quantity=3,
            product_lines=(shampoo,),
        ),
        make_sale(
            local(2024, 3, 1, 15),
            "200.00",
            employee_id="E2",
            store_id="S2",
            transaction_id="T2",
            quantity=2,
            product_lines=(soap,),
        ),
        make_sale(
            local(2024, 3, 14, 18, 30),
            "500.00",
            status="Pending",
            transaction_id="T3",
            quantity=5,
            product_lines=(shampoo, soap),
        ),
        make_sale(local(2024, 2, 20, 11), "400.00", transaction_id="T0", quantity=4),
    ]


@pytest.fixture
def march_attendance() -> list[AttendanceRecord]:
    """Attendance across March 2024 and February 2024."""
    return [
        make_attendance(local(2024, 3, 1, 8)),
        make_attendance(local(2024, 3, 1, 17), status=AttendanceStatus.CHECK_OUT),
        make_attendance(local(2024, 3, 1, 9), employee_id="E2", store_id="S2"),
        make_attendance(local(2024, 3, 2, 8)),
        make_attendance(local(2024, 2, 20, 8)),
    ]


@pytest.fixture
def memory_source(
    march_attendance: list[AttendanceRecord],
    march_sales: list[SalesRecord],
    directory: Directory,
) -> InMemoryRecordSource:
    """In-memory source over the March fixtures."""
    return InMemoryRecordSource(
        attendance=march_attendance,
        sales=march_sales,
        directory=directory,
        product_count=2,
        statuses=["refunded"],
    )


@pytest.fixture
async def client(
    memory_source: InMemoryRecordSource,
    fixed_clock: FixedClock,
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the record source and clock overridden."""
    app.dependency_overrides[get_record_source] = lambda: memory_source
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
