"""Record sources feeding the dashboard engine.

A source returns complete record sets or raises SourceUnavailableError;
the engine never computes on partial data. Store/employee arguments are an
optional pushdown: the engine re-applies every filter regardless.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Protocol

from fastapi import Depends
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.exceptions import SourceUnavailableError
from app.core.logging import get_logger
from app.features.dashboard.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    Directory,
    DirectoryEntry,
    ProductLine,
    SalesRecord,
)
from app.features.data_platform.models import (
    AttendanceLog,
    Employee,
    Product,
    Sale,
    Store,
)

logger = get_logger(__name__)


class RecordSource(Protocol):
    """Read access to attendance, sales and directory data."""

    async def fetch_attendance(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[AttendanceRecord]:
        """Attendance records with start <= timestamp < end."""
        ...

    async def fetch_sales(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[SalesRecord]:
        """Sales records with start <= timestamp < end."""
        ...

    async def list_sales_statuses(self) -> list[str]:
        """Every distinct sales status label on record."""
        ...

    async def load_directory(self) -> Directory:
        """Employee and store directory."""
        ...

    async def count_products(self) -> int:
        """Number of catalog products."""
        ...


# =============================================================================
# In-memory source
# =============================================================================


class InMemoryRecordSource:
    """Record source over in-memory sequences (tests, demos, embedding).

    Attributes:
        attendance: All attendance records.
        sales: All sales records.
        directory: Employee/store directory.
        product_count: Value returned by count_products().
        statuses: Extra status labels merged into list_sales_statuses().
    """

    def __init__(
        self,
        attendance: Iterable[AttendanceRecord] = (),
        sales: Iterable[SalesRecord] = (),
        directory: Directory | None = None,
        product_count: int = 0,
        statuses: Iterable[str] = (),
    ) -> None:
        self.attendance = list(attendance)
        self.sales = list(sales)
        self.directory = directory or Directory()
        self.product_count = product_count
        self.statuses = list(statuses)

    @staticmethod
    def _matches(
        record: AttendanceRecord | SalesRecord,
        start: datetime,
        end: datetime,
        store: str | None,
        employee: str | None,
    ) -> bool:
        if not start <= record.timestamp < end:
            return False
        if store and record.store_id != store:
            return False
        return not (employee and record.employee_id != employee)

    async def fetch_attendance(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[AttendanceRecord]:
        return [r for r in self.attendance if self._matches(r, start, end, store, employee)]

    async def fetch_sales(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[SalesRecord]:
        return [r for r in self.sales if self._matches(r, start, end, store, employee)]

    async def list_sales_statuses(self) -> list[str]:
        return sorted({*self.statuses, *(sale.status for sale in self.sales)})

    async def load_directory(self) -> Directory:
        return self.directory

    async def count_products(self) -> int:
        return self.product_count


# =============================================================================
# SQLAlchemy source
# =============================================================================


def _attendance_from_row(row: AttendanceLog) -> AttendanceRecord:
    return AttendanceRecord(
        employee_id=row.employee_id,
        store_id=row.store_id,
        timestamp=row.recorded_at,
        status=AttendanceStatus(row.status),
    )


def _sale_from_row(row: Sale) -> SalesRecord:
    return SalesRecord(
        employee_id=row.employee_id,
        store_id=row.store_id,
        timestamp=row.recorded_at,
        status=row.status,
        total_amount=row.total_amount,
        quantity=row.quantity,
        transaction_id=row.transaction_id,
        product_lines=tuple(
            ProductLine(
                product_code=line.product_code,
                product_name=line.product_name,
                quantity=line.quantity,
                amount=line.amount,
            )
            for line in row.lines
        ),
    )


class SqlRecordSource:
    """Record source backed by the data platform tables.

    Queries run sequentially on the request's AsyncSession. Any
    SQLAlchemyError is logged and re-raised as SourceUnavailableError.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _scalars(self, stmt: Select[Any], source: str) -> Sequence[Any]:
        try:
            result = await self.db.execute(stmt)
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "dashboard.source_unavailable",
                source=source,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SourceUnavailableError(
                f"Could not read {source} records",
                details={"source": source},
            ) from e

    async def fetch_attendance(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[AttendanceRecord]:
        stmt = select(AttendanceLog).where(
            AttendanceLog.recorded_at >= start,
            AttendanceLog.recorded_at < end,
        )
        if store:
            stmt = stmt.where(AttendanceLog.store_id == store)
        if employee:
            stmt = stmt.where(AttendanceLog.employee_id == employee)
        stmt = stmt.order_by(AttendanceLog.recorded_at, AttendanceLog.id)

        rows = await self._scalars(stmt, source="attendance")
        return [_attendance_from_row(row) for row in rows]

    async def fetch_sales(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[SalesRecord]:
        stmt = (
            select(Sale)
            .options(selectinload(Sale.lines))
            .where(Sale.recorded_at >= start, Sale.recorded_at < end)
        )
        if store:
            stmt = stmt.where(Sale.store_id == store)
        if employee:
            stmt = stmt.where(Sale.employee_id == employee)
        stmt = stmt.order_by(Sale.recorded_at, Sale.id)

        rows = await self._scalars(stmt, source="sales")
        return [_sale_from_row(row) for row in rows]

    async def list_sales_statuses(self) -> list[str]:
        stmt = select(Sale.status).distinct().order_by(Sale.status)
        rows = await self._scalars(stmt, source="sales_statuses")
        return [status for status in rows if status]

    async def load_directory(self) -> Directory:
        employees = await self._scalars(select(Employee), source="employees")
        stores = await self._scalars(select(Store), source="stores")
        return Directory.from_entries(
            employees=(DirectoryEntry.model_validate(row) for row in employees),
            stores=(DirectoryEntry.model_validate(row) for row in stores),
        )

    async def count_products(self) -> int:
        stmt = select(func.count()).select_from(Product)
        rows = await self._scalars(stmt, source="products")
        return int(rows[0]) if rows else 0


async def get_record_source(db: AsyncSession = Depends(get_db)) -> RecordSource:
    """FastAPI dependency returning the database-backed record source."""
    return SqlRecordSource(db)
