"""Data platform ORM models for the retail operations store.

Dimensions: Employee, Store, Product (string ids issued by the admin UI).
Facts: AttendanceLog (one row per check-in/check-out), Sale with SaleLine
children (one Sale per submitted sales entry).

The dashboard only reads these tables; they are written by the capture
forms and the admin CRUD screens.
"""

import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import TimestampMixin

# ============================================================================
# DIMENSION TABLES
# ============================================================================


class Employee(TimestampMixin, Base):
    """Employee directory entry.

    Attributes:
        id: Primary key.
        name: Display name.
        province: Home province (optional).
        latitude: Home location latitude (optional).
        longitude: Home location longitude (optional).
    """

    __tablename__ = "employee"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    province: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)


class Store(TimestampMixin, Base):
    """Store directory entry.

    Attributes:
        id: Primary key.
        name: Display name.
        province: Province the store is located in.
        latitude: Store latitude (used by the attendance geofence).
        longitude: Store longitude.
    """

    __tablename__ = "store"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    province: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)


class Product(TimestampMixin, Base):
    """Product catalog entry."""

    __tablename__ = "product"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))


# ============================================================================
# FACT TABLES
# ============================================================================


class AttendanceLog(TimestampMixin, Base):
    """A single attendance event.

    Attributes:
        id: Surrogate key.
        employee_id: Employee who checked in/out.
        store_id: Store where the event was captured.
        recorded_at: Instant of the event (timezone-aware).
        status: 'check-in' or 'check-out'.
    """

    __tablename__ = "attendance_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(64), index=True)
    store_id: Mapped[str] = mapped_column(String(64), index=True)
    recorded_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(20))

    __table_args__ = (
        CheckConstraint(
            "status IN ('check-in', 'check-out')",
            name="ck_attendance_log_status",
        ),
        Index("ix_attendance_log_recorded_at", "recorded_at"),
    )


class Sale(TimestampMixin, Base):
    """A submitted sales entry.

    Attributes:
        id: Surrogate key.
        transaction_id: Receipt/transaction reference (optional).
        employee_id: Employee who entered the sale.
        store_id: Store the sale belongs to.
        recorded_at: Instant of the sale (timezone-aware).
        status: Free-text workflow label (e.g. 'completed').
        total_amount: Sum of line amounts.
        quantity: Sum of line quantities.
    """

    __tablename__ = "sale"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    transaction_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    employee_id: Mapped[str] = mapped_column(String(64), index=True)
    store_id: Mapped[str] = mapped_column(String(64), index=True)
    recorded_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(50), default="completed")
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    quantity: Mapped[int] = mapped_column(Integer)

    lines: Mapped[list["SaleLine"]] = relationship(
        back_populates="sale",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_sale_quantity_positive"),
        Index("ix_sale_recorded_at", "recorded_at"),
    )


class SaleLine(Base):
    """Per-product breakdown of a Sale."""

    __tablename__ = "sale_line"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sale.id", ondelete="CASCADE"), index=True)
    product_code: Mapped[str] = mapped_column(String(50))
    product_name: Mapped[str] = mapped_column(String(200))
    quantity: Mapped[int] = mapped_column(Integer)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    sale: Mapped[Sale] = relationship(back_populates="lines")
