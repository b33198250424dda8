"""Data platform feature: ORM tables backing the dashboard record sources.

- Dimension tables: Employee, Store, Product
- Fact tables: AttendanceLog, Sale, SaleLine
"""

from app.features.data_platform.models import (
    AttendanceLog,
    Employee,
    Product,
    Sale,
    SaleLine,
    Store,
)

__all__ = [
    "AttendanceLog",
    "Employee",
    "Product",
    "Sale",
    "SaleLine",
    "Store",
]
