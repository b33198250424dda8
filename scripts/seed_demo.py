#!/usr/bin/env python
"""Seed synthetic attendance and sales data for the dashboard.

Usage:
    # Generate 60 days of data ending today
    uv run python scripts/seed_demo.py --seed 42 --days 60 --confirm

    # Delete all attendance/sales/directory rows
    uv run python scripts/seed_demo.py --delete --confirm
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import numpy as np
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.logging import configure_logging, get_logger
from app.features.data_platform.models import (
    AttendanceLog,
    Employee,
    Product,
    Sale,
    SaleLine,
    Store,
)

logger = get_logger(__name__)

PRODUCTS = [
    ("P001", "Shampoo 400ml", Decimal("159.00")),
    ("P002", "Conditioner 400ml", Decimal("169.00")),
    ("P003", "Body Wash 500ml", Decimal("129.00")),
    ("P004", "Toothpaste 160g", Decimal("59.00")),
    ("P005", "Facial Foam 100g", Decimal("99.00")),
    ("P006", "Sunscreen SPF50", Decimal("329.00")),
]
STATUSES = ["completed", "completed", "completed", "pending", "refunded"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default 42)")
    parser.add_argument("--days", type=int, default=60, help="Days of history (default 60)")
    parser.add_argument("--stores", type=int, default=4, help="Number of stores (default 4)")
    parser.add_argument(
        "--employees", type=int, default=12, help="Number of employees (default 12)"
    )
    parser.add_argument("--delete", action="store_true", help="Delete all seeded rows")
    parser.add_argument("--confirm", action="store_true", help="Required to write changes")
    return parser.parse_args(argv)


async def delete_all(session: AsyncSession) -> None:
    """Remove every row the seeder writes."""
    for model in (SaleLine, Sale, AttendanceLog, Product, Employee, Store):
        await session.execute(delete(model))


async def seed(session: AsyncSession, args: argparse.Namespace, zone: ZoneInfo) -> dict[str, int]:
    """Insert directory rows plus daily attendance and sales.

    Each employee works at one home store, checks in most days between
    07:30 and 09:30 local time and records a handful of sales per shift.
    """
    rng = np.random.default_rng(args.seed)

    stores = [Store(id=f"S{i + 1:02d}", name=f"Store {i + 1:02d}") for i in range(args.stores)]
    employees = [
        Employee(id=f"E{i + 1:03d}", name=f"Employee {i + 1:03d}") for i in range(args.employees)
    ]
    products = [Product(id=code, code=code, name=name) for code, name, _ in PRODUCTS]
    session.add_all([*stores, *employees, *products])

    home_store = {e.id: stores[i % len(stores)].id for i, e in enumerate(employees)}
    today = datetime.now(zone).replace(hour=0, minute=0, second=0, microsecond=0)
    counts = {"attendance": 0, "sales": 0}

    for offset in range(args.days, -1, -1):
        day = today - timedelta(days=offset)
        for employee in employees:
            if rng.random() < 0.15:
                continue
            store_id = home_store[employee.id]
            check_in = day + timedelta(minutes=int(rng.integers(450, 570)))
            check_out = check_in + timedelta(hours=int(rng.integers(7, 10)))
            session.add_all(
                [
                    AttendanceLog(
                        employee_id=employee.id,
                        store_id=store_id,
                        recorded_at=check_in,
                        status="check-in",
                    ),
                    AttendanceLog(
                        employee_id=employee.id,
                        store_id=store_id,
                        recorded_at=check_out,
                        status="check-out",
                    ),
                ]
            )
            counts["attendance"] += 2

            for ticket in range(int(rng.poisson(4))):
                minutes = int(rng.integers(0, int((check_out - check_in).total_seconds() // 60)))
                lines = []
                picks = rng.choice(len(PRODUCTS), size=int(rng.integers(1, 4)), replace=False)
                for index in picks:
                    code, name, price = PRODUCTS[int(index)]
                    quantity = int(rng.integers(1, 4))
                    lines.append(
                        SaleLine(
                            product_code=code,
                            product_name=name,
                            quantity=quantity,
                            amount=price * quantity,
                        )
                    )
                session.add(
                    Sale(
                        transaction_id=f"{employee.id}-{day:%Y%m%d}-{ticket}",
                        employee_id=employee.id,
                        store_id=store_id,
                        recorded_at=check_in + timedelta(minutes=minutes),
                        status=STATUSES[int(rng.integers(0, len(STATUSES)))],
                        total_amount=sum((line.amount for line in lines), Decimal("0")),
                        quantity=sum(line.quantity for line in lines),
                        lines=lines,
                    )
                )
                counts["sales"] += 1

    return counts


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    engine = create_async_engine(settings.database_url)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with session_maker() as session:
            if args.delete:
                await delete_all(session)
                logger.info("seed.deleted")
            else:
                counts = await seed(session, args, ZoneInfo(settings.dashboard_time_zone))
                logger.info("seed.completed", seed=args.seed, days=args.days, **counts)
            await session.commit()
    finally:
        await engine.dispose()
    return 0


def main() -> None:
    args = parse_args()
    configure_logging()
    if not args.confirm:
        print("Refusing to write without --confirm")
        sys.exit(2)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
