"""Core infrastructure: config, clock, database, logging, middleware, exceptions."""

from app.core.clock import Clock, FixedClock, SystemClock, get_clock
from app.core.config import Settings, get_settings
from app.core.database import Base, get_db
from app.core.logging import get_logger, request_id_ctx

__all__ = [
    "Base",
    "Clock",
    "FixedClock",
    "Settings",
    "SystemClock",
    "get_clock",
    "get_db",
    "get_logger",
    "get_settings",
    "request_id_ctx",
]
