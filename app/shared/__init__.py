"""Shared model mixins used by the data platform tables."""

from app.shared.models import TimestampMixin

__all__ = ["TimestampMixin"]
