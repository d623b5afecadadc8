"""Database models package."""

from keeper.database.models.base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
