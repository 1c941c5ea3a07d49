"""Database models package."""

from aimud.database.models.base import Base, TimestampMixin
from aimud.database.models.world_file import WorldFile

__all__ = [
    "Base",
    "TimestampMixin",
    "WorldFile",
]
