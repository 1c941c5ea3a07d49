"""World file model: the durable unit of world truth."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aimud.database.models.base import Base, TimestampMixin


class WorldFile(Base, TimestampMixin):
    """A named text document holding part of the world state.

    Content and display name live in the same row so that a reset
    removes both in one statement.
    """

    __tablename__ = "world_files"

    name: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Case-sensitive filename, e.g. 'KingsGuard_1.txt'",
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Human-readable alias used by [Reference] links",
    )

    def __repr__(self) -> str:
        return f"<WorldFile {self.name} ({self.display_name or 'no alias'})>"
