"""SQLAlchemy ORM model for the entries table."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


def _empty_genres() -> list[str]:
    """Fresh default list for the genres column."""
    return []


class EntryModel(Base, TimestampMixin):
    """ORM model for entries table.

    Note: user_id references users.external_id (not users.id) because the
    owner is always known by the identity provider's subject identifier.
    Rows are removed with their user (ON DELETE CASCADE).
    """

    __tablename__ = "entries"
    __table_args__ = (
        Index("ix_entries_user_id_updated_at", "user_id", "updated_at"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 5)",
            name="ck_entries_rating_range",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(
        String(32), nullable=False, server_default="Book"
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, server_default="Want to Read"
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    genres: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, insert_default=_empty_genres
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.external_id", ondelete="CASCADE"),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<EntryModel(id={self.id}, user_id={self.user_id}, title={self.title})>"
