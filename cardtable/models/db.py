"""
SQLAlchemy ORM models for persistent storage.

Only per-user table preferences are owned by this service; cards, users and
collections live in the card catalog database.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserTablePreferenceDB(Base):
    """
    A user's column preferences for one table.

    One row per (user, table). visible_columns holds column ids in render
    order; column_order is reserved for drag-and-drop ordering.
    """

    __tablename__ = "user_table_preferences"
    __table_args__ = (UniqueConstraint("user_id", "table_name", name="uq_user_table_preferences"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    table_name: Mapped[str] = mapped_column(String(100))
    visible_columns: Mapped[list[str]] = mapped_column(JSON, default=list)
    column_order: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<UserTablePreferenceDB(user_id={self.user_id}, table={self.table_name})>"
