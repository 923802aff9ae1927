"""SQLAlchemy ORM model for the locally persisted assessment state."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow_str() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class Base(DeclarativeBase):
    pass


class StateBlobRow(Base):
    """One independently stored part of the assessment (items, weights or context)."""

    __tablename__ = "assessment_state"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    data_json: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[str] = mapped_column(
        Text, nullable=False, default=_utcnow_str, onupdate=_utcnow_str
    )
