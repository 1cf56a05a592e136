"""SQLAlchemy models for the face authentication service."""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class IdentityRecord(Base):
    """Registered identity with its face embedding."""

    __tablename__ = "identities"

    # Integer key preserves registration order for tie-breaking
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Lower-cased name enforcing case-insensitive uniqueness"
    )
    role: Mapped[str] = mapped_column(String(100), nullable=False, default="Employee")
    face_descriptor: Mapped[List[float]] = mapped_column(
        JSON,
        nullable=False,
        comment="Face embedding produced by the client-side model"
    )
    profile_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_seen: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow
    )


class RecognitionLogRecord(Base):
    """Append-only log of authentication attempts."""

    __tablename__ = "recognition_logs"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("identities.id", ondelete="SET NULL"),
        nullable=True
    )
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        index=True
    )
