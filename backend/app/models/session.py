"""Session model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base

if TYPE_CHECKING:
    from backend.app.models.transcript import TranscriptSegment
    from backend.app.models.report import SessionReport


class Session(Base):
    """
    Session model representing one recorded sales call.

    Attributes:
        id: Unique session identifier (UUID)
        owner_id: ID of the user who owns the recording
        title: Session title
        session_type: Kind of call (discovery, demo, negotiation, ...)
        started_at: Call start timestamp
        ended_at: Call end timestamp (nullable while recording)
        created_at: Creation timestamp
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        index=True,
    )
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    session_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )
    ended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    # Relationships
    transcript_segments: Mapped[list["TranscriptSegment"]] = relationship(
        "TranscriptSegment",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="TranscriptSegment.position",
    )
    reports: Mapped[list["SessionReport"]] = relationship(
        "SessionReport",
        back_populates="session",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Session(id={self.id}, title={self.title}, owner_id={self.owner_id})>"
