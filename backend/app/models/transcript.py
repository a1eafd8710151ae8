"""Transcript segment model."""

import uuid
from typing import TYPE_CHECKING
from sqlalchemy import String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base

if TYPE_CHECKING:
    from backend.app.models.session import Session


class TranscriptSegment(Base):
    """
    One utterance of a call transcript.

    Attributes:
        id: Unique segment identifier (UUID)
        session_id: Associated session ID
        position: Ordering of the segment within the call
        timestamp: Offset into the call as displayed ("00:03:12")
        speaker: Speaker label
        content: Utterance text
    """

    __tablename__ = "transcript_segments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    speaker: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    session: Mapped["Session"] = relationship("Session", back_populates="transcript_segments")

    def __repr__(self) -> str:
        return f"<TranscriptSegment(session_id={self.session_id}, position={self.position}, speaker={self.speaker})>"
