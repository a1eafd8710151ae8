"""Report model for storing generated reports."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base

if TYPE_CHECKING:
    from backend.app.models.session import Session


class SessionReport(Base):
    """
    Generation record for one report kind of one session.

    The composite primary key (session_id, report_kind) is the storage-level
    guard against duplicate records under concurrent triggers.
    """

    __tablename__ = "session_reports"

    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    report_kind: Mapped[str] = mapped_column(String(20), primary_key=True, default="v3")

    # Generation status
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="queued")  # queued, running, ready, failed
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Report data (JSON)
    report_json: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    session: Mapped["Session"] = relationship("Session", back_populates="reports")

    def __repr__(self) -> str:
        return (
            f"<SessionReport(session_id={self.session_id}, kind={self.report_kind}, "
            f"status={self.status}, attempts={self.attempts})>"
        )
