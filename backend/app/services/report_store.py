"""
Database access for report generation.

The stores wrap an ``AsyncSession``. Generation record transitions are
conditional UPDATE statements whose WHERE clause lists the states the
transition may start from, so concurrent requests cannot both win the same
transition; each transition commits immediately.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import GenerationInProgressError, InvalidTransitionError
from backend.app.models.report import SessionReport
from backend.app.models.session import Session
from backend.app.models.transcript import TranscriptSegment
from backend.app.services.report_state import ALLOWED_TRANSITIONS, GenerationStatus, check_transition

logger = logging.getLogger(__name__)


class SessionStore:
    """Read access to recorded call sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, session_id: str, owner_id: str) -> Session | None:
        result = await self.db.execute(
            select(Session).where(Session.id == session_id, Session.owner_id == owner_id)
        )
        return result.scalar_one_or_none()


class TranscriptStore:
    """Read access to transcript segments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_session_id(self, session_id: str, owner_id: str) -> list[TranscriptSegment]:
        """Segments of an owned session in call order (empty if none or not owned)."""
        result = await self.db.execute(
            select(TranscriptSegment)
            .join(Session, Session.id == TranscriptSegment.session_id)
            .where(TranscriptSegment.session_id == session_id, Session.owner_id == owner_id)
            .order_by(TranscriptSegment.position)
        )
        return list(result.scalars().all())


class ReportRecordStore:
    """
    Generation records of one report kind.

    Args:
        db: Database session
        report_kind: Report kind the records belong to ("v3" or "tabs")
    """

    def __init__(self, db: AsyncSession, report_kind: str = "v3"):
        self.db = db
        self.report_kind = report_kind

    async def find_by_session_id(self, session_id: str) -> SessionReport | None:
        result = await self.db.execute(
            select(SessionReport)
            .where(SessionReport.session_id == session_id, SessionReport.report_kind == self.report_kind)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_queued(self, session_id: str) -> SessionReport:
        """
        Create a queued record unless one already exists.

        The composite primary key rejects a concurrent duplicate insert; the
        loser rolls back and returns the winner's record.
        """
        existing = await self.find_by_session_id(session_id)
        if existing is not None:
            return existing

        record = SessionReport(
            session_id=session_id,
            report_kind=self.report_kind,
            status=GenerationStatus.QUEUED.value,
            attempts=0,
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"[REPORT] Record for session {session_id} ({self.report_kind}) created concurrently")
            existing = await self.find_by_session_id(session_id)
            if existing is None:
                raise
            return existing

        logger.info(f"[REPORT] Queued {self.report_kind} report for session {session_id}")
        return record

    async def _transition(self, session_id: str, target: GenerationStatus, **values: Any) -> SessionReport:
        sources = [state.value for state, targets in ALLOWED_TRANSITIONS.items() if target in targets]
        result = await self.db.execute(
            update(SessionReport)
            .where(
                SessionReport.session_id == session_id,
                SessionReport.report_kind == self.report_kind,
                SessionReport.status.in_(sources),
            )
            .values(status=target.value, updated_at=datetime.utcnow(), **values)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            record = await self.find_by_session_id(session_id)
            current = record.status if record else None
            if target is GenerationStatus.RUNNING and current == GenerationStatus.RUNNING.value:
                raise GenerationInProgressError(session_id)
            if current is None:
                raise InvalidTransitionError(session_id, None, target.value)
            check_transition(session_id, current, target.value)
            # The record moved between the UPDATE and the read-back
            raise InvalidTransitionError(session_id, current, target.value)

        await self.db.commit()
        logger.info(f"[REPORT] Session {session_id} ({self.report_kind}) -> {target.value}")
        record = await self.find_by_session_id(session_id)
        if record is None:
            raise InvalidTransitionError(session_id, target.value, target.value)
        return record

    async def set_running(self, session_id: str) -> SessionReport:
        """queued|failed -> running; clears the previous error."""
        return await self._transition(session_id, GenerationStatus.RUNNING, last_error=None)

    async def increment_attempts(self, session_id: str) -> SessionReport:
        await self.db.execute(
            update(SessionReport)
            .where(SessionReport.session_id == session_id, SessionReport.report_kind == self.report_kind)
            .values(attempts=SessionReport.attempts + 1, updated_at=datetime.utcnow())
        )
        await self.db.commit()
        record = await self.find_by_session_id(session_id)
        if record is None:
            raise InvalidTransitionError(session_id, None, "increment_attempts")
        return record

    async def set_ready(self, session_id: str, report: dict[str, Any]) -> SessionReport:
        """running -> ready; persists the artifact and clears any error."""
        return await self._transition(session_id, GenerationStatus.READY, report_json=report, last_error=None)

    async def set_failed(self, session_id: str, message: str) -> SessionReport:
        """
        running -> failed; the previously persisted artifact is left as is.

        Uncommitted work from the failed step (e.g. an aborted ``set_ready``)
        is rolled back first.
        """
        await self.db.rollback()
        return await self._transition(session_id, GenerationStatus.FAILED, last_error=message)
