"""Call report generation API endpoints."""

import logging
from typing import Literal
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import InputNotFoundError, ReportNotFoundError
from backend.app.db.base import get_db
from backend.app.schemas.report import GenerationStatusResponse, ReportArtifact, TriggerResponse
from backend.app.services.report_generator import ReportService
from backend.app.services.report_markdown import render_report_markdown
from backend.app.services.report_state import GenerationStatus
from backend.app.services.report_store import ReportRecordStore, SessionStore

router = APIRouter(prefix="/sessions", tags=["reports"])
logger = logging.getLogger(__name__)

ReportKindParam = Literal["v3", "tabs"]


def get_report_service(request: Request) -> ReportService:
    """Report service created by the application lifespan."""
    return request.app.state.report_service


async def _owned_record(db: AsyncSession, session_id: str, owner_id: str, kind: str):
    session = await SessionStore(db).find_by_id(session_id, owner_id)
    if session is None:
        raise InputNotFoundError(session_id)
    record = await ReportRecordStore(db, kind).find_by_session_id(session_id)
    if record is None:
        raise ReportNotFoundError(session_id, kind)
    return session, record


@router.get("/{session_id}/report", response_model=GenerationStatusResponse)
async def get_report_status(
    session_id: str,
    kind: ReportKindParam = Query(default="v3", description="Report kind"),
    owner_id: str = Header(..., alias="X-Owner-Id"),
    db: AsyncSession = Depends(get_db),
) -> GenerationStatusResponse:
    """Get generation status (and the report once ready) for a session."""
    _, record = await _owned_record(db, session_id, owner_id, kind)
    return GenerationStatusResponse(
        session_id=record.session_id,
        report_kind=record.report_kind,
        status=record.status,
        attempts=record.attempts,
        report=record.report_json,
        last_error=record.last_error,
        updated_at=record.updated_at,
    )


@router.post(
    "/{session_id}/report",
    response_model=TriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def trigger_report(
    session_id: str,
    kind: ReportKindParam = Query(default="v3", description="Report kind"),
    owner_id: str = Header(..., alias="X-Owner-Id"),
    db: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
) -> TriggerResponse:
    """
    Trigger report generation for a session.

    Idempotent: a running or ready report is acknowledged without new work.
    A failed report is generated again.
    """
    logger.info(f"[REPORT] Trigger {kind} report for session {session_id}")
    result = await service.orchestrator(db, kind).trigger_generate(session_id, owner_id)
    return TriggerResponse(accepted=result.accepted, status=result.status, error=result.error)


@router.get("/{session_id}/report/markdown")
async def download_markdown_report(
    session_id: str,
    owner_id: str = Header(..., alias="X-Owner-Id"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download the ready full report as a Markdown document."""
    session, record = await _owned_record(db, session_id, owner_id, "v3")
    if record.status != GenerationStatus.READY.value or record.report_json is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Report is not ready (status: {record.status})",
        )

    markdown_content = render_report_markdown(ReportArtifact.model_validate(record.report_json))

    filename_encoded = quote(f"report_{session.title}_{session_id}.md")
    return Response(
        content=markdown_content.encode("utf-8"),
        media_type="text/markdown; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{filename_encoded}",
        },
    )
