"""
Report generation orchestration.

One ``generate`` call runs the whole pipeline for a session: load inputs,
assemble prompts, call the generator with retries, parse, normalize,
validate and persist a terminal state. The generation record always ends
``ready`` (artifact stored) or ``failed`` (message stored).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import (
    CallReportException,
    GenerationInProgressError,
    InputNotFoundError,
    SchemaViolationError,
    UnparsableOutputError,
)
from backend.app.schemas.report import ReportArtifact, TabsReportArtifact
from backend.app.services.llm import ReportGeneratorClient, build_generator_client
from backend.app.services.report_contract import REPORT_CONTRACT, TABS_REPORT_CONTRACT, ObjectField, to_json_schema
from backend.app.services.report_normalizer import normalize_report, normalize_tabs_report
from backend.app.services.report_parser import parse_report_json
from backend.app.services.report_prompts import (
    assemble_user_prompt,
    build_system_prompt,
    build_tabs_system_prompt,
)
from backend.app.services.report_state import GenerationStatus
from backend.app.services.report_store import ReportRecordStore, SessionStore, TranscriptStore
from backend.app.services.report_validator import find_violations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportKind:
    """
    Everything that differs between report kinds.

    Attributes:
        name: Record kind key ("v3" or "tabs")
        contract: Contract the artifact must satisfy
        artifact_model: Typed artifact model
        system_prompt: System prompt builder
        normalize: Normalizer from parsed output to typed artifact
        schema_name: Name sent with the JSON schema
        requires_transcript: Whether an empty transcript is an input error
        session_id_field: Artifact field defaulted to the session ID
    """

    name: str
    contract: ObjectField
    artifact_model: type[BaseModel]
    system_prompt: Callable[[], str]
    normalize: Callable[[Any], BaseModel]
    schema_name: str
    requires_transcript: bool = False
    session_id_field: str | None = None

    def json_schema(self) -> dict[str, Any]:
        return to_json_schema(self.contract)


FULL_REPORT = ReportKind(
    name="v3",
    contract=REPORT_CONTRACT,
    artifact_model=ReportArtifact,
    system_prompt=build_system_prompt,
    normalize=normalize_report,
    schema_name="ReportDataV3",
    session_id_field="tp_sessionId",
)

TABS_REPORT = ReportKind(
    name="tabs",
    contract=TABS_REPORT_CONTRACT,
    artifact_model=TabsReportArtifact,
    system_prompt=build_tabs_system_prompt,
    normalize=normalize_tabs_report,
    schema_name="ReportV3Tabs",
    requires_transcript=True,
)

REPORT_KINDS: dict[str, ReportKind] = {kind.name: kind for kind in (FULL_REPORT, TABS_REPORT)}


@dataclass(frozen=True)
class TriggerResult:
    """Outcome of a trigger: ``accepted`` is False only when generation failed."""

    accepted: bool
    status: str | None = None
    error: str | None = None


class ReportOrchestrator:
    """
    Runs report generation for one report kind.

    Args:
        records: Generation record store
        sessions: Session store
        transcripts: Transcript store
        generator: Generator client
        kind: Report kind descriptor
    """

    def __init__(
        self,
        records: ReportRecordStore,
        sessions: SessionStore,
        transcripts: TranscriptStore,
        generator: ReportGeneratorClient,
        kind: ReportKind = FULL_REPORT,
    ):
        self.records = records
        self.sessions = sessions
        self.transcripts = transcripts
        self.generator = generator
        self.kind = kind

    async def generate(self, session_id: str, owner_id: str) -> BaseModel:
        """
        Generate (or return the existing) report for a session.

        Args:
            session_id: Session ID
            owner_id: Owner of the session

        Returns:
            The ready, typed report artifact

        Raises:
            InputNotFoundError: If the session (or required transcript) is missing
            GenerationInProgressError: If a generation is already running
            GeneratorUnavailableError: If every generator attempt failed
            UnparsableOutputError: If the output contained no JSON object
            SchemaViolationError: If the normalized report is still invalid
        """
        logger.info(f"[REPORT] Generate {self.kind.name} report for session {session_id}")

        # Checked before any record exists: an unknown or foreign session leaves no failed record
        if await self.sessions.find_by_id(session_id, owner_id) is None:
            raise InputNotFoundError(session_id)

        existing = await self.records.find_by_session_id(session_id)
        if existing is not None:
            if existing.status == GenerationStatus.READY.value and existing.report_json is not None:
                logger.info(f"[REPORT] Session {session_id} already has a ready {self.kind.name} report")
                return self.kind.artifact_model.model_validate(existing.report_json)
            if existing.status == GenerationStatus.RUNNING.value:
                raise GenerationInProgressError(session_id)
        else:
            await self.records.upsert_queued(session_id)

        await self.records.set_running(session_id)
        try:
            await self.records.increment_attempts(session_id)
            artifact = await self._run(session_id, owner_id)
            await self.records.set_ready(session_id, artifact.to_wire())
        except Exception as e:
            message = e.message if isinstance(e, CallReportException) else f"{type(e).__name__}: {e}"
            logger.error(f"[REPORT] Generation failed for session {session_id}: {message}")
            await self.records.set_failed(session_id, message)
            raise

        logger.info(f"[REPORT] Session {session_id} {self.kind.name} report ready")
        return artifact

    async def _run(self, session_id: str, owner_id: str) -> BaseModel:
        # Reloaded: a rollback during record setup expires earlier instances
        session = await self.sessions.find_by_id(session_id, owner_id)
        if session is None:
            raise InputNotFoundError(session_id)
        segments = await self.transcripts.find_by_session_id(session_id, owner_id)
        logger.info(f"[REPORT] Inputs for session {session_id}: {len(segments)} transcript segments")
        if self.kind.requires_transcript and not segments:
            raise InputNotFoundError(session_id, what="Transcript")

        raw = await self.generator.call(
            self.kind.system_prompt(),
            assemble_user_prompt(session, segments),
            self.kind.json_schema(),
            schema_name=self.kind.schema_name,
        )

        parsed = parse_report_json(raw)
        if parsed is None:
            raise UnparsableOutputError(raw if isinstance(raw, str) else None)

        field = self.kind.session_id_field
        if field and not parsed.get(field):
            parsed[field] = session_id

        artifact = self.kind.normalize(parsed)

        violations = find_violations(artifact.to_wire(), self.kind.contract)
        if violations:
            missing = [v.path for v in violations if v.is_missing]
            raise SchemaViolationError([str(v) for v in violations], missing=missing)
        return artifact

    async def trigger_generate(self, session_id: str, owner_id: str) -> TriggerResult:
        """
        Generate without raising.

        A running or ready record is acknowledged without starting new work.
        """
        if await self.sessions.find_by_id(session_id, owner_id) is None:
            return TriggerResult(accepted=False, error=InputNotFoundError(session_id).message)

        existing = await self.records.find_by_session_id(session_id)
        if existing is not None and existing.status in (
            GenerationStatus.RUNNING.value,
            GenerationStatus.READY.value,
        ):
            return TriggerResult(accepted=True, status=existing.status)

        try:
            await self.generate(session_id, owner_id)
        except GenerationInProgressError:
            return TriggerResult(accepted=True, status=GenerationStatus.RUNNING.value)
        except Exception as e:
            message = e.message if isinstance(e, CallReportException) else str(e)
            record = await self.records.find_by_session_id(session_id)
            return TriggerResult(accepted=False, status=record.status if record else None, error=message)
        return TriggerResult(accepted=True, status=GenerationStatus.READY.value)


class ReportService:
    """
    Application-scoped report service.

    Owns the generator client (and its connection pool) and builds
    orchestrators bound to a request's database session.
    """

    def __init__(self, generator: ReportGeneratorClient | None = None):
        self.generator = generator or build_generator_client()

    async def init(self) -> None:
        await self.generator.init()
        logger.info("[STARTUP] Report service initialized")

    async def dispose(self) -> None:
        await self.generator.dispose()
        logger.info("[SHUTDOWN] Report service disposed")

    def orchestrator(self, db: AsyncSession, kind: str = "v3") -> ReportOrchestrator:
        report_kind = REPORT_KINDS[kind]
        return ReportOrchestrator(
            records=ReportRecordStore(db, report_kind.name),
            sessions=SessionStore(db),
            transcripts=TranscriptStore(db),
            generator=self.generator,
            kind=report_kind,
        )
