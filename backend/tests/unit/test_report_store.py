"""Unit tests for the report generation stores."""

import pytest
from sqlalchemy import func, select

from backend.app.core.exceptions import GenerationInProgressError, InvalidTransitionError
from backend.app.models.report import SessionReport
from backend.app.services.report_state import GenerationStatus, STARTABLE, check_transition
from backend.app.services.report_store import ReportRecordStore, SessionStore, TranscriptStore


class TestGenerationStatus:
    """Test cases for the transition table."""

    @pytest.mark.parametrize("current,target", [
        ("queued", "running"),
        ("running", "ready"),
        ("running", "failed"),
        ("failed", "running"),
    ])
    def test_allowed(self, current, target):
        """Test legal transitions pass."""
        check_transition("s1", current, target)

    @pytest.mark.parametrize("current,target", [
        ("queued", "ready"),
        ("queued", "failed"),
        ("ready", "running"),
        ("ready", "failed"),
        ("failed", "ready"),
        ("running", "running"),
        ("unknown", "running"),
    ])
    def test_rejected(self, current, target):
        """Test illegal transitions raise InvalidTransitionError."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            check_transition("s1", current, target)

        assert exc_info.value.current == current
        assert exc_info.value.target == target

    def test_startable_states(self):
        """Test generation may start from queued and failed only."""
        assert STARTABLE == {GenerationStatus.QUEUED, GenerationStatus.FAILED}


class TestSessionStores:
    """Test cases for session and transcript lookups."""

    @pytest.mark.asyncio
    async def test_find_session_checks_owner(self, test_db, call_session):
        """Test sessions are only visible to their owner."""
        store = SessionStore(test_db)

        assert (await store.find_by_id(call_session.id, "owner-1")).id == call_session.id
        assert await store.find_by_id(call_session.id, "someone-else") is None
        assert await store.find_by_id("missing", "owner-1") is None

    @pytest.mark.asyncio
    async def test_transcript_in_call_order(self, test_db, call_session):
        """Test segments come back ordered by position."""
        segments = await TranscriptStore(test_db).find_by_session_id(call_session.id, "owner-1")

        assert [s.position for s in segments] == [0, 1, 2]
        assert segments[0].speaker == "Rep"

    @pytest.mark.asyncio
    async def test_transcript_checks_owner(self, test_db, call_session):
        """Test another owner sees no segments."""
        segments = await TranscriptStore(test_db).find_by_session_id(call_session.id, "someone-else")

        assert segments == []


class TestReportRecordStore:
    """Test cases for generation record transitions."""

    @pytest.mark.asyncio
    async def test_upsert_queued_once(self, test_db, session_id):
        """Test repeated upserts keep a single record."""
        store = ReportRecordStore(test_db)

        first = await store.upsert_queued(session_id)
        second = await store.upsert_queued(session_id)

        assert first.status == "queued"
        assert first.attempts == 0
        assert second.session_id == first.session_id
        count = await test_db.scalar(select(func.count()).select_from(SessionReport))
        assert count == 1

    @pytest.mark.asyncio
    async def test_kinds_are_separate_records(self, test_db, session_id):
        """Test each report kind has its own record."""
        await ReportRecordStore(test_db, "v3").upsert_queued(session_id)
        tabs = await ReportRecordStore(test_db, "tabs").upsert_queued(session_id)

        assert tabs.report_kind == "tabs"
        count = await test_db.scalar(select(func.count()).select_from(SessionReport))
        assert count == 2

    @pytest.mark.asyncio
    async def test_happy_path(self, test_db, session_id):
        """Test queued -> running -> ready persists the report."""
        store = ReportRecordStore(test_db)
        await store.upsert_queued(session_id)

        running = await store.set_running(session_id)
        assert running.status == "running"

        counted = await store.increment_attempts(session_id)
        assert counted.attempts == 1

        ready = await store.set_ready(session_id, {"tp_title": "Call"})
        assert ready.status == "ready"
        assert ready.report_json == {"tp_title": "Call"}
        assert ready.last_error is None

    @pytest.mark.asyncio
    async def test_second_start_is_in_progress(self, test_db, session_id):
        """Test starting a running generation raises GenerationInProgressError."""
        store = ReportRecordStore(test_db)
        await store.upsert_queued(session_id)
        await store.set_running(session_id)

        with pytest.raises(GenerationInProgressError):
            await store.set_running(session_id)

        record = await store.find_by_session_id(session_id)
        assert record.status == "running"

    @pytest.mark.asyncio
    async def test_ready_is_terminal(self, test_db, session_id):
        """Test no transition leaves ready."""
        store = ReportRecordStore(test_db)
        await store.upsert_queued(session_id)
        await store.set_running(session_id)
        await store.set_ready(session_id, {"tp_title": "Call"})

        with pytest.raises(InvalidTransitionError):
            await store.set_running(session_id)
        with pytest.raises(InvalidTransitionError):
            await store.set_failed(session_id, "late failure")

        record = await store.find_by_session_id(session_id)
        assert record.status == "ready"
        assert record.last_error is None

    @pytest.mark.asyncio
    async def test_queued_cannot_complete(self, test_db, session_id):
        """Test a queued record cannot jump to ready."""
        store = ReportRecordStore(test_db)
        await store.upsert_queued(session_id)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await store.set_ready(session_id, {})

        assert exc_info.value.current == "queued"

    @pytest.mark.asyncio
    async def test_missing_record(self, test_db, session_id):
        """Test transitions on a missing record raise InvalidTransitionError."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            await ReportRecordStore(test_db).set_running(session_id)

        assert exc_info.value.current is None

    @pytest.mark.asyncio
    async def test_failed_then_retry(self, test_db, session_id):
        """Test failed records keep their report, and a restart clears the error."""
        store = ReportRecordStore(test_db)
        await store.upsert_queued(session_id)
        await store.set_running(session_id)

        failed = await store.set_failed(session_id, "Invalid structured output")
        assert failed.status == "failed"
        assert failed.last_error == "Invalid structured output"
        assert failed.report_json is None

        restarted = await store.set_running(session_id)
        assert restarted.status == "running"
        assert restarted.last_error is None
