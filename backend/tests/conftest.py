"""Pytest configuration and fixtures."""

from typing import Any, AsyncGenerator

import httpx
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from backend.app.db.base import Base, get_db
from backend.app.main import app
from backend.app.models.session import Session
from backend.app.models.transcript import TranscriptSegment
from backend.app.services.llm import OpenRouterProvider, ReportGeneratorClient, RetryPolicy
from backend.app.services.report_generator import ReportService

OWNER_ID = "owner-1"

SAMPLE_SEGMENTS = [
    ("00:00:05", "Rep", "Thanks for joining, how is the quarter going?"),
    ("00:01:30", "Prospect", "Coaching our reps takes too much manager time."),
    ("00:04:10", "Prospect", "If pricing works we could pilot next month."),
]


class StubGenerator:
    """
    Generator client stand-in.

    Returns ``outputs`` in order (repeating the last one) or raises ``error``.
    """

    def __init__(self, outputs: list[Any] | None = None, error: Exception | None = None):
        self.outputs = list(outputs) if outputs is not None else ["{}"]
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def init(self) -> None:
        pass

    async def dispose(self) -> None:
        pass

    async def call(self, system_prompt: str, user_prompt: str, schema: dict, schema_name: str = "") -> Any:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "schema": schema,
            "schema_name": schema_name,
        })
        if self.error is not None:
            raise self.error
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0]


def make_generator_client(handler, delays: list[float] | None = None) -> ReportGeneratorClient:
    """Real generator client whose HTTP traffic goes to ``handler``."""

    async def record_sleep(seconds: float) -> None:
        if delays is not None:
            delays.append(seconds)

    provider = OpenRouterProvider(
        api_key="test-key",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    policy = RetryPolicy(max_attempts=3, backoff_seconds=1.0, timeout_seconds=5.0)
    return ReportGeneratorClient(provider, policy, temperature=0.1, max_tokens=1000, sleep=record_sleep)


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Each test gets a fresh database with all tables created.
    """
    # Use in-memory SQLite for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Provide session to test
    async with async_session() as session:
        yield session

    # Cleanup
    await engine.dispose()


async def seed_session(db: AsyncSession, owner_id: str = OWNER_ID, segments=SAMPLE_SEGMENTS) -> Session:
    """Insert a call session with transcript segments."""
    session = Session(owner_id=owner_id, title="Discovery call", session_type="discovery")
    db.add(session)
    await db.commit()
    await db.refresh(session)

    for position, (timestamp, speaker, content) in enumerate(segments):
        db.add(TranscriptSegment(
            session_id=session.id,
            position=position,
            timestamp=timestamp,
            speaker=speaker,
            content=content,
        ))
    await db.commit()
    return session


@pytest.fixture
async def call_session(test_db: AsyncSession) -> Session:
    """A session owned by ``OWNER_ID`` with a three segment transcript."""
    return await seed_session(test_db)


@pytest.fixture
async def session_id(call_session: Session) -> str:
    """ID of ``call_session``, read before any rollback can expire the instance."""
    return call_session.id


@pytest.fixture
async def empty_session_id(test_db: AsyncSession) -> str:
    """ID of a session owned by ``OWNER_ID`` with no transcript."""
    session = await seed_session(test_db, segments=[])
    return session.id


@pytest.fixture
def stub_generator() -> StubGenerator:
    return StubGenerator(outputs=['{"p1_key_points": ["a"]}'])


@pytest.fixture
def stub_factory():
    """Build a ``StubGenerator`` with custom outputs or error."""
    return StubGenerator


@pytest.fixture
def generator_client_factory():
    """Build a real generator client over a mocked HTTP transport."""
    return make_generator_client


@pytest.fixture(scope="function")
async def test_client_with_db(stub_generator: StubGenerator) -> AsyncGenerator[AsyncClient, None]:
    """
    Create test client with in-memory database.

    This fixture creates a fresh test database for each test, overrides the
    app's database dependency and installs a report service backed by
    ``stub_generator``. The session factory is exposed as
    ``client.session_factory`` for seeding.
    """
    # Create test database engine
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Create all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override get_db dependency
    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.report_service = ReportService(generator=stub_generator)

    # Create test client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        client.session_factory = TestSessionLocal
        yield client

    # Cleanup
    app.dependency_overrides.clear()
    await test_engine.dispose()
