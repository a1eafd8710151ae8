"""
Create a demo call session with a short transcript.

Run this script to seed a session that can be used to trigger report
generation from the API:

    python backend/create_demo_session.py [owner-id]
"""

import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

# Add backend directory to Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir.parent))

# Load environment variables from .env file
load_dotenv(backend_dir / ".env")

from backend.app.db.base import AsyncSessionLocal, engine, Base  # noqa: E402
from backend.app import models  # noqa: E402,F401
from backend.app.models.session import Session  # noqa: E402
from backend.app.models.transcript import TranscriptSegment  # noqa: E402

DEMO_TRANSCRIPT = [
    ("00:00:05", "Rep", "Hi Dana, thanks for making time today. How has your week been?"),
    ("00:00:12", "Prospect", "Busy, we are closing the quarter, but happy to talk."),
    ("00:01:40", "Rep", "What prompted you to look at new call analytics tooling?"),
    ("00:01:52", "Prospect", "Our managers spend hours listening to calls and coaching is inconsistent."),
    ("00:03:10", "Prospect", "We have about forty reps across two teams."),
    ("00:05:30", "Rep", "Teams like yours usually cut review time by half in the first month."),
    ("00:07:02", "Prospect", "Pricing is a concern, we already pay for a dialer."),
    ("00:08:15", "Prospect", "If we can start a pilot in March, I can take it to our VP of Sales."),
    ("00:09:40", "Rep", "Great, I will send a proposal and book a call with your VP next week."),
]


async def create_demo_session(owner_id: str):
    print("Creating demo session...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    started_at = datetime.utcnow() - timedelta(minutes=15)
    async with AsyncSessionLocal() as db:
        session = Session(
            owner_id=owner_id,
            title="Discovery call - Acme Corp",
            session_type="discovery",
            started_at=started_at,
            ended_at=started_at + timedelta(minutes=10),
        )
        db.add(session)
        await db.commit()
        await db.refresh(session)
        print(f"Created session: {session.id}")

        for position, (timestamp, speaker, content) in enumerate(DEMO_TRANSCRIPT):
            db.add(TranscriptSegment(
                session_id=session.id,
                position=position,
                timestamp=timestamp,
                speaker=speaker,
                content=content,
            ))
        await db.commit()
        print(f"Added {len(DEMO_TRANSCRIPT)} transcript segments")

    await engine.dispose()
    print(f"Trigger the report with: POST /api/sessions/{session.id}/report (X-Owner-Id: {owner_id})")


if __name__ == "__main__":
    asyncio.run(create_demo_session(sys.argv[1] if len(sys.argv) > 1 else "demo-owner"))
