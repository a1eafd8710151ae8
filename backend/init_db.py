"""Initialize database tables."""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add backend directory to Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir.parent))

# Load environment variables from .env file
load_dotenv(backend_dir / ".env")

from backend.app.db.base import engine, Base  # noqa: E402
# Import all models to register them
from backend.app import models  # noqa: E402,F401


async def init_db(drop: bool = False):
    """Create all database tables, optionally dropping existing ones first."""
    async with engine.begin() as conn:
        if drop:
            # Drop all tables (for development)
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()

    print("Database tables created successfully!")


if __name__ == "__main__":
    asyncio.run(init_db(drop="--drop" in sys.argv))
