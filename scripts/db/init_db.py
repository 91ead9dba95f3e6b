"""
Create the aid service tables on an empty database.

There are no migrations; run this once against a fresh DATABASE_URL.
Pass --drop to start over (destroys all data).
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[2]
sys.path.append(str(project_root))
load_dotenv(project_root / os.environ.get("ENV_FILE", ".env"), override=True)

from libs.db.base import Base  # noqa: E402
from libs.db.config import engine  # noqa: E402
from services.aid_service import models as _models  # noqa: E402,F401


async def init_db(drop: bool = False) -> None:
    async with engine.begin() as conn:
        if drop:
            print("⚠️ Dropping all tables...")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    asyncio.run(init_db(drop="--drop" in sys.argv[1:]))
