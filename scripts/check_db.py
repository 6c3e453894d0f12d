"""Print row counts for every LiteWork table."""

import asyncio
import os
import sys

# Add parent directory to path so we can import litework modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from litework.db.base import Base
from litework.db.session import async_session_maker, engine
import litework.models  # noqa: F401 - register all models


async def check_data():
    async with async_session_maker() as session:
        tables = sorted(Base.metadata.tables.values(), key=lambda t: t.name)
        print(f"Checking {len(tables)} tables")
        for table in tables:
            try:
                count = await session.scalar(select(func.count()).select_from(table))
                print(f"  {table.name:24} {count}")
            except SQLAlchemyError as e:
                print(f"  {table.name:24} error: {e}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
