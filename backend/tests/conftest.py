from collections.abc import AsyncIterator
from pathlib import Path

import pytest_asyncio
from databases import Database
from sqlalchemy import create_engine

from leaguify.database import create_database
from leaguify.schema import metadata


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    dsn = f"sqlite:///{tmp_path / 'leaguify.db'}"
    engine = create_engine(dsn)
    metadata.create_all(engine)
    engine.dispose()

    database_ = create_database(dsn)
    await database_.connect()
    try:
        yield database_
    finally:
        await database_.disconnect()
