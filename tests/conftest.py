"""Shared fixtures: an in-memory SQLite database with a small model."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from keeper.core.paging import clear_page
from keeper.database.models import Base
from tests.models import Widget


WIDGETS = [
    ("anvil", "black", 50),
    ("bolt", "grey", 1),
    ("crank", None, 7),
    ("dial", "red", 2),
    ("easel", "brown", 12),
    ("flange", "grey", 3),
    ("gear", None, 4),
    ("hinge", "grey", 1),
    ("idler", "black", 9),
    ("jack", "red", 30),
    ("knob", "white", 1),
    ("lever", None, 6),
]


@pytest.fixture(autouse=True)
def no_pending_page():
    clear_page()
    yield
    clear_page()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def widgets(session: AsyncSession) -> list[Widget]:
    """Twelve widgets with ids 1-12 in alphabetical order of name."""
    rows = [Widget(name=name, color=color, weight=weight) for name, color, weight in WIDGETS]
    session.add_all(rows)
    await session.commit()
    return rows
