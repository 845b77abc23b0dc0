# test/conftest.py
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# StaticPool: every session shares the one in-memory connection
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

from movie_board import main, media_storage, store
from movie_board.media_storage import MediaBucket
from movie_board.store import Base

from data_builder import RecordingNavigator

test_engine = create_async_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(test_engine, expire_on_commit=False)

PUBLIC_BASE_URL = "http://test/media"


@pytest_asyncio.fixture(scope="function")
async def db_session(monkeypatch):
    """
    Fresh in-memory database per test, with the store pointed at it.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # store functions look up async_session at call time
    monkeypatch.setattr(store, "async_session", TestingSessionLocal)

    async with TestingSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def bucket(tmp_path, monkeypatch):
    """Media bucket rooted in a temp dir, installed as the app's bucket"""
    test_bucket = MediaBucket("media", tmp_path, PUBLIC_BASE_URL)
    monkeypatch.setattr(media_storage, "bucket", test_bucket)
    return test_bucket


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest_asyncio.fixture(scope="function")
async def client(db_session, bucket):
    transport = ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
