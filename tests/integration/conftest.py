import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.notification_dispatcher import OutboxNotificationDispatcher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.credential_hasher import CredentialHasher
from src.depends import (
    get_credential_hasher,
    get_notification_dispatcher,
    get_unit_of_work,
)

TEST_DB_URI = "sqlite+aiosqlite:///./test_integration.db"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DB_URI)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def hasher():
    return CredentialHasher(rounds=4)


@pytest.fixture
def outbox():
    return OutboxNotificationDispatcher()


@pytest_asyncio.fixture
async def client(session_factory, hasher, outbox):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_credential_hasher] = lambda: hasher
    app.dependency_overrides[get_notification_dispatcher] = lambda: outbox

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
