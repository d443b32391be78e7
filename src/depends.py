from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.credential_hasher import CredentialHasher
from src.app.services.notification_dispatcher import INotificationDispatcher


def build_engine(db_uri: str) -> AsyncEngine:
    return create_async_engine(db_uri, echo=False, future=True)


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_credential_hasher(request: Request) -> CredentialHasher:
    return request.app.state.credential_hasher


def get_notification_dispatcher(request: Request) -> INotificationDispatcher:
    return request.app.state.notification_dispatcher


def get_config(request: Request):
    return request.app.state.config
