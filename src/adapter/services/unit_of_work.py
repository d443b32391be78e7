import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error, Result, Return
from src.adapter.repositories.account_repository import AccountRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import ErrorCode

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.accounts = AccountRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self) -> Result[None]:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc.__class__.__name__}")
            await self.rollback()
            return Return.err(
                Error(ErrorCode.PERSISTENCE_FAILURE, "Commit failed", reason="commit")
            )
        return Return.ok(None)

    async def rollback(self):
        await self.session.rollback()
