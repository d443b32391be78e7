import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error, Result, Return
from src.app.repositories.account_repository import IAccountRepository
from src.domain.entities import Account
from src.domain.errors import ErrorCode

logger = logging.getLogger(__name__)


def _persistence_failure(operation: str, exc: SQLAlchemyError) -> Result:
    logger.error(f"Account repository {operation} failed: {exc.__class__.__name__}")
    return Return.err(
        Error(ErrorCode.PERSISTENCE_FAILURE, "Storage operation failed", reason=operation)
    )


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Result[Optional[Account]]:
        """Get account by (normalized) email address"""
        try:
            stmt = select(Account).where(Account.email == email)
            result = await self.session.exec(stmt)
            return Return.ok(result.one_or_none())
        except SQLAlchemyError as exc:
            return _persistence_failure("get_by_email", exc)

    async def get_by_live_token(
        self, token_digest: str, now: datetime
    ) -> Result[Optional[Account]]:
        """Get account whose reset token matches and expires strictly after now"""
        try:
            stmt = select(Account).where(
                Account.reset_token == token_digest,
                Account.reset_token_expiry > now,
            )
            result = await self.session.exec(stmt)
            return Return.ok(result.one_or_none())
        except SQLAlchemyError as exc:
            return _persistence_failure("get_by_live_token", exc)

    async def create(self, account: Account) -> Result[Account]:
        """Insert a new account; DUPLICATE_EMAIL if the email is taken"""
        try:
            self.session.add(account)
            await self.session.flush()
            await self.session.refresh(account)
            return Return.ok(account)
        except IntegrityError:
            logger.warning("Account insert rejected by unique constraint")
            return Return.err(
                Error(ErrorCode.DUPLICATE_EMAIL, "Email already registered")
            )
        except SQLAlchemyError as exc:
            return _persistence_failure("create", exc)

    async def set_reset_token(
        self, account_id: UUID, token_digest: str, expiry: datetime
    ) -> Result[None]:
        """Overwrite the account's reset token pair"""
        try:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(reset_token=token_digest, reset_token_expiry=expiry)
            )
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            return _persistence_failure("set_reset_token", exc)

        if result.rowcount != 1:
            return Return.err(
                Error(
                    ErrorCode.PERSISTENCE_FAILURE,
                    "Account not found",
                    reason="set_reset_token",
                )
            )
        return Return.ok(None)

    async def set_credential_and_clear_token(
        self,
        account_id: UUID,
        token_digest: str,
        password_hash: str,
        now: datetime,
    ) -> Result[bool]:
        """Replace the password hash and clear the token if it is still live"""
        try:
            stmt = (
                update(Account)
                .where(
                    Account.id == account_id,
                    Account.reset_token == token_digest,
                    Account.reset_token_expiry > now,
                )
                .values(
                    password_hash=password_hash,
                    reset_token=None,
                    reset_token_expiry=None,
                )
            )
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            return _persistence_failure("set_credential_and_clear_token", exc)

        return Return.ok(result.rowcount == 1)
