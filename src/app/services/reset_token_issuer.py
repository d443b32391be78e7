"""
Reset Token Issuer

Generates single-use password reset tokens and stores them on the account.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from pydantic import BaseModel

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import Account

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
DEFAULT_RESET_TOKEN_TTL_SECONDS = 3600


def digest_reset_token(token: str) -> str:
    """SHA-256 hex digest stored in place of the plain token"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class IssuedResetToken(BaseModel):
    """Plain token for the outbound link, plus its absolute expiry"""

    token: str
    expires_at: datetime


class ResetTokenIssuer:
    """
    Issues password reset tokens.

    Business Rules:
    - 32 random bytes from the secrets module (256 bits, url-safe)
    - Only the SHA-256 digest is persisted
    - Expiry is exactly ttl_seconds after issuance (1 hour by default)
    - Writing a new token overwrites any previous one for the account
    - Token counts as issued only once the write is committed

    Must be called inside an open unit of work.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ttl_seconds: int = DEFAULT_RESET_TOKEN_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def issue(self, account: Account) -> Result[IssuedResetToken]:
        token = secrets.token_urlsafe(RESET_TOKEN_BYTES)
        expires_at = self.clock() + timedelta(seconds=self.ttl_seconds)

        stored = await self.uow.accounts.set_reset_token(
            account.id, digest_reset_token(token), expires_at
        )
        if stored.is_err():
            return stored

        committed = await self.uow.commit()
        if committed.is_err():
            return committed

        logger.info(f"Reset token issued for account {account.id}")
        return Return.ok(IssuedResetToken(token=token, expires_at=expires_at))
