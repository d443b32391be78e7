"""
Reset Token Redeemer

Consumes a live reset token and replaces the account's password.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.credential_hasher import CredentialHasher
from src.app.services.reset_token_issuer import digest_reset_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.errors import ErrorCode

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED_TOKEN_MESSAGE = "Invalid or expired reset token."


def _invalid_or_expired() -> Result:
    return Return.err(
        Error(ErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_OR_EXPIRED_TOKEN_MESSAGE)
    )


class ResetTokenRedeemer:
    """
    Redeems password reset tokens.

    Business Rules:
    - Token must match exactly and expire strictly after now
    - Unknown, wrong and expired tokens fail with the same error
    - New password hash and token clearing happen in one conditional update,
      so of two concurrent redemptions at most one succeeds
    - Password must already be validated (length, confirmation) by the caller

    Must be called inside an open unit of work.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: CredentialHasher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock

    async def redeem(self, token: str, new_password: str) -> Result[UUID]:
        """
        Returns:
            Result with the account id whose password was replaced, or Error

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: no live token matches
            - PERSISTENCE_FAILURE: lookup, update or commit failed
        """
        token_digest = digest_reset_token(token)

        found = await self.uow.accounts.get_by_live_token(token_digest, self.clock())
        if found.is_err():
            return found

        account = found.value
        if account is None:
            return _invalid_or_expired()

        password_hash = self.hasher.hash(new_password)

        updated = await self.uow.accounts.set_credential_and_clear_token(
            account.id, token_digest, password_hash, self.clock()
        )
        if updated.is_err():
            return updated

        # Lost the race to a concurrent redemption, or expired while hashing
        if not updated.value:
            logger.warning(f"Reset token for account {account.id} consumed concurrently")
            return _invalid_or_expired()

        committed = await self.uow.commit()
        if committed.is_err():
            return committed

        logger.info(f"Password reset for account {account.id}")
        return Return.ok(account.id)
