from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from libs.result import Result
from src.domain.entities import Account


class IAccountRepository(ABC):
    """Account repository interface - application layer

    Every call returns a Result; storage faults come back as
    PERSISTENCE_FAILURE errors instead of raising.
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Result[Optional[Account]]:
        """Get account by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_live_token(
        self, token_digest: str, now: datetime
    ) -> Result[Optional[Account]]:
        """Get account whose reset token matches and expires strictly after now"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Result[Account]:
        """Insert a new account; DUPLICATE_EMAIL if the email is taken"""
        pass

    @abstractmethod
    async def set_reset_token(
        self, account_id: UUID, token_digest: str, expiry: datetime
    ) -> Result[None]:
        """Overwrite the account's reset token pair"""
        pass

    @abstractmethod
    async def set_credential_and_clear_token(
        self,
        account_id: UUID,
        token_digest: str,
        password_hash: str,
        now: datetime,
    ) -> Result[bool]:
        """
        Replace the password hash and null both reset token fields in one
        conditional update. Ok(False) when the token no longer matches or
        has expired (someone else redeemed it first).
        """
        pass
