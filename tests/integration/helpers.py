from datetime import datetime
from typing import Optional
from urllib.parse import parse_qs, urlparse

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.credential_hasher import CredentialHasher
from src.app.services.reset_token_issuer import digest_reset_token
from src.domain.entities import Account


async def create_account(
    db_session: AsyncSession,
    hasher: CredentialHasher,
    email: str = "user@example.com",
    password: str = "OldPass123",
    reset_token: Optional[str] = None,
    reset_token_expiry: Optional[datetime] = None,
) -> Account:
    """Insert an account directly; reset_token is the plain token"""
    account = Account(
        name=email.split("@")[0],
        email=email,
        password_hash=hasher.hash(password),
        reset_token=digest_reset_token(reset_token) if reset_token else None,
        reset_token_expiry=reset_token_expiry,
    )
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


async def fetch_account(db_session: AsyncSession, email: str) -> Optional[Account]:
    """Read the current row, bypassing the session's identity map"""
    stmt = (
        select(Account)
        .where(Account.email == email)
        .execution_options(populate_existing=True)
    )
    result = await db_session.exec(stmt)
    return result.one_or_none()


def token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["token"][0]
