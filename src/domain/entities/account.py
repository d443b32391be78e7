"""
Account Entity

A registered login identity and its password reset state.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Account(SQLModel, table=True):
    """
    Account entity - one row per registered email.

    Business Rules:
    - Email is unique and stored lower-cased; immutable after creation
    - Password stored as bcrypt hash, replaced only by registration or reset
    - reset_token holds the SHA-256 digest of the emailed token, never the token
    - reset_token and reset_token_expiry are both set or both null
    - At most one live reset token per account (new token overwrites old)
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Password reset (single live token per account)
    reset_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    reset_token_expiry: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_reset_token_expiry", "reset_token_expiry"),)

