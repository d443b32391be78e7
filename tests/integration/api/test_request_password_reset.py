"""
Integration tests for requesting a password reset

POST /auth/forgot-password with form field email
"""
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error, Return
from src.app.services.reset_token_issuer import digest_reset_token
from src.domain.base import utc_now
from src.domain.entities import Account
from src.domain.errors import ErrorCode
from tests.integration.helpers import create_account, fetch_account, token_from_link

ACCEPTED = {
    "success": True,
    "message": "If an account exists, you will receive a password reset email.",
}


@pytest.mark.asyncio
async def test_successful_password_reset_request(
    client: AsyncClient, db_session: AsyncSession, hasher, outbox
):
    """
    Given I have an account
    When I request a password reset
    Then a token is stored with a one hour expiry
    And the reset link is emailed to my address
    """
    await create_account(db_session, hasher, email="reset@example.com")

    before = utc_now()
    response = await client.post("/auth/forgot-password", data={"email": "reset@example.com"})
    after = utc_now()

    assert response.status_code == 200
    assert response.json() == ACCEPTED

    account = await fetch_account(db_session, "reset@example.com")
    assert account.reset_token is not None
    assert before + timedelta(seconds=3600) <= account.reset_token_expiry
    assert account.reset_token_expiry <= after + timedelta(seconds=3600)

    assert len(outbox.messages) == 1
    message = outbox.messages[0]
    assert message.to_address == "reset@example.com"
    assert message.reset_link.startswith("http://localhost:3000/reset-password?token=")

    # Only the digest is stored
    token = token_from_link(message.reset_link)
    assert account.reset_token == digest_reset_token(token)
    assert account.reset_token != token


@pytest.mark.asyncio
async def test_password_reset_non_existent_email(
    client: AsyncClient, db_session: AsyncSession, outbox
):
    """
    Given no account exists with the email
    When I request a password reset
    Then the response is identical to the found-account case
    And nothing is written or sent
    """
    response = await client.post(
        "/auth/forgot-password", data={"email": "nonexistent@example.com"}
    )

    assert response.status_code == 200
    assert response.json() == ACCEPTED

    result = await db_session.exec(select(Account))
    assert result.all() == []
    assert outbox.messages == []


@pytest.mark.asyncio
async def test_known_and_unknown_email_responses_match(
    client: AsyncClient, db_session: AsyncSession, hasher
):
    await create_account(db_session, hasher, email="known@example.com")

    known = await client.post("/auth/forgot-password", data={"email": "known@example.com"})
    unknown = await client.post("/auth/forgot-password", data={"email": "unknown@example.com"})

    assert known.status_code == unknown.status_code
    assert known.content == unknown.content


@pytest.mark.asyncio
async def test_email_lookup_is_case_insensitive(
    client: AsyncClient, db_session: AsyncSession, hasher, outbox
):
    await create_account(db_session, hasher, email="mixed@example.com")

    response = await client.post("/auth/forgot-password", data={"email": "MiXeD@Example.com"})

    assert response.json() == ACCEPTED
    assert len(outbox.messages) == 1
    assert outbox.messages[0].to_address == "mixed@example.com"


@pytest.mark.asyncio
async def test_second_request_overwrites_token(
    client: AsyncClient, db_session: AsyncSession, hasher, outbox
):
    await create_account(db_session, hasher, email="twice@example.com")

    await client.post("/auth/forgot-password", data={"email": "twice@example.com"})
    first = await fetch_account(db_session, "twice@example.com")
    first_token = first.reset_token

    await client.post("/auth/forgot-password", data={"email": "twice@example.com"})
    second = await fetch_account(db_session, "twice@example.com")

    assert second.reset_token is not None
    assert second.reset_token != first_token
    assert len(outbox.messages) == 2


@pytest.mark.asyncio
async def test_password_reset_invalid_email_format(client: AsyncClient, outbox):
    response = await client.post("/auth/forgot-password", data={"email": "not-a-valid-email"})

    assert response.status_code == 200
    assert response.json() == {
        "errors": {"email": ["Please enter a valid email."]},
        "message": "Please enter a valid email.",
    }
    assert outbox.messages == []


@pytest.mark.asyncio
async def test_delivery_failure_keeps_token_and_reports_error(
    client: AsyncClient, db_session: AsyncSession, hasher, outbox, monkeypatch
):
    """
    Given I have an account
    And the mail provider rejects the message
    When I request a password reset
    Then I get the generic error state
    And the issued token is still stored
    """
    await create_account(db_session, hasher, email="undelivered@example.com")
    monkeypatch.setattr(
        outbox,
        "send",
        AsyncMock(
            return_value=Return.err(
                Error(ErrorCode.DISPATCH_FAILURE, "Reset email not delivered")
            )
        ),
    )

    response = await client.post(
        "/auth/forgot-password", data={"email": "undelivered@example.com"}
    )

    assert response.status_code == 200
    assert response.json() == {"message": "An error occurred. Please try again."}

    account = await fetch_account(db_session, "undelivered@example.com")
    assert account.reset_token is not None
    assert account.reset_token_expiry > utc_now()
