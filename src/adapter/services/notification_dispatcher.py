"""
Notification dispatchers for password reset links.

- ResendNotificationDispatcher: delivers through the Resend HTTP API
- OutboxNotificationDispatcher: keeps messages in memory (local dev, tests)

Neither logs the reset link, since it carries a live token.
"""

import asyncio
import html
import logging
from typing import List

import httpx
from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.domain.errors import ErrorCode

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset Your Password"


def render_reset_email(reset_link: str) -> str:
    link = html.escape(reset_link, quote=True)
    return (
        "<h2>Password Reset Request</h2>"
        "<p>You requested to reset your password. "
        "Click the link below to reset it:</p>"
        f'<a href="{link}">Reset Password</a>'
        "<p>This link will expire in 1 hour.</p>"
        "<p>If you didn't request this, please ignore this email.</p>"
    )


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def _dispatch_failure(reason: str) -> Result:
    return Return.err(
        Error(ErrorCode.DISPATCH_FAILURE, "Reset email not delivered", reason=reason)
    )


class ResendNotificationDispatcher(INotificationDispatcher):
    """
    Sends reset emails through the Resend API.

    Transport errors, 429 and 5xx responses are retried with exponential
    backoff (backoff_seconds, then doubled) up to max_attempts in total.
    Other 4xx responses fail immediately.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        sender: str,
        api_url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
    ):
        self.client = client
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    async def send(self, to_address: str, reset_link: str) -> Result[None]:
        payload = {
            "from": self.sender,
            "to": [to_address],
            "subject": RESET_EMAIL_SUBJECT,
            "html": render_reset_email(reset_link),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.client.post(
                    self.api_url,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout_seconds,
                )
            except httpx.HTTPError as exc:
                logger.warning(
                    f"Reset email attempt {attempt}/{self.max_attempts} failed: "
                    f"{exc.__class__.__name__}"
                )
            else:
                if response.is_success:
                    logger.info(f"Reset email accepted by provider (attempt {attempt})")
                    return Return.ok(None)
                if not _is_retryable(response.status_code):
                    logger.error(f"Reset email rejected: HTTP {response.status_code}")
                    return _dispatch_failure(f"HTTP {response.status_code}")
                logger.warning(
                    f"Reset email attempt {attempt}/{self.max_attempts} failed: "
                    f"HTTP {response.status_code}"
                )

            if attempt < self.max_attempts:
                await asyncio.sleep(self.backoff_seconds * 2 ** (attempt - 1))

        return _dispatch_failure("attempts exhausted")


class OutboxMessage(BaseModel):
    to_address: str
    subject: str
    reset_link: str


class OutboxNotificationDispatcher(INotificationDispatcher):
    """In-memory dispatcher; messages stay in .messages for inspection"""

    def __init__(self):
        self.messages: List[OutboxMessage] = []

    async def send(self, to_address: str, reset_link: str) -> Result[None]:
        self.messages.append(
            OutboxMessage(
                to_address=to_address,
                subject=RESET_EMAIL_SUBJECT,
                reset_link=reset_link,
            )
        )
        logger.info(f"Reset email kept in outbox ({len(self.messages)} messages)")
        return Return.ok(None)
