"""
Request Password Reset Use Case

Issues a reset token for the addressed account and emails the reset link.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.reset_token_issuer import (
    DEFAULT_RESET_TOKEN_TTL_SECONDS,
    ResetTokenIssuer,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from .dtos import ActionState
from .forms import ResetRequestForm, validate_form

logger = logging.getLogger(__name__)

INVALID_EMAIL_MESSAGE = "Please enter a valid email."
ACCEPTED_MESSAGE = "If an account exists, you will receive a password reset email."
FAILED_MESSAGE = "An error occurred. Please try again."


def build_reset_link(app_base_url: str, token: str) -> str:
    return f"{app_base_url.rstrip('/')}/reset-password?{urlencode({'token': token})}"


def _accepted() -> ActionState:
    return ActionState(success=True, message=ACCEPTED_MESSAGE)


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Unknown email: same success state as a known one, and nothing is written
    - Known email: new token overwrites any outstanding one (1 hour expiry)
    - Email is sent only after the token is committed
    - Delivery failure is logged and does not roll back the token;
      the caller gets the generic error state
    - Persistence failure gives the same generic error state

    Note:
        Response latency still differs between the known and unknown
        branches (token write and delivery run only for known accounts).
    """

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: INotificationDispatcher,
        app_base_url: str,
        ttl_seconds: int = DEFAULT_RESET_TOKEN_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.app_base_url = app_base_url
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def execute(self, form_data: Mapping[str, Any]) -> ActionState:
        validated = validate_form(ResetRequestForm, form_data)
        if validated.is_err():
            return ActionState(
                errors=validated.error.details, message=INVALID_EMAIL_MESSAGE
            )

        email = validated.value.email

        async with self.uow:
            found = await self.uow.accounts.get_by_email(email)
            if found.is_err():
                logger.error(f"Reset request lookup failed: {found.error.code}")
                return ActionState(message=FAILED_MESSAGE)

            account = found.value
            if account is None:
                return _accepted()

            account_id, to_address = account.id, account.email

            issuer = ResetTokenIssuer(self.uow, self.ttl_seconds, self.clock)
            issued = await issuer.issue(account)
            if issued.is_err():
                logger.error(
                    f"Reset token for account {account_id} not issued: {issued.error.code}"
                )
                return ActionState(message=FAILED_MESSAGE)

        reset_link = build_reset_link(self.app_base_url, issued.value.token)
        sent = await self.dispatcher.send(to_address, reset_link)
        if sent.is_err():
            logger.error(
                f"Reset email for account {account_id} not delivered: {sent.error.code}"
            )
            return ActionState(message=FAILED_MESSAGE)

        return _accepted()
