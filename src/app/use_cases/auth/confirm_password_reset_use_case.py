"""
Confirm Password Reset Use Case

Redeems a reset token and sets the new password.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from src.app.services.credential_hasher import CredentialHasher
from src.app.services.reset_token_redeemer import (
    INVALID_OR_EXPIRED_TOKEN_MESSAGE,
    ResetTokenRedeemer,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.errors import ErrorCode
from .dtos import ActionState
from .forms import ResetRedemptionForm, validate_form

logger = logging.getLogger(__name__)

INVALID_FIELDS_MESSAGE = "Invalid fields."
PERSISTENCE_FAILURE_MESSAGE = "Database Error: Failed to reset password."


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - Password min 6 chars and must equal confirmPassword (error on confirmPassword)
    - Validation failures touch no storage
    - Unknown, wrong, expired and already used tokens share one message
    - Success directs the caller to the login page with reset=true
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: CredentialHasher,
        login_path: str = "/login",
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.hasher = hasher
        self.login_path = login_path
        self.clock = clock

    async def execute(self, form_data: Mapping[str, Any]) -> ActionState:
        validated = validate_form(ResetRedemptionForm, form_data)
        if validated.is_err():
            return ActionState(
                errors=validated.error.details, message=INVALID_FIELDS_MESSAGE
            )

        form = validated.value

        async with self.uow:
            redeemer = ResetTokenRedeemer(self.uow, self.hasher, self.clock)
            redeemed = await redeemer.redeem(form.token, form.password)

        if redeemed.is_err():
            if redeemed.error.code == ErrorCode.INVALID_OR_EXPIRED_TOKEN:
                return ActionState(message=INVALID_OR_EXPIRED_TOKEN_MESSAGE)
            logger.error(f"Password reset failed: {redeemed.error.code}")
            return ActionState(message=PERSISTENCE_FAILURE_MESSAGE)

        return ActionState(redirect_to=f"{self.login_path}?reset=true")
