import logging
from typing import Any, Mapping

from src.app.services.credential_hasher import CredentialHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Account
from src.domain.errors import ErrorCode
from .dtos import ActionState
from .forms import RegistrationForm, validate_form

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing Fields. Failed to Create Account."
DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists."
PERSISTENCE_FAILURE_MESSAGE = "Database Error: Failed to Create Account."


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Validate email format and password length
    2. Advisory check that the email is free
    3. Hash password with bcrypt
    4. Insert account (display name defaults to the email's local part)
    5. Commit; the unique index on email is the real duplicate guard
    6. Direct the caller to the login page with registered=true
    """

    def __init__(
        self, uow: UnitOfWork, hasher: CredentialHasher, login_path: str = "/login"
    ):
        self.uow = uow
        self.hasher = hasher
        self.login_path = login_path

    async def execute(self, form_data: Mapping[str, Any]) -> ActionState:
        validated = validate_form(RegistrationForm, form_data)
        if validated.is_err():
            return ActionState(
                errors=validated.error.details, message=MISSING_FIELDS_MESSAGE
            )

        form = validated.value

        async with self.uow:
            existing = await self.uow.accounts.get_by_email(form.email)
            if existing.is_err():
                logger.error(f"Registration lookup failed: {existing.error.code}")
                return ActionState(message=PERSISTENCE_FAILURE_MESSAGE)
            if existing.value is not None:
                return ActionState(message=DUPLICATE_EMAIL_MESSAGE)

            account = Account(
                name=form.email.split("@")[0],
                email=form.email,
                password_hash=self.hasher.hash(form.password),
            )

            created = await self.uow.accounts.create(account)
            if created.is_err():
                if created.error.code == ErrorCode.DUPLICATE_EMAIL:
                    return ActionState(message=DUPLICATE_EMAIL_MESSAGE)
                logger.error(f"Account insert failed: {created.error.code}")
                return ActionState(message=PERSISTENCE_FAILURE_MESSAGE)

            committed = await self.uow.commit()
            if committed.is_err():
                logger.error(f"Registration commit failed: {committed.error.code}")
                return ActionState(message=PERSISTENCE_FAILURE_MESSAGE)

            logger.info(f"Account {created.value.id} registered")

        return ActionState(redirect_to=f"{self.login_path}?registered=true")
