"""
Input validation for the account action forms.

Each form schema validates raw, untyped field values (as posted by a
browser form) into a typed record. Failures come back as per-field
message lists keyed by form field name, never as raised exceptions.
"""

from typing import Annotated, Any, Dict, List, Mapping, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from libs.result import Error, Result, Return
from src.domain.errors import ErrorCode

PASSWORD_MIN_LENGTH = 6
# bcrypt input limit
PASSWORD_MAX_BYTES = 72


def _normalize_email(value: str) -> str:
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", "Please enter a valid email.")
    return value.strip().lower()


def _check_password_length(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            "Password must be at least {min_length} characters.",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise PydanticCustomError(
            "password_too_long",
            "Password must be at most {max_bytes} bytes.",
            {"max_bytes": PASSWORD_MAX_BYTES},
        )
    return value


def _check_token_present(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("token_missing", "Reset token is required.")
    return value


EmailField = Annotated[str, AfterValidator(_normalize_email)]
PasswordField = Annotated[str, AfterValidator(_check_password_length)]
TokenField = Annotated[str, AfterValidator(_check_token_present)]


class FormSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def form_field_names(cls) -> List[str]:
        return [info.alias or name for name, info in cls.model_fields.items()]


class RegistrationForm(FormSchema):
    email: EmailField
    password: PasswordField


class ResetRequestForm(FormSchema):
    email: EmailField


class ResetRedemptionForm(FormSchema):
    token: TokenField
    password: PasswordField
    confirm_password: PasswordField = Field(alias="confirmPassword")

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        # Only compared once the password itself is valid
        password = info.data.get("password")
        if password is not None and value != password:
            raise PydanticCustomError("password_mismatch", "Passwords don't match")
        return value


F = TypeVar("F", bound=FormSchema)


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into {form field: [messages]}"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field_name = str(error["loc"][0]) if error["loc"] else "form"
        if error["type"] == "missing" or (
            error["type"] == "string_type" and error.get("input") is None
        ):
            message = "Required"
        elif error["type"] == "string_type":
            message = "Expected string"
        else:
            message = error["msg"]
        errors.setdefault(field_name, []).append(message)
    return errors


def validate_form(schema: Type[F], form_data: Mapping[str, Any]) -> Result[F]:
    """
    Validate raw form values against a form schema.

    Args:
        schema: Form schema class
        form_data: Raw field values; absent fields are treated as None

    Returns:
        Result with the typed form, or VALIDATION_ERROR whose details
        hold the per-field messages
    """
    raw = {name: form_data.get(name) for name in schema.form_field_names()}
    try:
        return Return.ok(schema.model_validate(raw))
    except ValidationError as exc:
        return Return.err(
            Error(
                ErrorCode.VALIDATION_ERROR,
                "Invalid form fields",
                details=field_errors(exc),
            )
        )
