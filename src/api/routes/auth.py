from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from src.app.services.credential_hasher import CredentialHasher
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ActionState,
    ConfirmPasswordResetUseCase,
    RegisterUseCase,
    RequestPasswordResetUseCase,
)
from src.depends import (
    get_config,
    get_credential_hasher,
    get_notification_dispatcher,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def to_response(state: ActionState) -> Response:
    """Completed actions redirect; everything else answers with the state"""
    if state.redirect_to:
        return RedirectResponse(state.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(
        status_code=status.HTTP_200_OK, content=state.model_dump(exclude_none=True)
    )


@router.post("/register", response_model=ActionState)
async def register(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CredentialHasher = Depends(get_credential_hasher),
    config=Depends(get_config),
):
    """
    Register Account

    Form fields: email, password

    Returns:
        - 303 See Other: to the login page with registered=true
        - 200 OK: action state with field errors or a failure message
    """
    form = await request.form()

    use_case = RegisterUseCase(uow, hasher, login_path=config.LOGIN_PATH)
    state = await use_case.execute(form)

    return to_response(state)


@router.post("/forgot-password", response_model=ActionState)
async def forgot_password(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    config=Depends(get_config),
):
    """
    Request Password Reset

    Form fields: email

    Security:
        - Same success state whether or not the account exists
        - Reset link is only ever sent to the account's own address

    Returns:
        - 200 OK: action state (success, field errors or generic error)
    """
    form = await request.form()

    use_case = RequestPasswordResetUseCase(
        uow,
        dispatcher,
        app_base_url=config.APP_BASE_URL,
        ttl_seconds=config.RESET_TOKEN_TTL_SECONDS,
    )
    state = await use_case.execute(form)

    return to_response(state)


@router.post("/reset-password", response_model=ActionState)
async def reset_password(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CredentialHasher = Depends(get_credential_hasher),
    config=Depends(get_config),
):
    """
    Confirm Password Reset

    Form fields: token, password, confirmPassword

    Returns:
        - 303 See Other: to the login page with reset=true
        - 200 OK: action state with field errors or a failure message
    """
    form = await request.form()

    use_case = ConfirmPasswordResetUseCase(uow, hasher, login_path=config.LOGIN_PATH)
    state = await use_case.execute(form)

    return to_response(state)
