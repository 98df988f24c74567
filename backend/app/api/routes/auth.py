"""Auth Routes — registration and login, both returning a bearer token.

Invariants:
    - Both endpoints are anonymous
    - Absent body → "Usuário não informado"; structural failures → validation problem
    - Unknown email and wrong password share one message (no user enumeration)
    - Lockout is tracked on every failed login

Design Decisions:
    - Body declared optional so a null/absent body reaches the handler instead
      of failing in the parser
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_identity_gateway
from app.config import Settings, get_settings
from app.core.domain_types import SignInOutcome
from app.core.errors import (
    IdentityOperationError, InvalidCredentialsError, UserLockedOutError,
    UserNotInformedError, ValidationProblemError,
)
from app.core.repository_protocols import IdentityGateway
from app.core.validation import validate_login_user, validate_register_user
from app.schemas.auth import LoginUser, RegisterUser, TokenResponse
from app.services.token_service import build_user_response

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Usuario"])

_ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"description": "Validation or business rejection"}}


@router.post(
    "/registro", name="RegistroUsuario",
    response_model=TokenResponse, responses=_ERROR_RESPONSES,
)
async def register(
    register_user: RegisterUser | None = None,
    identity: IdentityGateway = Depends(get_identity_gateway),
    settings: Settings = Depends(get_settings),
):
    """Create a pre-confirmed account and sign it in."""
    if register_user is None:
        raise UserNotInformedError()

    errors = validate_register_user(
        register_user.email, register_user.password,
        register_user.confirm_password,
    )
    if errors:
        raise ValidationProblemError(errors)

    result = await identity.create_user(
        register_user.email, register_user.password, email_confirmed=True,
    )
    if not result.succeeded:
        raise IdentityOperationError(result.errors)

    return await build_user_response(
        identity, register_user.email, settings.jwt_settings(),
    )


@router.post(
    "/login", name="LoginUsuario",
    response_model=TokenResponse, responses=_ERROR_RESPONSES,
)
async def login(
    login_user: LoginUser | None = None,
    identity: IdentityGateway = Depends(get_identity_gateway),
    settings: Settings = Depends(get_settings),
):
    """Password sign-in with lockout tracking."""
    if login_user is None:
        raise UserNotInformedError()

    errors = validate_login_user(login_user.email, login_user.password)
    if errors:
        raise ValidationProblemError(errors)

    outcome = await identity.password_sign_in(
        login_user.email, login_user.password, lockout_on_failure=True,
    )
    logger.info("Sign-in attempt", extra={"outcome": outcome.value})
    if outcome is SignInOutcome.LOCKED_OUT:
        raise UserLockedOutError()
    if outcome is not SignInOutcome.SUCCEEDED:
        raise InvalidCredentialsError()

    return await build_user_response(
        identity, login_user.email, settings.jwt_settings(),
    )
