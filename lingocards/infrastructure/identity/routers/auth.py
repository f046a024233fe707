import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from starlette import status

from lingocards.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from lingocards.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from lingocards.config import get_settings
from lingocards.core import container
from lingocards.domain.common.exceptions import DomainError
from lingocards.domain.identity.exceptions import InvalidCredentialsError
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.common.rate_limit import limiter
from lingocards.infrastructure.identity.dependencies import CurrentUser, oauth2_scheme
from lingocards.infrastructure.identity.schemas import (
    AccessTokenInfo,
    SessionInfoResponse,
    TokenVerificationResponse,
    UserDetailsResponse,
    UserRegisterRequest,
)
from lingocards.infrastructure.identity.services.token_service import TokenWithRefresh

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

REFRESH_COOKIE_PATH = f"{settings.API_V1_PREFIX}/auth"


class RefreshTokenRequest(BaseModel):
    """Request body for refresh token (for clients without cookie support)."""

    refresh_token: str | None = None


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Set the refresh token as an httpOnly cookie scoped to the auth routes."""
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key="refresh_token",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")  # type: ignore[misc]
async def register(
    request: Request,
    response: Response,
    register_data: UserRegisterRequest,
    use_case: RegisterUserUseCase = Depends(inject_use_case(container.register_user_use_case)),
) -> TokenWithRefresh:
    """
    Register a new user account.

    Returns a token pair so the new user is logged in straight away.
    """
    try:
        _, token_pair = use_case.register_user(register_data.email, register_data.password)
        set_refresh_cookie(response, token_pair.refresh_token)
        return token_pair
    except (LingoCardsError, DomainError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Failed to register user: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("/login")
@limiter.limit("5/minute")  # type: ignore[misc]
async def login(
    request: Request,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> TokenWithRefresh:
    # OAuth2PasswordRequestForm calls it username, it carries the email
    try:
        _, token_pair = use_case.authenticate_user(form_data.username, form_data.password)
        set_refresh_cookie(response, token_pair.refresh_token)
        return token_pair
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


@router.post("/refresh")
@limiter.limit("10/minute")  # type: ignore[misc]
async def refresh(
    request: Request,
    response: Response,
    body: RefreshTokenRequest | None = None,
    refresh_token: Annotated[str | None, Cookie()] = None,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> TokenWithRefresh:
    """
    Refresh the access token.

    The refresh token is read from the httpOnly cookie first, then from the body.
    """
    token = refresh_token
    if not token and body and body.refresh_token:
        token = body.refresh_token

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )

    try:
        _, token_pair = use_case.refresh_access_token(token)
        set_refresh_cookie(response, token_pair.refresh_token)
        return token_pair
    except InvalidCredentialsError:
        _clear_refresh_cookie(response)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        ) from None


@router.post("/logout")
async def logout(response: Response) -> dict[str, str]:
    """
    Log out by clearing the refresh token cookie.

    The access token stays valid until it expires.
    """
    _clear_refresh_cookie(response)
    return {"message": "Logged out successfully"}


@router.post("/verify-token")
async def verify_token(
    current_user: CurrentUser,
    token: Annotated[str, Depends(oauth2_scheme)],
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> TokenVerificationResponse:
    """Check a bearer token. Invalid or expired tokens get 401 from the auth dependency."""
    token_status = use_case.get_access_token_status(token)
    return TokenVerificationResponse(
        valid=True,
        user=UserDetailsResponse.from_entity(current_user),
        expires_at=token_status.expires_at,
    )


@router.get("/session-info")
async def session_info(
    current_user: CurrentUser,
    token: Annotated[str, Depends(oauth2_scheme)],
    refresh_token: Annotated[str | None, Cookie()] = None,
    use_case: AuthenticationUseCase = Depends(inject_use_case(container.authentication_use_case)),
) -> SessionInfoResponse:
    token_status = use_case.get_access_token_status(token)
    return SessionInfoResponse(
        user=UserDetailsResponse.from_entity(current_user),
        access_token=AccessTokenInfo(
            expires_at=token_status.expires_at,
            expires_in=token_status.expires_in,
            is_expired=token_status.is_expired,
        ),
        refresh_token_available=bool(refresh_token),
    )
