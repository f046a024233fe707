"""FastAPI dependencies for identity, authentication and access control."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from lingocards.application.identity.services.access_pipeline import (
    AccessContext,
    AccessPipeline,
    log_admin_action,
    prevent_self_harm,
    require_admin,
    require_admin_or_self,
)
from lingocards.config import get_settings
from lingocards.core import container
from lingocards.database import DatabaseSession
from lingocards.domain.identity.entities.user import User
from lingocards.domain.identity.exceptions import InvalidCredentialsError
from lingocards.exceptions import CredentialsException

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{get_settings().API_V1_PREFIX}/auth/login")


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)], db: DatabaseSession
) -> User:
    """
    Get the current authenticated user from the access token.

    Raises:
        CredentialsException: If token is invalid or user not found
    """
    with container.db.override(db):
        use_case = container.authentication_use_case()

    try:
        return use_case.get_user_from_access_token(token)
    except InvalidCredentialsError:
        raise CredentialsException from None


CurrentUser = Annotated[User, Depends(get_current_user)]


def build_admin_pipeline() -> AccessPipeline:
    authz = container.authorization_service()
    return AccessPipeline(require_admin(authz), prevent_self_harm, log_admin_action)


def build_owner_pipeline() -> AccessPipeline:
    authz = container.authorization_service()
    return AccessPipeline(require_admin_or_self(authz))


def _target_user_id(request: Request) -> int | None:
    raw = request.path_params.get("user_id")
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        # Left to path validation on the endpoint itself
        return None


def admin_access(action: str) -> Callable[..., AccessContext]:
    """
    Dependency that lets only administrators through.

    The target user is taken from the `user_id` path parameter when present,
    so self-harm rules can see who the action is aimed at.
    """

    def dependency(request: Request, current_user: CurrentUser) -> AccessContext:
        context = AccessContext(
            user=current_user, action=action, target_user_id=_target_user_id(request)
        )
        return build_admin_pipeline().enforce(context)

    return dependency


def owner_or_admin_access(action: str) -> Callable[..., AccessContext]:
    """Dependency for per-user resources: the owner or any administrator."""

    def dependency(request: Request, current_user: CurrentUser) -> AccessContext:
        context = AccessContext(
            user=current_user, action=action, target_user_id=_target_user_id(request)
        )
        return build_owner_pipeline().enforce(context)

    return dependency
