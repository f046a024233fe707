"""Identity context schemas."""

from lingocards.infrastructure.identity.schemas.user_schemas import (
    AccessTokenInfo,
    AccountDeleteResponse,
    AdminActionResponse,
    AdminDeleteResponse,
    AdminPasswordResetRequest,
    AdminUserActionResponse,
    AdminUserListResponse,
    AdminUserResponse,
    AdminUserUpdateRequest,
    SessionInfoResponse,
    SystemHealthResponse,
    TokenVerificationResponse,
    UserDetailsResponse,
    UserRegisterRequest,
    UserUpdateRequest,
)

__all__ = [
    "AccessTokenInfo",
    "AccountDeleteResponse",
    "AdminActionResponse",
    "AdminDeleteResponse",
    "AdminPasswordResetRequest",
    "AdminUserActionResponse",
    "AdminUserListResponse",
    "AdminUserResponse",
    "AdminUserUpdateRequest",
    "SessionInfoResponse",
    "SystemHealthResponse",
    "TokenVerificationResponse",
    "UserDetailsResponse",
    "UserRegisterRequest",
    "UserUpdateRequest",
]
