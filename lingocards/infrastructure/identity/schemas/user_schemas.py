"""Pydantic schemas for account and administration endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from lingocards.domain.identity.entities.user import User


class UserDetailsResponse(BaseModel):
    """Schema for returning user details."""

    id: int = Field(..., description="User id")
    email: str = Field(..., description="Email address")
    role: Literal["user", "admin"] = Field(..., description="Account role")
    created_at: datetime | None = Field(None, description="When the account was created")
    updated_at: datetime | None = Field(None, description="When the account last changed")

    @classmethod
    def from_entity(cls, user: User) -> "UserDetailsResponse":
        return cls(
            id=user.id.value,
            email=user.email,
            role=user.role.value,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserRegisterRequest(BaseModel):
    """Schema for user registration."""

    email: str = Field(..., min_length=1, max_length=100, description="Email for the new account")
    password: str = Field(..., min_length=1, description="Password")


class UserUpdateRequest(BaseModel):
    """Schema for updating the caller's own profile."""

    email: str | None = Field(None, min_length=1, max_length=100, description="New email")
    current_password: str | None = Field(
        None, min_length=1, description="Current password (required when changing password)"
    )
    new_password: str | None = Field(None, min_length=1, description="New password")


class AccountDeleteResponse(BaseModel):
    success: bool = Field(..., description="Whether the deletion was successful")
    message: str = Field(..., description="Response message")
    flashcards_deleted: int = Field(..., description="Flashcards removed with the account")


class AdminUserResponse(UserDetailsResponse):
    """User details as seen by an administrator."""

    flashcard_count: int = Field(..., description="Number of flashcards the user owns")


class AdminUserListResponse(BaseModel):
    """One page of users."""

    items: list[AdminUserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class AdminUserUpdateRequest(BaseModel):
    email: str | None = Field(None, min_length=1, max_length=100, description="New email")
    role: str | None = Field(None, description="New role: user or admin")


class AdminPasswordResetRequest(BaseModel):
    new_password: str = Field(..., min_length=1, description="Password to set")


class AdminActionResponse(BaseModel):
    success: bool = Field(..., description="Whether the action was successful")
    message: str = Field(..., description="Response message")


class AdminUserActionResponse(AdminActionResponse):
    user: UserDetailsResponse = Field(..., description="User after the action")


class AdminDeleteResponse(AdminActionResponse):
    deleted_count: int = Field(..., description="Number of flashcards removed")


class SystemHealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    database: Literal["connected", "unavailable"]
    users: int
    flashcards: int
    version: str
    environment: str


class TokenVerificationResponse(BaseModel):
    valid: bool = Field(..., description="Whether the bearer token verified")
    user: UserDetailsResponse
    expires_at: datetime = Field(..., description="When the access token expires")


class AccessTokenInfo(BaseModel):
    expires_at: datetime
    expires_in: int = Field(..., description="Seconds until the access token expires")
    is_expired: bool


class SessionInfoResponse(BaseModel):
    """Schema for the current session: who is signed in and how long the tokens last."""

    user: UserDetailsResponse
    access_token: AccessTokenInfo
    refresh_token_available: bool = Field(
        ..., description="Whether a refresh token cookie came with the request"
    )
