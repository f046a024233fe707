"""Feature flags module for centralized feature toggle management."""

from typing import Literal

from pydantic import BaseModel, Field

from lingocards.config import get_settings


class FeatureFlags(BaseModel):
    """All feature flags exposed to clients."""

    user_registrations: bool = Field(..., description="Whether user registration is enabled")
    rate_limiting: bool = Field(..., description="Whether auth endpoints are rate limited")


FeatureFlagKey = Literal["user_registrations", "rate_limiting"]


def get_feature_flags() -> FeatureFlags:
    """Current feature flags derived from application configuration."""
    settings = get_settings()

    return FeatureFlags(
        user_registrations=settings.ALLOW_USER_REGISTRATIONS,
        rate_limiting=settings.RATE_LIMIT_ENABLED,
    )


def get_feature_flag(key: FeatureFlagKey) -> bool:
    flags = get_feature_flags()
    return getattr(flags, key)


def is_user_registrations_enabled() -> bool:
    return get_feature_flag("user_registrations")


def is_rate_limiting_enabled() -> bool:
    return get_feature_flag("rate_limiting")
