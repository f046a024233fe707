"""Common infrastructure schemas."""

from lingocards.infrastructure.common.schemas.settings_schemas import AppSettingsResponse

__all__ = [
    "AppSettingsResponse",
]
