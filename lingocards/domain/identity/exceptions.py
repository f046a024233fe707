"""Identity domain exceptions."""

from lingocards.domain.common.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)


class UserNotFoundError(EntityNotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, user_id: int) -> None:
        super().__init__("User", user_id)


class EmailAlreadyExistsError(DomainError):
    """Raised when attempting to register with an email that already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email {email} is already registered", {"email": email})
        self.email = email


class InvalidCredentialsError(DomainError):
    """Raised when authentication fails due to invalid credentials."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class PasswordVerificationError(ValidationError):
    """Raised when current password verification fails during password change."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect", field="current_password")


class WeakPasswordError(ValidationError):
    """Raised when a new password is shorter than the configured minimum."""

    def __init__(self, min_length: int) -> None:
        super().__init__(
            f"Password must be at least {min_length} characters long", field="password"
        )


class RegistrationDisabledError(AuthorizationError):
    """Raised when user registration is disabled via feature flag."""

    def __init__(self) -> None:
        super().__init__("User registration is currently disabled")


class SelfManagementError(BusinessRuleViolationError):
    """Raised when an administrator tries a destructive action on their own account."""

    def __init__(self, action: str, description: str) -> None:
        super().__init__("admin_self_harm", f"Administrators cannot {description}")
        self.action = action
