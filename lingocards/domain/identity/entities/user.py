"""User entity for identity management."""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from lingocards.domain.common.entity import Entity
from lingocards.domain.common.exceptions import ValidationError
from lingocards.domain.common.value_objects.ids import UserId

MAX_EMAIL_LENGTH = 100
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"


def normalize_email(email: str) -> str:
    """
    Lower-case and trim an email address and check its shape.

    Raises:
        ValidationError: If the email is empty, too long or malformed
    """
    cleaned = (email or "").strip().lower()
    if not cleaned:
        raise ValidationError("Email cannot be empty", field="email")
    if len(cleaned) > MAX_EMAIL_LENGTH:
        raise ValidationError(
            f"Email cannot exceed {MAX_EMAIL_LENGTH} characters", field="email", value=cleaned
        )
    if not EMAIL_PATTERN.match(cleaned):
        raise ValidationError("Email address is not valid", field="email", value=cleaned)
    return cleaned


def parse_role(role: str) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise ValidationError(
            "Role must be one of: user, admin", field="role", value=role
        ) from None


@dataclass
class User(Entity[UserId]):
    """
    User entity representing an authenticated account.

    Business Rules:
    - Email is unique (enforced at repository level), trimmed and lower-cased
    - Role is either user or admin, new accounts are users
    - Password hashing is an infrastructure concern
    """

    id: UserId
    email: str
    hashed_password: str | None = None
    role: Role = Role.USER
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        self.email = normalize_email(self.email)
        self.role = parse_role(self.role)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def has_role(self, role: str) -> bool:
        return self.role == role

    def update_email(self, new_email: str) -> None:
        """
        Update the user's email address.

        Raises:
            ValidationError: If email is invalid
        """
        self.email = normalize_email(new_email)

    def update_password(self, new_hashed_password: str) -> None:
        """Replace the stored hash (hashing is done by infrastructure)."""
        self.hashed_password = new_hashed_password

    def change_role(self, role: str) -> None:
        self.role = parse_role(role)

    @classmethod
    def create(
        cls, email: str, hashed_password: str | None = None, role: str = Role.USER
    ) -> "User":
        """
        Create a new user (ID will be 0 until persisted).

        Raises:
            ValidationError: If email or role is invalid
        """
        return cls(
            id=UserId.generate(),
            email=email,
            hashed_password=hashed_password,
            role=parse_role(role),
        )

    @classmethod
    def create_with_id(
        cls,
        id: UserId,
        email: str,
        hashed_password: str | None,
        role: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        """Reconstitute a user from persistence."""
        return cls(
            id=id,
            email=email,
            hashed_password=hashed_password,
            role=parse_role(role),
            created_at=created_at,
            updated_at=updated_at,
        )
