"""Role and ownership checks for authenticated users."""

from lingocards.domain.identity.entities.user import Role, User


class AuthorizationService:
    """Answers who may do what. Injected wherever access decisions are made."""

    def is_admin(self, user: User) -> bool:
        return user.is_admin

    def has_role(self, user: User, role: str) -> bool:
        # Admins implicitly hold every role
        return user.has_role(role) or user.role == Role.ADMIN

    def can_access_user_resource(self, user: User, target_user_id: int) -> bool:
        """Admins may access any user's resources, everyone else only their own."""
        return self.is_admin(user) or user.id.value == target_user_id
