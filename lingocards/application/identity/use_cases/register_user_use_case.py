"""Use case for user registration."""

import structlog

from lingocards.application.identity.protocols.password_service import PasswordServiceProtocol
from lingocards.application.identity.protocols.token_service import TokenServiceProtocol
from lingocards.application.identity.protocols.user_repository import UserRepositoryProtocol
from lingocards.domain.identity.entities.user import Role, User
from lingocards.domain.identity.exceptions import (
    EmailAlreadyExistsError,
    RegistrationDisabledError,
    WeakPasswordError,
)
from lingocards.feature_flags import is_user_registrations_enabled
from lingocards.infrastructure.identity.services.token_service import TokenWithRefresh

logger = structlog.get_logger(__name__)


class RegisterUserUseCase:
    """Self-service sign-up and administrator seeding."""

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_service: TokenServiceProtocol,
        password_min_length: int,
    ) -> None:
        self.user_repository = user_repository
        self.password_service = password_service
        self.token_service = token_service
        self.password_min_length = password_min_length

    def register_user(self, email: str, password: str) -> tuple[User, TokenWithRefresh]:
        """
        Register a new user account and log it in.

        Returns:
            Tuple of (created user, token pair for immediate login)

        Raises:
            RegistrationDisabledError: If registration is disabled via feature flag
            ValidationError: If the email or password is invalid
            EmailAlreadyExistsError: If email is already registered
        """
        if not is_user_registrations_enabled():
            raise RegistrationDisabledError

        user = self._create(email, password, Role.USER)
        token_pair = self.token_service.create_token_pair(user.id.value)

        logger.info("user_registered", user_id=user.id.value)
        return user, token_pair

    def ensure_admin(self, email: str, password: str) -> User:
        """
        Make sure an administrator account exists for the given email.

        An existing account with that email is promoted; its password is left as is.
        """
        existing = self.user_repository.find_by_email(email)
        if existing:
            if not existing.is_admin:
                existing.change_role(Role.ADMIN)
                existing = self.user_repository.save(existing)
                logger.info("admin_promoted_on_startup", user_id=existing.id.value)
            return existing

        user = self._create(email, password, Role.ADMIN)
        logger.info("admin_created_on_startup", user_id=user.id.value)
        return user

    def _create(self, email: str, password: str, role: Role) -> User:
        if len(password or "") < self.password_min_length:
            raise WeakPasswordError(self.password_min_length)

        user = User.create(email=email, role=role)
        if self.user_repository.find_by_email(user.email):
            raise EmailAlreadyExistsError(user.email)

        user.update_password(self.password_service.hash_password(password))
        return self.user_repository.save(user)
