"""Use case for authentication operations."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from lingocards.application.identity.protocols.password_service import PasswordServiceProtocol
from lingocards.application.identity.protocols.token_service import TokenServiceProtocol
from lingocards.application.identity.protocols.user_repository import UserRepositoryProtocol
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import User
from lingocards.domain.identity.exceptions import InvalidCredentialsError, UserNotFoundError
from lingocards.infrastructure.identity.services.token_service import TokenWithRefresh
from lingocards.utils import utc_now

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AccessTokenStatus:
    expires_at: datetime
    expires_in: int
    is_expired: bool


class AuthenticationUseCase:
    """Login, token refresh and token-to-user resolution."""

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        token_service: TokenServiceProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.user_repository = user_repository
        self.password_service = password_service
        self.token_service = token_service
        self.clock = clock

    def authenticate_user(self, email: str, password: str) -> tuple[User, TokenWithRefresh]:
        """
        Authenticate a user with email and password.

        Args:
            email: User's email address
            password: User's plain text password

        Returns:
            Tuple of (authenticated user, token pair)

        Raises:
            InvalidCredentialsError: If credentials are invalid
        """
        user = self.user_repository.find_by_email(email)

        if not user:
            # Same hashing cost as a real account, so response time does not reveal emails
            self.password_service.verify_password(password, self.password_service.get_dummy_hash())
            raise InvalidCredentialsError

        if not user.hashed_password or not self.password_service.verify_password(
            password, user.hashed_password
        ):
            logger.info("login_failed", user_id=user.id.value)
            raise InvalidCredentialsError

        token_pair = self.token_service.create_token_pair(user.id.value)
        logger.info("user_authenticated", user_id=user.id.value, role=user.role.value)
        return user, token_pair

    def refresh_access_token(self, refresh_token: str) -> tuple[User, TokenWithRefresh]:
        """
        Issue a new token pair from a refresh token.

        Raises:
            InvalidCredentialsError: If refresh token is invalid or user not found
        """
        user_id = self.token_service.verify_refresh_token(refresh_token)
        if user_id is None:
            raise InvalidCredentialsError

        user = self.user_repository.find_by_id(UserId(user_id))
        if not user:
            raise InvalidCredentialsError

        token_pair = self.token_service.create_token_pair(user.id.value)
        logger.info("access_token_refreshed", user_id=user.id.value)
        return user, token_pair

    def get_user_from_access_token(self, access_token: str) -> User:
        """
        Resolve the account behind a bearer token.

        Raises:
            InvalidCredentialsError: If the token is invalid or its user is gone
        """
        user_id = self.token_service.verify_access_token(access_token)
        if user_id is None:
            raise InvalidCredentialsError
        try:
            return self.get_user_by_id(user_id)
        except UserNotFoundError:
            raise InvalidCredentialsError from None

    def get_access_token_status(self, access_token: str) -> AccessTokenStatus:
        """
        Report when a bearer token expires and how long it has left.

        Raises:
            InvalidCredentialsError: If the token does not verify
        """
        expires_at = self.token_service.access_token_expiry(access_token)
        if expires_at is None:
            raise InvalidCredentialsError
        remaining = (expires_at - self.clock()).total_seconds()
        return AccessTokenStatus(
            expires_at=expires_at,
            expires_in=max(0, int(remaining)),
            is_expired=remaining <= 0,
        )

    def get_user_by_id(self, user_id: int) -> User:
        """
        Raises:
            UserNotFoundError: If user is not found
        """
        user = self.user_repository.find_by_id(UserId(user_id))
        if not user:
            raise UserNotFoundError(user_id)
        return user
