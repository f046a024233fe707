"""Use case for administrator management of user accounts."""

from dataclasses import dataclass

import structlog

from lingocards.application.common.pagination import PaginatedResult, Pagination
from lingocards.application.identity.protocols.password_service import PasswordServiceProtocol
from lingocards.application.identity.protocols.user_repository import UserRepositoryProtocol
from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import Role, User, parse_role
from lingocards.domain.identity.exceptions import UserNotFoundError, WeakPasswordError
from lingocards.domain.learning.entities.flashcard import Flashcard

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UserOverview:
    user: User
    flashcard_count: int


class AdminUserUseCase:
    """
    User administration.

    Access control (admin role, self-harm rules) is applied by the access
    pipeline before any of these methods is reached.
    """

    def __init__(
        self,
        user_repository: UserRepositoryProtocol,
        flashcard_repository: FlashcardRepositoryProtocol,
        password_service: PasswordServiceProtocol,
        password_min_length: int,
    ) -> None:
        self.user_repository = user_repository
        self.flashcard_repository = flashcard_repository
        self.password_service = password_service
        self.password_min_length = password_min_length

    def list_users(
        self, pagination: Pagination, role: str | None = None, search: str | None = None
    ) -> PaginatedResult[UserOverview]:
        """
        One page of users with their flashcard counts.

        Raises:
            ValidationError: If role is not a known role
        """
        if role is not None:
            role = parse_role(role).value
        users, total = self.user_repository.find_page(pagination, role=role, search=search)
        counts = self.flashcard_repository.count_by_users([user.id for user in users])
        items = [UserOverview(user, counts.get(user.id.value, 0)) for user in users]
        return PaginatedResult(items=items, total=total, pagination=pagination)

    def get_user(self, user_id: int) -> UserOverview:
        user = self._load(user_id)
        return UserOverview(user, self.flashcard_repository.count_by_user(user.id))

    def update_user(
        self, user_id: int, email: str | None = None, role: str | None = None
    ) -> UserOverview:
        """
        Raises:
            UserNotFoundError: If user is not found
            ValidationError: If email or role is invalid
            EmailAlreadyExistsError: If the email belongs to another account
        """
        user = self._load(user_id)
        if email is not None:
            user.update_email(email)
        if role is not None:
            user.change_role(role)
        user = self.user_repository.save(user)
        logger.info("admin_user_updated", user_id=user_id, role=user.role.value)
        return UserOverview(user, self.flashcard_repository.count_by_user(user.id))

    def set_role(self, user_id: int, role: Role) -> User:
        user = self._load(user_id)
        if user.role != role:
            user.change_role(role)
            user = self.user_repository.save(user)
        logger.info("admin_user_role_set", user_id=user_id, role=role.value)
        return user

    def delete_user(self, user_id: int) -> int:
        """
        Delete a user and cascade their flashcards.

        Returns:
            Number of flashcards removed
        """
        user = self._load(user_id)
        deleted_cards = self.flashcard_repository.delete_all_by_user(user.id)
        self.user_repository.delete(user.id)
        logger.info("admin_user_deleted", user_id=user_id, flashcards_deleted=deleted_cards)
        return deleted_cards

    def reset_password(self, user_id: int, new_password: str) -> User:
        """
        Raises:
            UserNotFoundError: If user is not found
            WeakPasswordError: If the password is too short
        """
        user = self._load(user_id)
        if len(new_password) < self.password_min_length:
            raise WeakPasswordError(self.password_min_length)
        user.update_password(self.password_service.hash_password(new_password))
        user = self.user_repository.save(user)
        logger.info("admin_password_reset", user_id=user_id)
        return user

    def list_user_flashcards(self, user_id: int) -> list[Flashcard]:
        user = self._load(user_id)
        return self.flashcard_repository.find_by_user(user.id)

    def delete_user_flashcards(self, user_id: int) -> int:
        user = self._load(user_id)
        deleted = self.flashcard_repository.delete_all_by_user(user.id)
        logger.info("admin_user_flashcards_deleted", user_id=user_id, count=deleted)
        return deleted

    def _load(self, user_id: int) -> User:
        user = self.user_repository.find_by_id(UserId(user_id))
        if not user:
            raise UserNotFoundError(user_id)
        return user
