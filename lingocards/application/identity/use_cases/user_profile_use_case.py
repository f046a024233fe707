"""Use case for a user managing their own account."""

import structlog

from lingocards.application.identity.protocols.password_service import PasswordServiceProtocol
from lingocards.application.identity.protocols.user_repository import UserRepositoryProtocol
from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import User
from lingocards.domain.identity.exceptions import (
    PasswordVerificationError,
    UserNotFoundError,
    WeakPasswordError,
)

logger = structlog.get_logger(__name__)


class UserProfileUseCase:
    """Profile changes and account deletion for the signed-in user."""

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

    def update_user(
        self,
        user_id: int,
        email: str | None = None,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> User:
        """
        Update the user's email and/or password.

        Args:
            user_id: ID of the user to update
            email: New email address (optional)
            current_password: Required when changing the password
            new_password: New password (optional)

        Raises:
            UserNotFoundError: If user is not found
            PasswordVerificationError: If current_password is missing or incorrect
            ValidationError: If the new email or password is invalid
            EmailAlreadyExistsError: If the new email belongs to another account
        """
        user = self.user_repository.find_by_id(UserId(user_id))
        if not user:
            raise UserNotFoundError(user_id)

        if email is not None:
            user.update_email(email)

        if new_password is not None:
            if current_password is None:
                raise PasswordVerificationError
            if not user.hashed_password or not self.password_service.verify_password(
                current_password, user.hashed_password
            ):
                raise PasswordVerificationError
            if len(new_password) < self.password_min_length:
                raise WeakPasswordError(self.password_min_length)
            user.update_password(self.password_service.hash_password(new_password))

        user = self.user_repository.save(user)
        logger.info(
            "user_profile_updated",
            user_id=user_id,
            email_changed=email is not None,
            password_changed=new_password is not None,
        )
        return user

    def delete_account(self, user_id: int) -> int:
        """
        Delete the user and all of their flashcards.

        Returns:
            Number of flashcards removed with the account
        """
        uid = UserId(user_id)
        if not self.user_repository.find_by_id(uid):
            raise UserNotFoundError(user_id)

        deleted_cards = self.flashcard_repository.delete_all_by_user(uid)
        self.user_repository.delete(uid)
        logger.info("user_account_deleted", user_id=user_id, flashcards_deleted=deleted_cards)
        return deleted_cards
