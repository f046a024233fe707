"""Use case for flashcard management."""

from dataclasses import dataclass

import structlog

from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.domain.common.exceptions import ValidationError
from lingocards.domain.common.value_objects.ids import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.exceptions import FlashcardNotFoundError

logger = structlog.get_logger(__name__)

MAX_IMPORT_SIZE = 100
SORT_FIELDS = (
    "created_at",
    "updated_at",
    "difficulty",
    "review_count",
    "last_reviewed",
    "next_review",
    "english",
    "spanish",
)
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ImportItemResult:
    index: int
    success: bool
    flashcard: Flashcard | None = None
    error: str | None = None


@dataclass(frozen=True)
class ImportResult:
    results: list[ImportItemResult]

    @property
    def imported(self) -> int:
        return sum(1 for item in self.results if item.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.imported


class FlashcardUseCase:
    """Create, read, update, delete and import a user's flashcards."""

    def __init__(
        self,
        flashcard_repository: FlashcardRepositoryProtocol,
        max_text_length: int,
    ) -> None:
        self.flashcard_repository = flashcard_repository
        self.max_text_length = max_text_length

    def create_flashcard(self, user_id: int, english: str, spanish: str) -> Flashcard:
        """
        Create a flashcard owned by the user.

        Raises:
            ValidationError: If either side is blank or too long
        """
        flashcard = Flashcard.create(
            user_id=UserId(user_id),
            english=english,
            spanish=spanish,
            max_length=self.max_text_length,
        )
        flashcard = self.flashcard_repository.save(flashcard)
        logger.info("flashcard_created", flashcard_id=flashcard.id.value, user_id=user_id)
        return flashcard

    def get_flashcard(self, flashcard_id: int, user_id: int) -> Flashcard:
        """
        Raises:
            FlashcardNotFoundError: If the card does not exist or belongs to someone else
        """
        flashcard = self.flashcard_repository.find_by_id(FlashcardId(flashcard_id), UserId(user_id))
        if not flashcard:
            raise FlashcardNotFoundError(flashcard_id)
        return flashcard

    def list_flashcards(
        self,
        user_id: int,
        order_by: str = "created_at",
        order: str = "desc",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Flashcard]:
        """
        Raises:
            ValidationError: If order_by or order is not supported
        """
        if order_by not in SORT_FIELDS:
            raise ValidationError(
                f"order_by must be one of: {', '.join(SORT_FIELDS)}",
                field="order_by",
                value=order_by,
            )
        normalized_order = order.lower()
        if normalized_order not in SORT_ORDERS:
            raise ValidationError("order must be 'asc' or 'desc'", field="order", value=order)

        return self.flashcard_repository.find_by_user(
            UserId(user_id),
            order_by=order_by,
            descending=normalized_order == "desc",
            limit=limit,
            offset=offset,
        )

    def count_flashcards(self, user_id: int) -> int:
        return self.flashcard_repository.count_by_user(UserId(user_id))

    def update_flashcard(
        self,
        flashcard_id: int,
        user_id: int,
        english: str | None = None,
        spanish: str | None = None,
    ) -> Flashcard:
        """
        Change the text of a card. Review state is left untouched.

        Raises:
            FlashcardNotFoundError: If not found or not owned by the user
            ValidationError: If nothing is given or a side is invalid
        """
        flashcard = self.get_flashcard(flashcard_id, user_id)
        flashcard.update_text(english=english, spanish=spanish, max_length=self.max_text_length)
        flashcard = self.flashcard_repository.save(flashcard)
        logger.info("flashcard_updated", flashcard_id=flashcard_id, user_id=user_id)
        return flashcard

    def delete_flashcard(self, flashcard_id: int, user_id: int) -> None:
        """
        Raises:
            FlashcardNotFoundError: If not found or not owned by the user
        """
        if not self.flashcard_repository.delete(FlashcardId(flashcard_id), UserId(user_id)):
            raise FlashcardNotFoundError(flashcard_id)
        logger.info("flashcard_deleted", flashcard_id=flashcard_id, user_id=user_id)

    def import_flashcards(self, user_id: int, items: list[tuple[str, str]]) -> ImportResult:
        """
        Create many flashcards at once.

        Items are validated one by one; invalid items are reported and skipped,
        valid ones are saved together.

        Args:
            user_id: Owner of the new cards
            items: (english, spanish) pairs

        Raises:
            ValidationError: If the batch is empty or larger than MAX_IMPORT_SIZE
        """
        if not items:
            raise ValidationError("At least one flashcard is required", field="flashcards")
        if len(items) > MAX_IMPORT_SIZE:
            raise ValidationError(
                f"Cannot import more than {MAX_IMPORT_SIZE} flashcards at once",
                field="flashcards",
                value=len(items),
            )

        owner = UserId(user_id)
        pending: list[tuple[int, Flashcard]] = []
        failures: list[ImportItemResult] = []
        for index, (english, spanish) in enumerate(items):
            try:
                card = Flashcard.create(owner, english, spanish, max_length=self.max_text_length)
            except ValidationError as e:
                failures.append(ImportItemResult(index=index, success=False, error=e.message))
                continue
            pending.append((index, card))

        saved = self.flashcard_repository.add_many([card for _, card in pending]) if pending else []
        successes = [
            ImportItemResult(index=index, success=True, flashcard=card)
            for (index, _), card in zip(pending, saved, strict=True)
        ]

        result = ImportResult(results=sorted(successes + failures, key=lambda item: item.index))
        logger.info(
            "flashcards_imported",
            user_id=user_id,
            imported=result.imported,
            failed=result.failed,
        )
        return result
