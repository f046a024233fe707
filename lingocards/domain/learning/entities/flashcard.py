"""
Flashcard entity for bilingual vocabulary study.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from lingocards.domain.common.entity import Entity
from lingocards.domain.common.exceptions import InvariantViolationError, ValidationError
from lingocards.domain.common.value_objects import FlashcardId, UserId
from lingocards.domain.learning.services import review_scheduler
from lingocards.domain.learning.services.review_scheduler import ReviewOutcome

MAX_TEXT_LENGTH = 500
OVERDUE_GRACE = timedelta(days=1)


def clean_text(value: str, field: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Strip a side of the card and check it is usable.

    Raises:
        ValidationError: If the text is blank or longer than max_length
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field.capitalize()} text cannot be empty", field=field)
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field.capitalize()} text cannot exceed {max_length} characters", field=field
        )
    return cleaned


@dataclass
class Flashcard(Entity[FlashcardId]):
    """
    English/Spanish flashcard with its spaced repetition state.

    Business Rules:
    - Both sides are non-empty, trimmed and bounded in length
    - The owner never changes after creation
    - review_count == 0 exactly when last_reviewed is None
    - Difficulty stays within 0..5
    """

    id: FlashcardId
    user_id: UserId
    english: str
    spanish: str
    difficulty: int = 0
    review_count: int = 0
    last_reviewed: datetime | None = None
    next_review: datetime | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if (self.review_count == 0) != (self.last_reviewed is None):
            raise InvariantViolationError(
                "Flashcard", "review_count is zero exactly when last_reviewed is unset"
            )

    @property
    def is_new(self) -> bool:
        return self.review_count == 0

    def is_due(self, now: datetime) -> bool:
        """Reviewed cards are due once next_review has passed."""
        if self.is_new or self.next_review is None:
            return False
        return self.next_review <= now

    def is_overdue(self, now: datetime) -> bool:
        if self.is_new or self.next_review is None:
            return False
        return self.next_review + OVERDUE_GRACE < now

    def update_text(
        self,
        english: str | None = None,
        spanish: str | None = None,
        max_length: int = MAX_TEXT_LENGTH,
    ) -> None:
        """
        Update one or both sides of the card.

        Both values are validated before either is assigned.

        Raises:
            ValidationError: If nothing is given or a side is invalid
        """
        if english is None and spanish is None:
            raise ValidationError("At least one of english or spanish must be provided")
        new_english = clean_text(english, "english", max_length) if english is not None else None
        new_spanish = clean_text(spanish, "spanish", max_length) if spanish is not None else None
        if new_english is not None:
            self.english = new_english
        if new_spanish is not None:
            self.spanish = new_spanish

    def record_review(self, rating: object, now: datetime) -> ReviewOutcome:
        """
        Apply a review to this card.

        The scheduler validates the rating before anything on the card changes.

        Raises:
            InvalidPerformanceRatingError: If the rating is not an integer in 1..5
        """
        outcome = review_scheduler.review(self, rating, now)
        self.difficulty = outcome.difficulty
        self.review_count = outcome.review_count
        self.last_reviewed = outcome.last_reviewed
        self.next_review = outcome.next_review
        return outcome

    @classmethod
    def create(
        cls,
        user_id: UserId,
        english: str,
        spanish: str,
        max_length: int = MAX_TEXT_LENGTH,
    ) -> "Flashcard":
        """
        Create a new unreviewed flashcard (ID will be 0 until persisted).

        Raises:
            ValidationError: If either side is blank or too long
        """
        return cls(
            id=FlashcardId.generate(),
            user_id=user_id,
            english=clean_text(english, "english", max_length),
            spanish=clean_text(spanish, "spanish", max_length),
        )

    @classmethod
    def create_with_id(
        cls,
        id: FlashcardId,
        user_id: UserId,
        english: str,
        spanish: str,
        difficulty: int,
        review_count: int,
        last_reviewed: datetime | None,
        next_review: datetime | None,
        version: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Flashcard":
        """Reconstitute a flashcard from persistence."""
        return cls(
            id=id,
            user_id=user_id,
            english=english,
            spanish=spanish,
            difficulty=difficulty,
            review_count=review_count,
            last_reviewed=last_reviewed,
            next_review=next_review,
            version=version,
            created_at=created_at,
            updated_at=updated_at,
        )
