"""Use case for recording a flashcard review."""

from collections.abc import Callable
from datetime import datetime

import structlog

from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.domain.common.value_objects.ids import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.exceptions import FlashcardNotFoundError
from lingocards.domain.learning.services.review_scheduler import ReviewOutcome
from lingocards.utils import utc_now

logger = structlog.get_logger(__name__)


class ReviewFlashcardUseCase:
    """Loads an owned card, runs the scheduler on it and persists the result."""

    def __init__(
        self,
        flashcard_repository: FlashcardRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.flashcard_repository = flashcard_repository
        self.clock = clock

    def review_flashcard(
        self, flashcard_id: int, user_id: int, rating: object
    ) -> tuple[Flashcard, ReviewOutcome]:
        """
        Record a review of one of the user's flashcards.

        The card is looked up with the owner in the query, so a card belonging
        to someone else is indistinguishable from a missing one.

        Args:
            flashcard_id: Card to review
            user_id: Caller, who must own the card
            rating: Performance rating, an integer from 1 to 5

        Returns:
            Tuple of (saved flashcard, scheduling outcome)

        Raises:
            FlashcardNotFoundError: If not found or not owned by the user
            InvalidPerformanceRatingError: If the rating is not an integer in 1..5
            ConcurrencyConflictError: If the card was reviewed concurrently
        """
        flashcard = self.flashcard_repository.find_by_id(FlashcardId(flashcard_id), UserId(user_id))
        if not flashcard:
            raise FlashcardNotFoundError(flashcard_id)

        outcome = flashcard.record_review(rating, self.clock())
        saved = self.flashcard_repository.save(flashcard)

        logger.info(
            "flashcard_reviewed",
            flashcard_id=flashcard_id,
            user_id=user_id,
            rating=outcome.rating,
            difficulty=outcome.difficulty,
            review_count=outcome.review_count,
            interval_days=round(outcome.interval_days, 2),
        )
        return saved, outcome
