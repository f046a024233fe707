"""Use case for study sessions."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog

from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.application.learning.use_cases.review_flashcard_use_case import (
    ReviewFlashcardUseCase,
)
from lingocards.domain.common.exceptions import ValidationError
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.services import study_planner
from lingocards.domain.learning.services.review_scheduler import ReviewOutcome
from lingocards.utils import utc_now

logger = structlog.get_logger(__name__)

MAX_SESSION_SIZE = 50
MAX_DUE_LIMIT = 100


@dataclass(frozen=True)
class StudySession:
    cards: list[study_planner.PrioritizedCard]
    metadata: study_planner.SessionMetadata


@dataclass(frozen=True)
class SessionProgress:
    reviewed_today: int
    remaining_due: int
    time_spent: float | None


@dataclass(frozen=True)
class CompletedSession:
    summary: study_planner.SessionSummary
    session_duration: float | None
    stats: study_planner.DeckStats


class StudySessionUseCase:
    """Builds study sessions and tracks progress through them."""

    def __init__(
        self,
        flashcard_repository: FlashcardRepositoryProtocol,
        review_use_case: ReviewFlashcardUseCase,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.flashcard_repository = flashcard_repository
        self.review_use_case = review_use_case
        self.clock = clock

    def get_session(self, user_id: int, limit: int = 20) -> StudySession:
        """
        The highest-priority cards of the user's deck.

        Raises:
            ValidationError: If limit is outside 1..MAX_SESSION_SIZE
        """
        _check_limit(limit, MAX_SESSION_SIZE)
        cards = self._deck(user_id)
        ranked = study_planner.prioritize(cards, self.clock(), limit)
        logger.info("study_session_built", user_id=user_id, cards=len(ranked))
        return StudySession(cards=ranked, metadata=study_planner.session_metadata(ranked))

    def get_due(self, user_id: int, limit: int = 50) -> study_planner.DueCards:
        """
        Raises:
            ValidationError: If limit is outside 1..MAX_DUE_LIMIT
        """
        _check_limit(limit, MAX_DUE_LIMIT)
        return study_planner.classify_due(self._deck(user_id), self.clock(), limit)

    def review(
        self, flashcard_id: int, user_id: int, rating: object, time_spent: float | None = None
    ) -> tuple[Flashcard, ReviewOutcome, SessionProgress]:
        """
        Review a card inside a study session and report session progress.

        Raises:
            ValidationError: If time_spent is negative
            FlashcardNotFoundError: If not found or not owned by the user
            InvalidPerformanceRatingError: If the rating is not an integer in 1..5
        """
        if time_spent is not None and time_spent < 0:
            raise ValidationError(
                "Time spent must be a non-negative number", field="time_spent", value=time_spent
            )

        flashcard, outcome = self.review_use_case.review_flashcard(flashcard_id, user_id, rating)
        return flashcard, outcome, self._progress(user_id, time_spent)

    def complete_session(
        self,
        user_id: int,
        ratings: Sequence[object],
        session_duration: float | None = None,
    ) -> CompletedSession:
        """
        Summarize a finished session.

        Raises:
            ValidationError: If a rating is invalid or the duration is negative
        """
        if session_duration is not None and session_duration < 0:
            raise ValidationError(
                "Session duration must be a non-negative number",
                field="session_duration",
                value=session_duration,
            )
        summary = study_planner.summarize_session(ratings)
        stats = study_planner.deck_stats(self._deck(user_id), self.clock())
        logger.info(
            "study_session_completed",
            user_id=user_id,
            cards_reviewed=summary.cards_reviewed,
            accuracy_rate=summary.accuracy_rate,
        )
        return CompletedSession(summary=summary, session_duration=session_duration, stats=stats)

    def get_recommendations(self, user_id: int) -> list[study_planner.Recommendation]:
        stats = study_planner.deck_stats(self._deck(user_id), self.clock())
        return study_planner.recommendations(stats)

    def _deck(self, user_id: int) -> list[Flashcard]:
        return self.flashcard_repository.find_by_user(UserId(user_id))

    def _progress(self, user_id: int, time_spent: float | None) -> SessionProgress:
        now = self.clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        due = study_planner.classify_due(self._deck(user_id), now)
        return SessionProgress(
            reviewed_today=self.flashcard_repository.count_reviewed_since(
                start_of_day, UserId(user_id)
            ),
            remaining_due=len(due.due) + len(due.overdue),
            time_spent=time_spent,
        )


def _check_limit(limit: int, maximum: int) -> None:
    if not 1 <= limit <= maximum:
        raise ValidationError(
            f"Limit must be between 1 and {maximum}", field="limit", value=limit
        )
