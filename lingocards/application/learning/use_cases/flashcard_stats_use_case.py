"""Use case for deck and system statistics."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from lingocards.application.identity.protocols.user_repository import UserRepositoryProtocol
from lingocards.application.learning.protocols.flashcard_repository import (
    FlashcardRepositoryProtocol,
)
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import Role
from lingocards.domain.identity.exceptions import UserNotFoundError
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.services import study_planner
from lingocards.utils import utc_now


@dataclass(frozen=True)
class UserStats:
    deck: study_planner.DeckStats
    recommendations: list[study_planner.Recommendation]
    generated_at: datetime


@dataclass(frozen=True)
class SystemStats:
    total_users: int
    admin_users: int
    total_flashcards: int
    users_with_flashcards: int
    reviewed_last_week: int
    reviewed_last_month: int
    average_difficulty: float


class FlashcardStatsUseCase:
    def __init__(
        self,
        flashcard_repository: FlashcardRepositoryProtocol,
        user_repository: UserRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.flashcard_repository = flashcard_repository
        self.user_repository = user_repository
        self.clock = clock

    def user_stats(self, user_id: int) -> UserStats:
        """
        Raises:
            UserNotFoundError: If the user does not exist
        """
        now = self.clock()
        deck = study_planner.deck_stats(self._load_deck(user_id), now)
        return UserStats(
            deck=deck,
            recommendations=study_planner.recommendations(deck),
            generated_at=now,
        )

    def performance(
        self, user_id: int, period_days: int, metric: str
    ) -> study_planner.PerformanceReport:
        """
        Raises:
            UserNotFoundError: If the user does not exist
            ValidationError: If the period or metric is not supported
        """
        return study_planner.performance_report(
            self._load_deck(user_id), self.clock(), period_days, metric
        )

    def _load_deck(self, user_id: int) -> list[Flashcard]:
        uid = UserId(user_id)
        if not self.user_repository.find_by_id(uid):
            raise UserNotFoundError(user_id)
        return self.flashcard_repository.find_by_user(uid)

    def system_stats(self) -> SystemStats:
        now = self.clock()
        return SystemStats(
            total_users=self.user_repository.count(),
            admin_users=self.user_repository.count(role=Role.ADMIN.value),
            total_flashcards=self.flashcard_repository.count_all(),
            users_with_flashcards=self.flashcard_repository.count_owners(),
            reviewed_last_week=self.flashcard_repository.count_reviewed_since(
                now - timedelta(days=7)
            ),
            reviewed_last_month=self.flashcard_repository.count_reviewed_since(
                now - timedelta(days=30)
            ),
            average_difficulty=self.flashcard_repository.average_difficulty(),
        )
