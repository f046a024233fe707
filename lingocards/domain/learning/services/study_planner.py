"""
Study planning over a user's deck.

Pure functions that rank cards for a session, classify what is due, and
summarize deck and session statistics. No persistence, no clock: callers
pass `now` explicitly.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from lingocards.domain.common.exceptions import ValidationError
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.services.review_scheduler import (
    MAX_DIFFICULTY,
    MAX_RATING,
    MIN_DIFFICULTY,
    MIN_RATING,
    validate_rating,
)

BASE_PRIORITY = 100
NEW_CARD_BONUS = 50
DIFFICULTY_WEIGHT = 10
DAYS_SINCE_REVIEW_WEIGHT = 2
MAX_STALENESS_BONUS = 40
YOUNG_CARD_REVIEWS = 3
YOUNG_CARD_BONUS = 10

SECONDS_PER_CARD = 30
CORRECT_RATING_THRESHOLD = 3

OVERDUE_ALERT_THRESHOLD = 5
NEW_CARDS_ALERT_THRESHOLD = 20
EASY_DECK_DIFFICULTY = 2
MAINTENANCE_REVIEW_THRESHOLD = 100
MAINTENANCE_LOAD_THRESHOLD = 5

PERFORMANCE_PERIODS = (7, 30, 90, 365)
PERFORMANCE_METRICS = ("reviews", "difficulty", "accuracy")
MASTERY_DIFFICULTY = 2
STRUGGLING_DIFFICULTY = 3
DEDICATION_REVIEWS = 100


@dataclass(frozen=True)
class PrioritizedCard:
    flashcard: Flashcard
    priority: int


@dataclass(frozen=True)
class DueCards:
    due: list[Flashcard]
    overdue: list[Flashcard]
    new: list[Flashcard]

    @property
    def total(self) -> int:
        return len(self.due) + len(self.overdue) + len(self.new)


@dataclass(frozen=True)
class Recommendation:
    type: str
    priority: str
    message: str


@dataclass(frozen=True)
class DeckStats:
    total_cards: int
    reviewed_cards: int
    new_cards: int
    total_reviews: int
    average_difficulty: float
    difficulty_distribution: dict[int, int]
    due_cards: int
    overdue_cards: int
    last_study_session: datetime | None = None

    @property
    def completion_rate(self) -> float:
        """Percentage of the deck reviewed at least once."""
        if not self.total_cards:
            return 0.0
        return round(self.reviewed_cards / self.total_cards * 100, 1)

    @property
    def study_load(self) -> int:
        """Cards needing attention now. The due, overdue and new buckets never overlap."""
        return self.due_cards + self.overdue_cards + self.new_cards


@dataclass(frozen=True)
class Insight:
    type: str
    message: str


@dataclass(frozen=True)
class PerformanceReport:
    period_days: int
    metric: str
    stats: DeckStats
    reviewed_in_period: int
    study_streak: int
    insights: list[Insight]
    generated_at: datetime


@dataclass(frozen=True)
class SessionMetadata:
    total_cards: int
    new_cards: int
    review_cards: int
    average_difficulty: float
    estimated_minutes: int


@dataclass(frozen=True)
class SessionSummary:
    cards_reviewed: int
    average_performance: float
    accuracy_rate: float
    performance_breakdown: dict[int, int] = field(default_factory=dict)


def study_priority(card: Flashcard, now: datetime) -> int:
    """
    Score a card for inclusion in a study session, higher first.

    New cards and cards that have not been seen in a while rise; cards the
    learner already finds hard sink so a session does not open on a wall of them.
    """
    priority = BASE_PRIORITY - card.difficulty * DIFFICULTY_WEIGHT

    if card.last_reviewed is None:
        priority += NEW_CARD_BONUS
    else:
        days_since = max(0, (now - card.last_reviewed).days)
        priority += min(days_since * DAYS_SINCE_REVIEW_WEIGHT, MAX_STALENESS_BONUS)

    if card.review_count < YOUNG_CARD_REVIEWS:
        priority += YOUNG_CARD_BONUS

    return priority


def prioritize(cards: Iterable[Flashcard], now: datetime, limit: int) -> list[PrioritizedCard]:
    """Rank cards by priority (ties broken by id) and keep the top `limit`."""
    ranked = sorted(
        (PrioritizedCard(card, study_priority(card, now)) for card in cards),
        key=lambda item: (-item.priority, item.flashcard.id.value),
    )
    return ranked[:limit]


def session_metadata(cards: Sequence[PrioritizedCard]) -> SessionMetadata:
    total = len(cards)
    new = sum(1 for item in cards if item.flashcard.is_new)
    average = sum(item.flashcard.difficulty for item in cards) / total if total else 0.0
    return SessionMetadata(
        total_cards=total,
        new_cards=new,
        review_cards=total - new,
        average_difficulty=round(average, 2),
        estimated_minutes=-(-total * SECONDS_PER_CARD // 60),
    )


def classify_due(cards: Iterable[Flashcard], now: datetime, limit: int | None = None) -> DueCards:
    """
    Split a deck into cards due today, overdue cards and never-reviewed cards.

    Cards scheduled in the future are left out. Each bucket is ordered by
    next_review (new cards by id) and capped at `limit`.
    """
    due: list[Flashcard] = []
    overdue: list[Flashcard] = []
    new: list[Flashcard] = []
    for card in cards:
        if card.is_new:
            new.append(card)
        elif card.is_overdue(now):
            overdue.append(card)
        elif card.is_due(now):
            due.append(card)

    due.sort(key=lambda c: c.next_review or now)
    overdue.sort(key=lambda c: c.next_review or now)
    new.sort(key=lambda c: c.id.value)
    if limit is not None:
        due, overdue, new = due[:limit], overdue[:limit], new[:limit]
    return DueCards(due=due, overdue=overdue, new=new)


def deck_stats(cards: Sequence[Flashcard], now: datetime) -> DeckStats:
    distribution = dict.fromkeys(range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1), 0)
    for card in cards:
        distribution[card.difficulty] = distribution.get(card.difficulty, 0) + 1

    reviewed = [card for card in cards if not card.is_new]
    # Average over reviewed cards only, new cards all sit at 0
    average = sum(card.difficulty for card in reviewed) / len(reviewed) if reviewed else 0.0
    buckets = classify_due(cards, now)

    return DeckStats(
        total_cards=len(cards),
        reviewed_cards=len(reviewed),
        new_cards=len(buckets.new),
        total_reviews=sum(card.review_count for card in cards),
        average_difficulty=round(average, 2),
        difficulty_distribution=distribution,
        due_cards=len(buckets.due),
        overdue_cards=len(buckets.overdue),
        last_study_session=max(
            (card.last_reviewed for card in reviewed if card.last_reviewed), default=None
        ),
    )


def recommendations(stats: DeckStats) -> list[Recommendation]:
    """Study advice derived from deck statistics, most urgent first."""
    if stats.total_cards == 0:
        return [
            Recommendation(
                type="create_cards",
                priority="medium",
                message="Your deck is empty. Add a few flashcards to start studying.",
            )
        ]

    advice: list[Recommendation] = []
    if stats.overdue_cards > OVERDUE_ALERT_THRESHOLD:
        advice.append(
            Recommendation(
                type="review_overdue",
                priority="high",
                message=f"You have {stats.overdue_cards} overdue cards. Review them first.",
            )
        )
    if stats.new_cards > NEW_CARDS_ALERT_THRESHOLD:
        advice.append(
            Recommendation(
                type="learn_new",
                priority="medium",
                message=f"{stats.new_cards} cards have never been studied. "
                "Work through some of them today.",
            )
        )
    if stats.reviewed_cards > 0 and stats.average_difficulty < EASY_DECK_DIFFICULTY:
        advice.append(
            Recommendation(
                type="add_challenge",
                priority="low",
                message="Your cards are getting easy. Consider adding harder vocabulary.",
            )
        )
    if (
        stats.total_reviews > MAINTENANCE_REVIEW_THRESHOLD
        and stats.study_load < MAINTENANCE_LOAD_THRESHOLD
    ):
        advice.append(
            Recommendation(
                type="maintenance",
                priority="low",
                message="You're on top of your reviews. A short daily session keeps it that way.",
            )
        )
    return advice


def summarize_session(ratings: Sequence[object]) -> SessionSummary:
    """
    Aggregate the ratings given during a study session.

    Raises:
        InvalidPerformanceRatingError: If any rating is not an integer in 1..5
    """
    valid = [validate_rating(rating) for rating in ratings]
    breakdown = dict.fromkeys(range(MIN_RATING, MAX_RATING + 1), 0)
    for rating in valid:
        breakdown[rating] += 1

    if not valid:
        return SessionSummary(
            cards_reviewed=0,
            average_performance=0.0,
            accuracy_rate=0.0,
            performance_breakdown=breakdown,
        )

    correct = sum(1 for rating in valid if rating >= CORRECT_RATING_THRESHOLD)
    return SessionSummary(
        cards_reviewed=len(valid),
        average_performance=round(sum(valid) / len(valid), 2),
        accuracy_rate=round(correct / len(valid) * 100, 1),
        performance_breakdown=breakdown,
    )


def study_streak(last_study_session: datetime | None, now: datetime) -> int:
    """1 while the learner has studied within the last day, otherwise 0."""
    if last_study_session is None:
        return 0
    return 1 if (now - last_study_session).days <= 1 else 0


def performance_insights(stats: DeckStats) -> list[Insight]:
    insights: list[Insight] = []
    if stats.reviewed_cards and stats.average_difficulty < MASTERY_DIFFICULTY:
        insights.append(
            Insight(type="positive", message="Your cards have low difficulty. Great mastery!")
        )
    elif stats.average_difficulty > STRUGGLING_DIFFICULTY:
        insights.append(
            Insight(
                type="suggestion",
                message="Consider reviewing challenging cards more frequently.",
            )
        )
    if stats.total_reviews > DEDICATION_REVIEWS:
        insights.append(
            Insight(
                type="achievement",
                message=f"You've completed over {DEDICATION_REVIEWS} reviews. "
                "Excellent dedication!",
            )
        )
    return insights


def performance_report(
    cards: Sequence[Flashcard], now: datetime, period_days: int, metric: str
) -> PerformanceReport:
    """
    Performance over a look-back window of `period_days`.

    Raises:
        ValidationError: If the period or metric is not one of the supported values
    """
    if period_days not in PERFORMANCE_PERIODS:
        allowed = ", ".join(str(p) for p in PERFORMANCE_PERIODS)
        raise ValidationError(
            f"Period must be one of: {allowed} days", field="period", value=period_days
        )
    if metric not in PERFORMANCE_METRICS:
        raise ValidationError(
            f"Metric must be one of: {', '.join(PERFORMANCE_METRICS)}", field="metric", value=metric
        )

    stats = deck_stats(cards, now)
    since = now - timedelta(days=period_days)
    return PerformanceReport(
        period_days=period_days,
        metric=metric,
        stats=stats,
        reviewed_in_period=sum(
            1 for card in cards if card.last_reviewed is not None and card.last_reviewed >= since
        ),
        study_streak=study_streak(stats.last_study_session, now),
        insights=performance_insights(stats),
        generated_at=now,
    )
