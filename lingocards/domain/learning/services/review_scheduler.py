"""
Spaced repetition scheduler.

Computes the next study state of a flashcard from its current state and a
performance rating. The computation is pure: it reads the state, never mutates
it, and returns a ReviewOutcome that the caller applies and persists.

Scale:
    difficulty 0 (easiest) .. 5 (hardest)
    rating     1 (forgot) .. 5 (perfect recall)

Interval growth follows an SM-2 style ease factor derived from the card's
difficulty. Each review multiplies the previously scheduled interval:

    rating 1 -> reset to 1 day
    rating 2 -> half the previous interval
    rating 3 -> previous * 1.2
    rating 4 -> previous * ease
    rating 5 -> previous * ease * 1.3

with ease = 2.5 for the easiest card down to 1.3 for the hardest, and every
interval clamped to [1, 365] days. A card without a previous interval starts
at 1 day, or 4 days when recalled perfectly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from lingocards.domain.learning.exceptions import InvalidPerformanceRatingError

MIN_RATING = 1
MAX_RATING = 5

MIN_DIFFICULTY = 0
MAX_DIFFICULTY = 5

MIN_INTERVAL = timedelta(days=1)
MAX_INTERVAL = timedelta(days=365)
FIRST_PERFECT_INTERVAL = timedelta(days=4)

MAX_EASE = 2.5
MIN_EASE = 1.3
EASY_BONUS = 1.3
HARD_FACTOR = 1.2
LAPSE_FACTOR = 0.5

DIFFICULTY_DELTAS: dict[int, int] = {1: 2, 2: 1, 3: 0, 4: -1, 5: -2}


class SchedulingState(Protocol):
    """Review-related fields the scheduler reads from a flashcard."""

    difficulty: int
    review_count: int
    last_reviewed: datetime | None
    next_review: datetime | None


@dataclass(frozen=True)
class ReviewOutcome:
    """New scheduling state produced by a single review."""

    rating: int
    previous_difficulty: int
    difficulty: int
    review_count: int
    last_reviewed: datetime
    next_review: datetime
    interval: timedelta

    @property
    def difficulty_change(self) -> int:
        return self.difficulty - self.previous_difficulty

    @property
    def interval_days(self) -> float:
        return self.interval.total_seconds() / 86400


def validate_rating(rating: object) -> int:
    """
    Return the rating as an int, or raise if it is not on the 1..5 scale.

    Whole-number floats such as 4.0 are accepted, since JSON does not tell them
    apart from integers. Booleans, numeric strings and fractional values are rejected.

    Raises:
        InvalidPerformanceRatingError: If the rating is not an integer in range
    """
    if isinstance(rating, float) and rating.is_integer():
        rating = int(rating)
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidPerformanceRatingError(rating)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidPerformanceRatingError(rating)
    return rating


def ease_factor(difficulty: int) -> float:
    """Interval multiplier for a card of the given difficulty."""
    span = MAX_EASE - MIN_EASE
    return MAX_EASE - span * difficulty / MAX_DIFFICULTY


def previous_interval(state: SchedulingState) -> timedelta | None:
    """Interval that was scheduled by the last review, if there was one."""
    if state.review_count == 0 or state.last_reviewed is None or state.next_review is None:
        return None
    interval = state.next_review - state.last_reviewed
    if interval <= timedelta(0):
        return None
    return interval


def next_difficulty(difficulty: int, rating: int) -> int:
    adjusted = difficulty + DIFFICULTY_DELTAS[rating]
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, adjusted))


def next_interval(previous: timedelta | None, difficulty: int, rating: int) -> timedelta:
    """
    Interval until the next review.

    Args:
        previous: Interval scheduled by the prior review, None for a new card
        difficulty: Difficulty after applying this review
        rating: Validated performance rating
    """
    if rating == 1:
        interval = MIN_INTERVAL
    elif previous is None:
        interval = FIRST_PERFECT_INTERVAL if rating == MAX_RATING else MIN_INTERVAL
    elif rating == 2:
        interval = previous * LAPSE_FACTOR
    elif rating == 3:
        interval = previous * HARD_FACTOR
    elif rating == 4:
        interval = previous * ease_factor(difficulty)
    else:
        interval = previous * ease_factor(difficulty) * EASY_BONUS

    return max(MIN_INTERVAL, min(MAX_INTERVAL, interval))


def review(state: SchedulingState, rating: object, now: datetime) -> ReviewOutcome:
    """
    Schedule a flashcard after a review.

    Args:
        state: Current scheduling state of the flashcard
        rating: Performance rating supplied by the learner
        now: Time of the review

    Returns:
        ReviewOutcome with the new difficulty, count and due date

    Raises:
        InvalidPerformanceRatingError: If the rating is not an integer in 1..5
    """
    valid_rating = validate_rating(rating)

    difficulty = next_difficulty(state.difficulty, valid_rating)
    interval = next_interval(previous_interval(state), difficulty, valid_rating)

    return ReviewOutcome(
        rating=valid_rating,
        previous_difficulty=state.difficulty,
        difficulty=difficulty,
        review_count=state.review_count + 1,
        last_reviewed=now,
        next_review=now + interval,
        interval=interval,
    )
