"""Tests for the Flashcard entity."""

from datetime import UTC, datetime, timedelta

import pytest

from lingocards.domain.common.exceptions import InvariantViolationError, ValidationError
from lingocards.domain.common.value_objects import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.exceptions import InvalidPerformanceRatingError

NOW = datetime(2024, 5, 10, 9, 30, tzinfo=UTC)


def _reviewed(next_review: datetime, difficulty: int = 2) -> Flashcard:
    return Flashcard.create_with_id(
        id=FlashcardId(7),
        user_id=UserId(3),
        english="window",
        spanish="ventana",
        difficulty=difficulty,
        review_count=3,
        last_reviewed=next_review - timedelta(days=4),
        next_review=next_review,
        version=4,
        created_at=NOW - timedelta(days=30),
        updated_at=NOW - timedelta(days=4),
    )


class TestCreate:
    def test_create_strips_text_and_starts_unreviewed(self) -> None:
        card = Flashcard.create(UserId(3), "  apple ", "manzana\n")

        assert card.english == "apple"
        assert card.spanish == "manzana"
        assert card.difficulty == 0
        assert card.review_count == 0
        assert card.last_reviewed is None
        assert card.next_review is None
        assert card.is_new

    @pytest.mark.parametrize(("english", "spanish"), [("", "gato"), ("cat", "   ")])
    def test_create_rejects_blank_sides(self, english: str, spanish: str) -> None:
        with pytest.raises(ValidationError):
            Flashcard.create(UserId(3), english, spanish)

    def test_create_rejects_text_over_limit(self) -> None:
        with pytest.raises(ValidationError, match="cannot exceed 10 characters"):
            Flashcard.create(UserId(3), "a" * 11, "b", max_length=10)

    def test_review_count_and_last_reviewed_must_agree(self) -> None:
        with pytest.raises(InvariantViolationError):
            Flashcard.create_with_id(
                id=FlashcardId(1),
                user_id=UserId(3),
                english="cat",
                spanish="gato",
                difficulty=0,
                review_count=2,
                last_reviewed=None,
                next_review=None,
                version=1,
                created_at=NOW,
                updated_at=NOW,
            )


class TestUpdateText:
    def test_update_one_side(self) -> None:
        card = Flashcard.create(UserId(3), "cat", "gato")
        card.update_text(spanish=" gata ")
        assert card.english == "cat"
        assert card.spanish == "gata"

    def test_update_requires_a_side(self) -> None:
        card = Flashcard.create(UserId(3), "cat", "gato")
        with pytest.raises(ValidationError):
            card.update_text()

    def test_invalid_side_leaves_card_untouched(self) -> None:
        card = Flashcard.create(UserId(3), "cat", "gato")
        with pytest.raises(ValidationError):
            card.update_text(english="kitten", spanish="")
        assert card.english == "cat"
        assert card.spanish == "gato"


class TestDueness:
    def test_new_card_is_neither_due_nor_overdue(self) -> None:
        card = Flashcard.create(UserId(3), "cat", "gato")
        assert not card.is_due(NOW)
        assert not card.is_overdue(NOW)

    def test_future_card_is_not_due(self) -> None:
        card = _reviewed(NOW + timedelta(hours=1))
        assert not card.is_due(NOW)

    def test_card_due_today_is_not_overdue(self) -> None:
        card = _reviewed(NOW - timedelta(hours=5))
        assert card.is_due(NOW)
        assert not card.is_overdue(NOW)

    def test_card_more_than_a_day_late_is_overdue(self) -> None:
        card = _reviewed(NOW - timedelta(days=2))
        assert card.is_due(NOW)
        assert card.is_overdue(NOW)


class TestRecordReview:
    def test_record_review_applies_outcome(self) -> None:
        card = _reviewed(NOW - timedelta(hours=1), difficulty=2)

        outcome = card.record_review(4, NOW)

        assert card.difficulty == outcome.difficulty == 1
        assert card.review_count == 4
        assert card.last_reviewed == NOW
        assert card.next_review == outcome.next_review
        assert card.next_review > NOW

    def test_first_review_leaves_card_no_longer_new(self) -> None:
        card = Flashcard.create(UserId(3), "cat", "gato")
        card.record_review(3, NOW)
        assert not card.is_new
        assert card.review_count == 1
        assert card.next_review == NOW + timedelta(days=1)

    @pytest.mark.parametrize("rating", [0, 6, -1, "invalid"])
    def test_invalid_rating_changes_nothing(self, rating: object) -> None:
        card = _reviewed(NOW - timedelta(hours=1), difficulty=2)
        before = (card.difficulty, card.review_count, card.last_reviewed, card.next_review)

        with pytest.raises(InvalidPerformanceRatingError):
            card.record_review(rating, NOW)

        assert (card.difficulty, card.review_count, card.last_reviewed, card.next_review) == before
