"""Tests for study planning over a deck."""

from datetime import UTC, datetime, timedelta

import pytest

from lingocards.domain.common.exceptions import ValidationError
from lingocards.domain.common.value_objects import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.exceptions import InvalidPerformanceRatingError
from lingocards.domain.learning.services.study_planner import (
    DeckStats,
    classify_due,
    deck_stats,
    performance_insights,
    performance_report,
    prioritize,
    recommendations,
    session_metadata,
    study_priority,
    study_streak,
    summarize_session,
)

NOW = datetime(2024, 6, 1, 8, 0, tzinfo=UTC)


def _make_card(
    id: int,
    difficulty: int = 0,
    review_count: int = 0,
    last_reviewed: datetime | None = None,
    next_review: datetime | None = None,
) -> Flashcard:
    return Flashcard.create_with_id(
        id=FlashcardId(id),
        user_id=UserId(1),
        english=f"word {id}",
        spanish=f"palabra {id}",
        difficulty=difficulty,
        review_count=review_count,
        last_reviewed=last_reviewed,
        next_review=next_review,
        version=1,
        created_at=NOW - timedelta(days=60),
        updated_at=NOW - timedelta(days=60),
    )


def _stats(**overrides: object) -> DeckStats:
    values: dict[str, object] = {
        "total_cards": 10,
        "reviewed_cards": 10,
        "new_cards": 0,
        "total_reviews": 30,
        "average_difficulty": 2.5,
        "difficulty_distribution": dict.fromkeys(range(6), 0),
        "due_cards": 2,
        "overdue_cards": 0,
    }
    values.update(overrides)
    return DeckStats(**values)  # type: ignore[arg-type]


class TestStudyPriority:
    def test_new_card_ranks_highest(self) -> None:
        assert study_priority(_make_card(1), NOW) == 160

    def test_hard_recent_card_ranks_lower(self) -> None:
        card = _make_card(
            2,
            difficulty=3,
            review_count=5,
            last_reviewed=NOW - timedelta(days=10),
            next_review=NOW,
        )
        assert study_priority(card, NOW) == 90

    def test_staleness_bonus_is_capped(self) -> None:
        card = _make_card(
            3,
            difficulty=5,
            review_count=1,
            last_reviewed=NOW - timedelta(days=30),
            next_review=NOW - timedelta(days=20),
        )
        assert study_priority(card, NOW) == 100

    def test_prioritize_orders_and_limits(self) -> None:
        hard = _make_card(
            1, difficulty=5, review_count=6, last_reviewed=NOW - timedelta(days=1), next_review=NOW
        )
        fresh_a = _make_card(2)
        fresh_b = _make_card(3)

        ranked = prioritize([hard, fresh_b, fresh_a], NOW, limit=2)

        assert [item.flashcard.id.value for item in ranked] == [2, 3]
        assert all(item.priority == 160 for item in ranked)

    def test_session_metadata(self) -> None:
        reviewed = _make_card(
            1, difficulty=4, review_count=2, last_reviewed=NOW - timedelta(days=2), next_review=NOW
        )
        ranked = prioritize([reviewed, _make_card(2), _make_card(3)], NOW, limit=10)

        metadata = session_metadata(ranked)

        assert metadata.total_cards == 3
        assert metadata.new_cards == 2
        assert metadata.review_cards == 1
        assert metadata.average_difficulty == pytest.approx(1.33)
        assert metadata.estimated_minutes == 2

    def test_session_metadata_empty(self) -> None:
        metadata = session_metadata([])
        assert metadata.total_cards == 0
        assert metadata.estimated_minutes == 0
        assert metadata.average_difficulty == 0.0


class TestClassifyDue:
    def test_buckets(self) -> None:
        new = _make_card(1)
        due = _make_card(
            2,
            review_count=1,
            last_reviewed=NOW - timedelta(days=1),
            next_review=NOW - timedelta(hours=2),
        )
        overdue = _make_card(
            3,
            review_count=2,
            last_reviewed=NOW - timedelta(days=6),
            next_review=NOW - timedelta(days=3),
        )
        future = _make_card(
            4, review_count=1, last_reviewed=NOW, next_review=NOW + timedelta(days=2)
        )

        result = classify_due([future, overdue, due, new], NOW)

        assert result.new == [new]
        assert result.due == [due]
        assert result.overdue == [overdue]
        assert result.total == 3

    def test_limit_applies_per_bucket(self) -> None:
        cards = [_make_card(i) for i in range(1, 6)]
        result = classify_due(cards, NOW, limit=2)
        assert [c.id.value for c in result.new] == [1, 2]


class TestDeckStats:
    def test_empty_deck(self) -> None:
        stats = deck_stats([], NOW)
        assert stats.total_cards == 0
        assert stats.average_difficulty == 0.0
        assert stats.difficulty_distribution == {0: 0, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
        assert stats.study_load == 0

    def test_average_ignores_new_cards(self) -> None:
        cards = [
            _make_card(1),
            _make_card(
                2,
                difficulty=4,
                review_count=3,
                last_reviewed=NOW - timedelta(days=2),
                next_review=NOW,
            ),
            _make_card(
                3,
                difficulty=1,
                review_count=2,
                last_reviewed=NOW,
                next_review=NOW + timedelta(days=5),
            ),
        ]

        stats = deck_stats(cards, NOW)

        assert stats.total_cards == 3
        assert stats.reviewed_cards == 2
        assert stats.new_cards == 1
        assert stats.total_reviews == 5
        assert stats.average_difficulty == 2.5
        assert stats.difficulty_distribution[0] == 1
        assert stats.difficulty_distribution[4] == 1
        assert stats.difficulty_distribution[1] == 1
        assert stats.due_cards == 1
        assert stats.overdue_cards == 0
        assert stats.study_load == 2

    def test_study_load_counts_each_bucket_once(self) -> None:
        cards = [
            _make_card(1),
            _make_card(
                2,
                difficulty=2,
                review_count=1,
                last_reviewed=NOW - timedelta(days=1),
                next_review=NOW,
            ),
            _make_card(
                3,
                difficulty=3,
                review_count=2,
                last_reviewed=NOW - timedelta(days=10),
                next_review=NOW - timedelta(days=4),
            ),
            _make_card(
                4,
                difficulty=1,
                review_count=1,
                last_reviewed=NOW,
                next_review=NOW + timedelta(days=3),
            ),
        ]

        stats = deck_stats(cards, NOW)

        assert (stats.due_cards, stats.overdue_cards, stats.new_cards) == (1, 1, 1)
        assert stats.study_load == 3
        assert stats.study_load == classify_due(cards, NOW).total


class TestRecommendations:
    def test_empty_deck_suggests_creating_cards(self) -> None:
        advice = recommendations(_stats(total_cards=0, reviewed_cards=0, total_reviews=0))
        assert [(r.type, r.priority) for r in advice] == [("create_cards", "medium")]

    def test_many_overdue_cards(self) -> None:
        advice = recommendations(_stats(overdue_cards=6))
        assert advice[0].type == "review_overdue"
        assert advice[0].priority == "high"

    def test_many_new_cards(self) -> None:
        advice = recommendations(_stats(new_cards=21))
        assert "learn_new" in [r.type for r in advice]

    def test_easy_deck(self) -> None:
        advice = recommendations(_stats(average_difficulty=1.5))
        assert "add_challenge" in [r.type for r in advice]

    def test_unreviewed_deck_is_not_called_easy(self) -> None:
        advice = recommendations(_stats(reviewed_cards=0, new_cards=10, average_difficulty=0.0))
        assert "add_challenge" not in [r.type for r in advice]

    def test_maintenance(self) -> None:
        advice = recommendations(_stats(total_reviews=150, due_cards=1))
        assert [r.type for r in advice] == ["maintenance"]

    def test_healthy_deck_needs_no_advice(self) -> None:
        assert recommendations(_stats()) == []


class TestSummarizeSession:
    def test_summary(self) -> None:
        summary = summarize_session([5, 4, 3, 2, 1, 4])

        assert summary.cards_reviewed == 6
        assert summary.average_performance == 3.17
        assert summary.accuracy_rate == 66.7
        assert summary.performance_breakdown == {1: 1, 2: 1, 3: 1, 4: 2, 5: 1}

    def test_empty_session(self) -> None:
        summary = summarize_session([])
        assert summary.cards_reviewed == 0
        assert summary.accuracy_rate == 0.0
        assert summary.performance_breakdown == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_invalid_rating_rejected(self) -> None:
        with pytest.raises(InvalidPerformanceRatingError):
            summarize_session([3, 7])


class TestPerformance:
    def test_study_streak(self) -> None:
        assert study_streak(None, NOW) == 0
        assert study_streak(NOW - timedelta(hours=30), NOW) == 1
        assert study_streak(NOW - timedelta(days=2), NOW) == 0

    def test_insights(self) -> None:
        mastered = performance_insights(_stats(average_difficulty=1.0, total_reviews=150))
        assert [i.type for i in mastered] == ["positive", "achievement"]

        struggling = performance_insights(_stats(average_difficulty=3.5))
        assert [i.type for i in struggling] == ["suggestion"]

        assert performance_insights(_stats()) == []

    def test_unreviewed_deck_gets_no_mastery_insight(self) -> None:
        stats = _stats(reviewed_cards=0, new_cards=10, average_difficulty=0.0, total_reviews=0)
        assert performance_insights(stats) == []

    def test_report(self) -> None:
        cards = [
            _make_card(1),
            _make_card(
                2,
                difficulty=1,
                review_count=4,
                last_reviewed=NOW - timedelta(hours=5),
                next_review=NOW + timedelta(days=3),
            ),
            _make_card(
                3,
                difficulty=3,
                review_count=2,
                last_reviewed=NOW - timedelta(days=20),
                next_review=NOW - timedelta(days=10),
            ),
        ]

        report = performance_report(cards, NOW, 7, "accuracy")

        assert report.period_days == 7
        assert report.metric == "accuracy"
        assert report.reviewed_in_period == 1
        assert report.study_streak == 1
        assert report.stats.last_study_session == NOW - timedelta(hours=5)
        assert report.stats.completion_rate == 66.7
        assert report.generated_at == NOW
        assert performance_report(cards, NOW, 30, "reviews").reviewed_in_period == 2

    @pytest.mark.parametrize(
        ("period", "metric", "field"),
        [(14, "reviews", "period"), (0, "reviews", "period"), (30, "speed", "metric")],
    )
    def test_report_rejects_unsupported_window(self, period: int, metric: str, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            performance_report([], NOW, period, metric)
        assert exc_info.value.details["field"] == field
