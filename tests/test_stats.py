"""Tests for statistics endpoints."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from lingocards import models


class TestMyStats:
    def test_empty_deck(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/stats/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_cards"] == 0
        assert data["average_difficulty"] == 0.0
        assert data["difficulty_distribution"] == {str(d): 0 for d in range(6)}
        assert [r["type"] for r in data["recommendations"]] == ["create_cards"]

    def test_deck_stats(
        self,
        client: TestClient,
        test_user: models.User,
        other_user: models.User,
        auth_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        now = datetime.now(UTC)
        make_flashcard(test_user, "new", "nuevo")
        make_flashcard(
            test_user,
            "hard",
            "difícil",
            difficulty=4,
            review_count=5,
            last_reviewed=now - timedelta(days=9),
            next_review=now - timedelta(days=3),
        )
        make_flashcard(
            test_user,
            "easy",
            "fácil",
            difficulty=2,
            review_count=1,
            last_reviewed=now,
            next_review=now + timedelta(days=1),
        )
        make_flashcard(other_user, "hidden", "oculto", difficulty=5, review_count=0)

        response = client.get("/api/v1/stats/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["user_id"] == test_user.id
        assert data["total_cards"] == 3
        assert data["reviewed_cards"] == 2
        assert data["new_cards"] == 1
        assert data["total_reviews"] == 6
        assert data["average_difficulty"] == 3.0
        assert data["difficulty_distribution"] == {
            "0": 1,
            "1": 0,
            "2": 1,
            "3": 0,
            "4": 1,
            "5": 0,
        }
        assert data["due_cards"] == 0
        assert data["overdue_cards"] == 1
        assert data["study_load"] == 2


class TestUserStats:
    def test_owner_can_view(
        self, client: TestClient, test_user: models.User, auth_headers: dict[str, str]
    ) -> None:
        response = client.get(f"/api/v1/stats/users/{test_user.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user_id"] == test_user.id

    def test_other_user_is_forbidden(
        self, client: TestClient, other_user: models.User, auth_headers: dict[str, str]
    ) -> None:
        response = client.get(f"/api/v1/stats/users/{other_user.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "You can only access your own resources"

    def test_admin_can_view_anyone(
        self,
        client: TestClient,
        test_user: models.User,
        admin_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        make_flashcard(test_user)

        response = client.get(f"/api/v1/stats/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total_cards"] == 1

    def test_missing_user(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/stats/users/99999", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestSystemStats:
    def test_admin_only(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/stats/system", headers=auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_system_stats(
        self,
        client: TestClient,
        test_user: models.User,
        other_user: models.User,
        admin_user: models.User,
        admin_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        now = datetime.now(UTC)
        make_flashcard(
            test_user,
            difficulty=2,
            review_count=1,
            last_reviewed=now - timedelta(days=2),
            next_review=now,
        )
        make_flashcard(
            test_user,
            difficulty=4,
            review_count=3,
            last_reviewed=now - timedelta(days=20),
            next_review=now,
        )
        make_flashcard(other_user)

        response = client.get("/api/v1/stats/system", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_users"] == 3
        assert data["admin_users"] == 1
        assert data["total_flashcards"] == 3
        assert data["users_with_flashcards"] == 2
        assert data["reviewed_last_week"] == 1
        assert data["reviewed_last_month"] == 2
        assert data["average_difficulty"] == 3.0


class TestDashboard:
    def test_my_dashboard(
        self,
        client: TestClient,
        test_user: models.User,
        auth_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        last = datetime.now(UTC) - timedelta(hours=6)
        make_flashcard(test_user, "new", "nuevo")
        make_flashcard(
            test_user,
            "cat",
            "gato",
            difficulty=1,
            review_count=2,
            last_reviewed=last,
            next_review=last + timedelta(days=3),
        )

        response = client.get("/api/v1/stats/me/dashboard", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["user_id"] == test_user.id
        assert data["overview"]["total_flashcards"] == 2
        assert data["overview"]["total_reviews"] == 2
        assert data["overview"]["last_study_session"] is not None
        assert data["progress"] == {
            "reviewed_cards": 1,
            "unreviewed_cards": 1,
            "completion_rate": 50.0,
        }
        assert data["spaced_repetition"]["new_cards"] == 1
        assert data["spaced_repetition"]["study_load"] == 1
        assert "last_updated" in data

    def test_empty_dashboard(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/stats/me/dashboard", headers=auth_headers)

        data = response.json()
        assert data["overview"]["last_study_session"] is None
        assert data["progress"]["completion_rate"] == 0.0
        assert [r["type"] for r in data["recommendations"]] == ["create_cards"]

    def test_user_dashboard_access(
        self,
        client: TestClient,
        test_user: models.User,
        auth_headers: dict[str, str],
        other_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        path = f"/api/v1/stats/users/{test_user.id}/dashboard"

        assert client.get(path, headers=auth_headers).status_code == status.HTTP_200_OK
        assert client.get(path, headers=admin_headers).status_code == status.HTTP_200_OK
        assert client.get(path, headers=other_headers).status_code == status.HTTP_403_FORBIDDEN

    def test_missing_user_dashboard(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        response = client.get("/api/v1/stats/users/99999/dashboard", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestPerformance:
    def test_my_performance_defaults(
        self,
        client: TestClient,
        test_user: models.User,
        auth_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        now = datetime.now(UTC)
        make_flashcard(
            test_user,
            difficulty=1,
            review_count=3,
            last_reviewed=now - timedelta(days=2),
            next_review=now + timedelta(days=4),
        )
        make_flashcard(
            test_user,
            difficulty=1,
            review_count=1,
            last_reviewed=now - timedelta(days=45),
            next_review=now - timedelta(days=44),
        )

        response = client.get("/api/v1/stats/me/performance", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["period_days"] == 30
        assert data["metric"] == "reviews"
        assert data["total_reviews"] == 4
        assert data["reviewed_in_period"] == 1
        assert data["study_streak"] == 0
        assert [i["type"] for i in data["insights"]] == ["positive"]

    def test_period_and_metric(
        self,
        client: TestClient,
        test_user: models.User,
        auth_headers: dict[str, str],
    ) -> None:
        response = client.get(
            "/api/v1/stats/me/performance",
            params={"period": 365, "metric": "difficulty"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["period_days"] == 365
        assert response.json()["metric"] == "difficulty"

    @pytest.mark.parametrize(
        ("params", "message"),
        [
            ({"period": 14}, "Period must be one of: 7, 30, 90, 365 days"),
            ({"metric": "speed"}, "Metric must be one of: reviews, difficulty, accuracy"),
        ],
    )
    def test_unsupported_window(
        self,
        params: dict[str, object],
        message: str,
        client: TestClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = client.get("/api/v1/stats/me/performance", params=params, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == message

    def test_user_performance_access(
        self,
        client: TestClient,
        test_user: models.User,
        other_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        path = f"/api/v1/stats/users/{test_user.id}/performance"

        assert client.get(path, headers=admin_headers).status_code == status.HTTP_200_OK
        assert client.get(path, headers=other_headers).status_code == status.HTTP_403_FORBIDDEN
