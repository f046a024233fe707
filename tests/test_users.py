"""Tests for the signed-in user's account endpoints."""

from collections.abc import Callable

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lingocards import models
from lingocards.core import container


class TestGetMe:
    def test_get_me(
        self, client: TestClient, test_user: models.User, auth_headers: dict[str, str]
    ) -> None:
        response = client.get("/api/v1/users/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == test_user.id
        assert data["email"] == test_user.email
        assert data["role"] == "user"
        assert "hashed_password" not in data

    def test_get_me_requires_auth(self, client: TestClient) -> None:
        response = client.get("/api/v1/users/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpdateMe:
    """Test suite for POST /users/me endpoint."""

    def test_change_email(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post(
            "/api/v1/users/me", json={"email": "Renamed@Example.com"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "renamed@example.com"

    def test_change_email_to_taken_address(
        self,
        client: TestClient,
        other_user: models.User,
        auth_headers: dict[str, str],
    ) -> None:
        response = client.post(
            "/api/v1/users/me", json={"email": other_user.email}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_change_password(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        test_password: str,
        auth_headers: dict[str, str],
    ) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"current_password": test_password, "new_password": "brand-new-pass"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(test_user)
        assert container.password_service().verify_password(
            "brand-new-pass", test_user.hashed_password
        )

    def test_change_password_wrong_current(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"current_password": "not-it", "new_password": "brand-new-pass"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Current password is incorrect"

    def test_change_password_without_current(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/v1/users/me", json={"new_password": "brand-new-pass"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_change_password_too_short(
        self, client: TestClient, test_password: str, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"current_password": test_password, "new_password": "abc"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestDeleteMe:
    def test_delete_account_removes_flashcards(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        other_user: models.User,
        auth_headers: dict[str, str],
        make_flashcard: Callable[..., models.Flashcard],
    ) -> None:
        user_id = test_user.id
        make_flashcard(test_user, "one", "uno")
        make_flashcard(test_user, "two", "dos")
        make_flashcard(other_user, "three", "tres")

        response = client.delete("/api/v1/users/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["flashcards_deleted"] == 2

        db_session.expire_all()
        assert db_session.get(models.User, user_id) is None
        assert db_session.query(models.Flashcard).filter_by(user_id=user_id).count() == 0
        assert db_session.query(models.Flashcard).count() == 1

        again = client.get("/api/v1/users/me", headers=auth_headers)
        assert again.status_code == status.HTTP_401_UNAUTHORIZED
