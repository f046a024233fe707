"""JWT access and refresh token issuing and verification."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError
from pydantic import BaseModel

from lingocards.config import Settings

ALGORITHM = "HS256"


class TokenWithRefresh(BaseModel):
    """DTO for token pair with access and refresh tokens."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


class TokenService:
    """Signs and verifies HS256 tokens. Access and refresh tokens use separate secrets."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.SECRET_KEY
        self.refresh_secret_key = settings.refresh_secret
        self.access_token_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_token_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def create_access_token(self, user_id: int) -> str:
        expire = datetime.now(UTC) + self.access_token_ttl
        to_encode = {"sub": str(user_id), "exp": expire, "type": "access"}
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def create_refresh_token(self, user_id: int) -> str:
        expire = datetime.now(UTC) + self.refresh_token_ttl
        to_encode = {"sub": str(user_id), "exp": expire, "type": "refresh"}
        return jwt.encode(to_encode, self.refresh_secret_key, algorithm=ALGORITHM)

    def verify_access_token(self, token: str) -> int | None:
        """Return the user id of a valid access token, None otherwise."""
        return self._decode_subject(token, self.secret_key, expected_type="access")

    def verify_refresh_token(self, token: str) -> int | None:
        """Return the user id of a valid refresh token, None otherwise."""
        return self._decode_subject(token, self.refresh_secret_key, expected_type="refresh")

    def access_token_expiry(self, token: str) -> datetime | None:
        """When a valid access token expires, None if the token does not verify."""
        payload = self._decode_payload(token, self.secret_key, expected_type="access")
        if payload is None or "exp" not in payload:
            return None
        return datetime.fromtimestamp(payload["exp"], tz=UTC)

    def create_token_pair(self, user_id: int) -> TokenWithRefresh:
        return TokenWithRefresh(
            access_token=self.create_access_token(user_id),
            refresh_token=self.create_refresh_token(user_id),
            token_type="bearer",  # noqa: S106
            expires_in=int(self.access_token_ttl.total_seconds()),
        )

    def _decode_payload(
        self, token: str, key: str, expected_type: str
    ) -> dict[str, Any] | None:
        try:
            payload: dict[str, Any] = jwt.decode(token, key, algorithms=[ALGORITHM])
        except InvalidTokenError:
            return None
        # A refresh token must never pass as an access token, and vice versa
        if payload.get("type") != expected_type:
            return None
        return payload

    def _decode_subject(self, token: str, key: str, expected_type: str) -> int | None:
        payload = self._decode_payload(token, key, expected_type)
        if payload is None:
            return None
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None
