from datetime import datetime
from typing import Protocol

from lingocards.infrastructure.identity.services.token_service import TokenWithRefresh


class TokenServiceProtocol(Protocol):
    def create_token_pair(self, user_id: int) -> TokenWithRefresh: ...

    def verify_access_token(self, token: str) -> int | None: ...

    def verify_refresh_token(self, token: str) -> int | None: ...

    def access_token_expiry(self, token: str) -> datetime | None: ...
