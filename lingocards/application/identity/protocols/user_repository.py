from typing import Protocol

from lingocards.application.common.pagination import Pagination
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import User


class UserRepositoryProtocol(Protocol):
    def find_by_id(self, user_id: UserId) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_page(
        self, pagination: Pagination, role: str | None = None, search: str | None = None
    ) -> tuple[list[User], int]: ...

    def count(self, role: str | None = None) -> int: ...

    def save(self, user: User) -> User: ...

    def delete(self, user_id: UserId) -> bool: ...
