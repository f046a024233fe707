from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from lingocards.domain.common.value_objects.ids import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard


class FlashcardRepositoryProtocol(Protocol):
    def find_by_id(self, flashcard_id: FlashcardId, user_id: UserId) -> Flashcard | None: ...

    def find_by_user(
        self,
        user_id: UserId,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Flashcard]: ...

    def count_by_user(self, user_id: UserId) -> int: ...

    def count_by_users(self, user_ids: Sequence[UserId]) -> dict[int, int]: ...

    def count_reviewed_since(self, since: datetime, user_id: UserId | None = None) -> int: ...

    def count_all(self) -> int: ...

    def count_owners(self) -> int: ...

    def average_difficulty(self) -> float: ...

    def save(self, flashcard: Flashcard) -> Flashcard: ...

    def add_many(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]: ...

    def delete(self, flashcard_id: FlashcardId, user_id: UserId) -> bool: ...

    def delete_all_by_user(self, user_id: UserId) -> int: ...
