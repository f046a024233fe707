"""Repository for Flashcard domain entities."""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from lingocards.domain.common.exceptions import ConcurrencyConflictError
from lingocards.domain.common.value_objects.ids import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.domain.learning.exceptions import FlashcardNotFoundError
from lingocards.infrastructure.learning.mappers.flashcard_mapper import FlashcardMapper
from lingocards.models import Flashcard as FlashcardORM

SORTABLE_COLUMNS = {
    "created_at": FlashcardORM.created_at,
    "updated_at": FlashcardORM.updated_at,
    "difficulty": FlashcardORM.difficulty,
    "review_count": FlashcardORM.review_count,
    "last_reviewed": FlashcardORM.last_reviewed,
    "next_review": FlashcardORM.next_review,
    "english": FlashcardORM.english,
    "spanish": FlashcardORM.spanish,
}


class FlashcardRepository:
    """Repository for Flashcard domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = FlashcardMapper()

    def find_by_id(self, flashcard_id: FlashcardId, user_id: UserId) -> Flashcard | None:
        """
        Find a flashcard by ID with user ownership check.

        Returns:
            Flashcard entity if found and owned by user, None otherwise
        """
        stmt = select(FlashcardORM).where(
            FlashcardORM.id == flashcard_id.value,
            FlashcardORM.user_id == user_id.value,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_user(
        self,
        user_id: UserId,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Flashcard]:
        """
        Get a user's flashcards in the requested order.

        Args:
            user_id: Owner of the cards
            order_by: One of SORTABLE_COLUMNS
            descending: Sort direction
            limit: Maximum number of cards, None for all
            offset: Number of cards to skip
        """
        column = SORTABLE_COLUMNS[order_by]
        ordering = column.desc() if descending else column.asc()
        stmt = (
            select(FlashcardORM)
            .where(FlashcardORM.user_id == user_id.value)
            .order_by(ordering, FlashcardORM.id.asc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def count_by_user(self, user_id: UserId) -> int:
        stmt = select(func.count(FlashcardORM.id)).where(FlashcardORM.user_id == user_id.value)
        return self.db.execute(stmt).scalar() or 0

    def count_by_users(self, user_ids: Sequence[UserId]) -> dict[int, int]:
        """Flashcard counts keyed by user id, zero for users without cards."""
        ids = [user_id.value for user_id in user_ids]
        counts = dict.fromkeys(ids, 0)
        if not ids:
            return counts
        stmt = (
            select(FlashcardORM.user_id, func.count(FlashcardORM.id))
            .where(FlashcardORM.user_id.in_(ids))
            .group_by(FlashcardORM.user_id)
        )
        for owner_id, count in self.db.execute(stmt).all():
            counts[owner_id] = count
        return counts

    def count_reviewed_since(self, since: datetime, user_id: UserId | None = None) -> int:
        """Count cards whose latest review happened at or after `since`."""
        stmt = select(func.count(FlashcardORM.id)).where(FlashcardORM.last_reviewed >= since)
        if user_id is not None:
            stmt = stmt.where(FlashcardORM.user_id == user_id.value)
        return self.db.execute(stmt).scalar() or 0

    def count_all(self) -> int:
        return self.db.execute(select(func.count(FlashcardORM.id))).scalar() or 0

    def count_owners(self) -> int:
        stmt = select(func.count(func.distinct(FlashcardORM.user_id)))
        return self.db.execute(stmt).scalar() or 0

    def average_difficulty(self) -> float:
        """Mean difficulty of every reviewed card in the system."""
        stmt = select(func.avg(FlashcardORM.difficulty)).where(FlashcardORM.review_count > 0)
        value = self.db.execute(stmt).scalar()
        return round(float(value), 2) if value is not None else 0.0

    def save(self, flashcard: Flashcard) -> Flashcard:
        """
        Save a flashcard entity (create or update).

        Updates are guarded by the row version: if the card changed since it
        was loaded, nothing is written.

        Raises:
            FlashcardNotFoundError: If the card was deleted in the meantime
            ConcurrencyConflictError: If the card was modified in the meantime
        """
        if flashcard.id.value == 0:
            orm_model = self.mapper.to_orm(flashcard)
            self.db.add(orm_model)
            self.db.commit()
            self.db.refresh(orm_model)
            return self.mapper.to_domain(orm_model)

        orm_model = self.db.get(FlashcardORM, flashcard.id.value)
        if not orm_model or orm_model.user_id != flashcard.user_id.value:
            raise FlashcardNotFoundError(flashcard.id.value)
        if orm_model.version != flashcard.version:
            raise ConcurrencyConflictError("Flashcard", flashcard.id.value)

        self.mapper.to_orm(flashcard, orm_model)
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            raise ConcurrencyConflictError("Flashcard", flashcard.id.value) from e
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def add_many(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]:
        """Insert several new flashcards in one transaction."""
        orm_models = [self.mapper.to_orm(flashcard) for flashcard in flashcards]
        self.db.add_all(orm_models)
        self.db.commit()
        for orm_model in orm_models:
            self.db.refresh(orm_model)
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def delete(self, flashcard_id: FlashcardId, user_id: UserId) -> bool:
        """
        Delete a flashcard owned by the user.

        Returns:
            True if a card was deleted, False if none matched
        """
        stmt = select(FlashcardORM).where(
            FlashcardORM.id == flashcard_id.value,
            FlashcardORM.user_id == user_id.value,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        if not orm_model:
            return False
        self.db.delete(orm_model)
        self.db.commit()
        return True

    def delete_all_by_user(self, user_id: UserId) -> int:
        """Delete every flashcard of a user and return how many were removed."""
        stmt = delete(FlashcardORM).where(FlashcardORM.user_id == user_id.value)
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount or 0
