"""Mapper for Flashcard ORM ↔ Domain conversion."""

from lingocards.domain.common.value_objects import FlashcardId, UserId
from lingocards.domain.learning.entities.flashcard import Flashcard
from lingocards.models import Flashcard as FlashcardORM
from lingocards.utils import ensure_utc


class FlashcardMapper:
    """Mapper for Flashcard ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: FlashcardORM) -> Flashcard:
        return Flashcard.create_with_id(
            id=FlashcardId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            english=orm_model.english,
            spanish=orm_model.spanish,
            difficulty=orm_model.difficulty,
            review_count=orm_model.review_count,
            last_reviewed=ensure_utc(orm_model.last_reviewed),
            next_review=ensure_utc(orm_model.next_review),
            version=orm_model.version,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(
        self, domain_entity: Flashcard, orm_model: FlashcardORM | None = None
    ) -> FlashcardORM:
        """
        Copy entity state onto an ORM row.

        user_id is only written for new rows, an existing card keeps its owner.
        """
        if orm_model:
            orm_model.english = domain_entity.english
            orm_model.spanish = domain_entity.spanish
            orm_model.difficulty = domain_entity.difficulty
            orm_model.review_count = domain_entity.review_count
            orm_model.last_reviewed = domain_entity.last_reviewed
            orm_model.next_review = domain_entity.next_review
            return orm_model

        return FlashcardORM(
            id=domain_entity.id.value if domain_entity.id.value != 0 else None,
            user_id=domain_entity.user_id.value,
            english=domain_entity.english,
            spanish=domain_entity.spanish,
            difficulty=domain_entity.difficulty,
            review_count=domain_entity.review_count,
            last_reviewed=domain_entity.last_reviewed,
            next_review=domain_entity.next_review,
        )
