"""Repository for User domain entities."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lingocards.application.common.pagination import Pagination
from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import User
from lingocards.domain.identity.exceptions import EmailAlreadyExistsError, UserNotFoundError
from lingocards.infrastructure.identity.mappers.user_mapper import UserMapper
from lingocards.models import User as UserORM

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = UserMapper()

    def find_by_id(self, user_id: UserId) -> User | None:
        orm_model = self.db.get(UserORM, user_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_email(self, email: str) -> User | None:
        stmt = select(UserORM).where(UserORM.email == email.strip().lower())
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_page(
        self, pagination: Pagination, role: str | None = None, search: str | None = None
    ) -> tuple[list[User], int]:
        """
        Get one page of users, newest first.

        Args:
            pagination: Page and page size
            role: Only users with this role
            search: Case-insensitive substring of the email

        Returns:
            Tuple of (users on the page, total matching users)
        """
        filters = []
        if role:
            filters.append(UserORM.role == role)
        if search:
            filters.append(UserORM.email.ilike(f"%{search.strip()}%"))

        total = self.db.execute(select(func.count(UserORM.id)).where(*filters)).scalar() or 0
        stmt = (
            select(UserORM)
            .where(*filters)
            .order_by(UserORM.created_at.desc(), UserORM.id.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models], total

    def count(self, role: str | None = None) -> int:
        stmt = select(func.count(UserORM.id))
        if role:
            stmt = stmt.where(UserORM.role == role)
        return self.db.execute(stmt).scalar() or 0

    def save(self, user: User) -> User:
        """
        Create or update a user.

        Raises:
            EmailAlreadyExistsError: If the email belongs to another account
            UserNotFoundError: If updating a user that no longer exists
        """
        if user.id.value == 0:
            orm_model = self.mapper.to_orm(user)
            self.db.add(orm_model)
        else:
            existing = self.db.get(UserORM, user.id.value)
            if not existing:
                raise UserNotFoundError(user.id.value)
            orm_model = self.mapper.to_orm(user, existing)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if "email" in str(e.orig):
                raise EmailAlreadyExistsError(user.email) from e
            raise

        self.db.refresh(orm_model)
        logger.info(f"Saved user {orm_model.id} ({orm_model.email})")
        return self.mapper.to_domain(orm_model)

    def delete(self, user_id: UserId) -> bool:
        """Delete a user. Their flashcards go with them via ON DELETE CASCADE."""
        orm_model = self.db.get(UserORM, user_id.value)
        if not orm_model:
            return False
        self.db.delete(orm_model)
        self.db.commit()
        return True
