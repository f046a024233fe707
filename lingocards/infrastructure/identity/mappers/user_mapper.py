"""Mapper for User ORM ↔ Domain conversion."""

from lingocards.domain.common.value_objects.ids import UserId
from lingocards.domain.identity.entities.user import User
from lingocards.models import User as UserORM
from lingocards.utils import ensure_utc


class UserMapper:
    """Mapper for User ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: UserORM) -> User:
        return User.create_with_id(
            id=UserId(orm_model.id),
            email=orm_model.email,
            hashed_password=orm_model.hashed_password,
            role=orm_model.role,
            created_at=ensure_utc(orm_model.created_at),
            updated_at=ensure_utc(orm_model.updated_at),
        )

    def to_orm(self, domain_entity: User, orm_model: UserORM | None = None) -> UserORM:
        if orm_model:
            orm_model.email = domain_entity.email
            orm_model.hashed_password = domain_entity.hashed_password
            orm_model.role = domain_entity.role.value
            return orm_model

        return UserORM(
            id=domain_entity.id.value if domain_entity.id.value != 0 else None,
            email=domain_entity.email,
            hashed_password=domain_entity.hashed_password,
            role=domain_entity.role.value,
        )
