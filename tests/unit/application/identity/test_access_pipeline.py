"""Tests for the access pipeline and its stages."""

from datetime import UTC, datetime

import pytest

from lingocards.application.identity.services.access_pipeline import (
    AccessContext,
    AccessPipeline,
    prevent_self_harm,
    require_admin,
    require_admin_or_self,
    require_role,
)
from lingocards.application.identity.services.authorization_service import AuthorizationService
from lingocards.domain.common.exceptions import AuthorizationError, DomainError
from lingocards.domain.common.value_objects import UserId
from lingocards.domain.identity.entities.user import Role, User
from lingocards.domain.identity.exceptions import SelfManagementError


def _make_user(id: int, role: Role = Role.USER) -> User:
    now = datetime.now(UTC)
    return User.create_with_id(
        id=UserId(id),
        email=f"user{id}@example.com",
        hashed_password="hash",
        role=role,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def authz() -> AuthorizationService:
    return AuthorizationService()


class TestAuthorizationService:
    def test_admin_holds_every_role(self, authz: AuthorizationService) -> None:
        admin = _make_user(1, Role.ADMIN)
        assert authz.has_role(admin, "user")
        assert authz.has_role(admin, "admin")

    def test_user_holds_only_user_role(self, authz: AuthorizationService) -> None:
        user = _make_user(2)
        assert authz.has_role(user, "user")
        assert not authz.has_role(user, "admin")

    def test_resource_access(self, authz: AuthorizationService) -> None:
        user = _make_user(2)
        assert authz.can_access_user_resource(user, 2)
        assert not authz.can_access_user_resource(user, 3)
        assert authz.can_access_user_resource(_make_user(1, Role.ADMIN), 3)


class TestAccessPipeline:
    def test_admin_passes_admin_pipeline(self, authz: AuthorizationService) -> None:
        context = AccessContext(user=_make_user(1, Role.ADMIN), action="list_users")
        pipeline = AccessPipeline(require_admin(authz), prevent_self_harm)
        assert pipeline.enforce(context) is context

    def test_user_is_rejected_by_admin_pipeline(self, authz: AuthorizationService) -> None:
        context = AccessContext(user=_make_user(2), action="list_users")
        with pytest.raises(AuthorizationError, match="Admin access required"):
            AccessPipeline(require_admin(authz)).enforce(context)

    def test_first_failing_stage_wins(self, authz: AuthorizationService) -> None:
        calls: list[str] = []

        def recorder(context: AccessContext) -> DomainError | None:
            calls.append(context.action)
            return None

        pipeline = AccessPipeline(require_admin(authz)).then(recorder)
        error = pipeline.evaluate(AccessContext(user=_make_user(2), action="delete_user"))

        assert isinstance(error, AuthorizationError)
        assert calls == []

    def test_admin_cannot_delete_self(self, authz: AuthorizationService) -> None:
        admin = _make_user(1, Role.ADMIN)
        pipeline = AccessPipeline(require_admin(authz), prevent_self_harm)

        with pytest.raises(SelfManagementError, match="delete their own account"):
            pipeline.enforce(AccessContext(user=admin, action="delete_user", target_user_id=1))

        # Other targets are fine
        pipeline.enforce(AccessContext(user=admin, action="delete_user", target_user_id=5))

    def test_self_harm_only_covers_destructive_actions(self) -> None:
        admin = _make_user(1, Role.ADMIN)
        context = AccessContext(user=admin, action="view_user", target_user_id=1)
        assert prevent_self_harm(context) is None

    def test_owner_or_admin(self, authz: AuthorizationService) -> None:
        pipeline = AccessPipeline(require_admin_or_self(authz))
        owner = _make_user(4)

        pipeline.enforce(AccessContext(user=owner, action="view_user_stats", target_user_id=4))
        admin = _make_user(1, Role.ADMIN)
        pipeline.enforce(AccessContext(user=admin, action="view_user_stats", target_user_id=4))
        with pytest.raises(AuthorizationError, match="only access your own"):
            pipeline.enforce(
                AccessContext(user=_make_user(5), action="view_user_stats", target_user_id=4)
            )

    def test_require_role(self, authz: AuthorizationService) -> None:
        stage = require_role(authz, "admin")
        assert stage(AccessContext(user=_make_user(1, Role.ADMIN), action="x")) is None
        assert isinstance(stage(AccessContext(user=_make_user(2), action="x")), AuthorizationError)
