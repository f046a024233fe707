"""
Ordered access checks over a request context.

A pipeline is a sequence of stages. Each stage looks at the AccessContext and
returns None to let the request continue, or a DomainError that stops it.
Stages run in order and the first error wins, so cheap role checks go before
audit logging and an unauthorized request is never logged as an admin action.

Example:
    authz = AuthorizationService()
    pipeline = AccessPipeline(require_admin(authz), prevent_self_harm, log_admin_action)
    pipeline.enforce(AccessContext(user=current_user, action="delete_user", target_user_id=7))
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from lingocards.application.identity.services.authorization_service import AuthorizationService
from lingocards.domain.common.exceptions import AuthorizationError, DomainError
from lingocards.domain.identity.entities.user import User
from lingocards.domain.identity.exceptions import SelfManagementError

logger = structlog.get_logger(__name__)

# Actions an administrator may not perform on their own account
SELF_HARM_ACTIONS: dict[str, str] = {
    "delete_user": "delete their own account",
    "demote_user": "remove their own admin role",
    "change_role": "change their own role",
}


@dataclass(frozen=True)
class AccessContext:
    """Who is asking, what they want to do, and whose resource it touches."""

    user: User
    action: str
    target_user_id: int | None = None

    @property
    def targets_self(self) -> bool:
        return self.target_user_id is not None and self.target_user_id == self.user.id.value


AccessStage = Callable[[AccessContext], DomainError | None]


class AccessPipeline:
    """Runs stages in order, stopping at the first one that returns an error."""

    def __init__(self, *stages: AccessStage) -> None:
        self.stages: tuple[AccessStage, ...] = stages

    def then(self, *stages: AccessStage) -> "AccessPipeline":
        """New pipeline with extra stages appended."""
        return AccessPipeline(*self.stages, *stages)

    def evaluate(self, context: AccessContext) -> DomainError | None:
        for stage in self.stages:
            error = stage(context)
            if error is not None:
                return error
        return None

    def enforce(self, context: AccessContext) -> AccessContext:
        """
        Run every stage and return the context if all of them pass.

        Raises:
            DomainError: The error returned by the first failing stage
        """
        error = self.evaluate(context)
        if error is not None:
            logger.warning(
                "access_denied",
                user_id=context.user.id.value,
                action=context.action,
                target_user_id=context.target_user_id,
                reason=error.message,
            )
            raise error
        return context


def require_admin(authz: AuthorizationService) -> AccessStage:
    def stage(context: AccessContext) -> DomainError | None:
        if not authz.is_admin(context.user):
            return AuthorizationError("Admin access required")
        return None

    return stage


def require_role(authz: AuthorizationService, role: str) -> AccessStage:
    def stage(context: AccessContext) -> DomainError | None:
        if not authz.has_role(context.user, role):
            return AuthorizationError(f"Role '{role}' required")
        return None

    return stage


def require_admin_or_self(authz: AuthorizationService) -> AccessStage:
    def stage(context: AccessContext) -> DomainError | None:
        if context.target_user_id is None:
            return None
        if not authz.can_access_user_resource(context.user, context.target_user_id):
            return AuthorizationError("You can only access your own resources")
        return None

    return stage


def prevent_self_harm(context: AccessContext) -> DomainError | None:
    description = SELF_HARM_ACTIONS.get(context.action)
    if description is not None and context.targets_self:
        return SelfManagementError(context.action, description)
    return None


def log_admin_action(context: AccessContext) -> DomainError | None:
    logger.info(
        "admin_action",
        admin_id=context.user.id.value,
        admin_email=context.user.email,
        action=context.action,
        target_user_id=context.target_user_id,
    )
    return None
