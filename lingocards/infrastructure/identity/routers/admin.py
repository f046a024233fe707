"""Administrator endpoints for managing users and checking the system."""

import logging
from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from lingocards.application.common.pagination import MAX_PAGE_SIZE, Pagination
from lingocards.application.identity.services.access_pipeline import (
    AccessContext,
    AccessPipeline,
    prevent_self_harm,
)
from lingocards.application.identity.use_cases.admin_user_use_case import (
    AdminUserUseCase,
    UserOverview,
)
from lingocards.application.learning.use_cases.flashcard_stats_use_case import (
    FlashcardStatsUseCase,
)
from lingocards.config import get_settings
from lingocards.core import container
from lingocards.domain.common.exceptions import DomainError
from lingocards.domain.identity.entities.user import Role
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.identity.dependencies import admin_access
from lingocards.infrastructure.identity.schemas import (
    AdminActionResponse,
    AdminDeleteResponse,
    AdminPasswordResetRequest,
    AdminUserActionResponse,
    AdminUserListResponse,
    AdminUserResponse,
    AdminUserUpdateRequest,
    SystemHealthResponse,
    UserDetailsResponse,
)
from lingocards.infrastructure.learning.schemas import Flashcard, FlashcardsListResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

UserIdPath = Annotated[int, Path(gt=0, description="Target user id")]
AdminUseCase = Annotated[
    AdminUserUseCase, Depends(inject_use_case(container.admin_user_use_case))
]


def _overview_response(overview: UserOverview) -> AdminUserResponse:
    user = overview.user
    return AdminUserResponse(
        id=user.id.value,
        email=user.email,
        role=user.role.value,
        created_at=user.created_at,
        updated_at=user.updated_at,
        flashcard_count=overview.flashcard_count,
    )


def _unexpected(action: str, e: Exception) -> HTTPException:
    logger.error(f"Admin action {action} failed: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get("/users")
def list_users(
    access: Annotated[AccessContext, Depends(admin_access("list_users"))],
    use_case: AdminUseCase,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 20,
    role: str | None = None,
    search: str | None = None,
) -> AdminUserListResponse:
    """List users, newest first, optionally filtered by role or email substring."""
    try:
        result = use_case.list_users(Pagination(page, page_size), role=role, search=search)
        return AdminUserListResponse(
            items=[_overview_response(item) for item in result.items],
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_previous=result.has_previous,
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("list_users", e) from e


@router.get("/users/{user_id}")
def get_user(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("view_user"))],
    use_case: AdminUseCase,
) -> AdminUserResponse:
    try:
        return _overview_response(use_case.get_user(user_id))
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("view_user", e) from e


@router.put("/users/{user_id}")
def update_user(
    user_id: UserIdPath,
    update_data: AdminUserUpdateRequest,
    access: Annotated[AccessContext, Depends(admin_access("update_user"))],
    use_case: AdminUseCase,
) -> AdminUserResponse:
    """Change a user's email and/or role. Administrators cannot give themselves a new role."""
    try:
        if update_data.role is not None and update_data.role != access.user.role:
            AccessPipeline(prevent_self_harm).enforce(replace(access, action="change_role"))
        overview = use_case.update_user(user_id, email=update_data.email, role=update_data.role)
        return _overview_response(overview)
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("update_user", e) from e


@router.delete("/users/{user_id}")
def delete_user(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("delete_user"))],
    use_case: AdminUseCase,
) -> AdminDeleteResponse:
    """Delete a user and all of their flashcards."""
    try:
        deleted = use_case.delete_user(user_id)
        return AdminDeleteResponse(
            success=True, message="User deleted successfully", deleted_count=deleted
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("delete_user", e) from e


@router.post("/users/{user_id}/promote")
def promote_user(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("promote_user"))],
    use_case: AdminUseCase,
) -> AdminUserActionResponse:
    try:
        user = use_case.set_role(user_id, Role.ADMIN)
        return AdminUserActionResponse(
            success=True,
            message="User promoted to admin",
            user=UserDetailsResponse.from_entity(user),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("promote_user", e) from e


@router.post("/users/{user_id}/demote")
def demote_user(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("demote_user"))],
    use_case: AdminUseCase,
) -> AdminUserActionResponse:
    try:
        user = use_case.set_role(user_id, Role.USER)
        return AdminUserActionResponse(
            success=True,
            message="Admin role removed",
            user=UserDetailsResponse.from_entity(user),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("demote_user", e) from e


@router.get("/users/{user_id}/flashcards")
def list_user_flashcards(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("view_user_flashcards"))],
    use_case: AdminUseCase,
) -> FlashcardsListResponse:
    try:
        flashcards = [Flashcard.from_entity(f) for f in use_case.list_user_flashcards(user_id)]
        return FlashcardsListResponse(flashcards=flashcards, count=len(flashcards))
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("view_user_flashcards", e) from e


@router.delete("/users/{user_id}/flashcards")
def delete_user_flashcards(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(admin_access("delete_user_flashcards"))],
    use_case: AdminUseCase,
) -> AdminDeleteResponse:
    try:
        deleted = use_case.delete_user_flashcards(user_id)
        return AdminDeleteResponse(
            success=True, message=f"Deleted {deleted} flashcards", deleted_count=deleted
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("delete_user_flashcards", e) from e


@router.post("/users/{user_id}/reset-password")
def reset_password(
    user_id: UserIdPath,
    reset_data: AdminPasswordResetRequest,
    access: Annotated[AccessContext, Depends(admin_access("reset_password"))],
    use_case: AdminUseCase,
) -> AdminActionResponse:
    try:
        use_case.reset_password(user_id, reset_data.new_password)
        return AdminActionResponse(success=True, message="Password reset successfully")
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("reset_password", e) from e


@router.get("/system/health")
def system_health(
    access: Annotated[AccessContext, Depends(admin_access("system_health"))],
    stats_use_case: FlashcardStatsUseCase = Depends(
        inject_use_case(container.flashcard_stats_use_case)
    ),
) -> SystemHealthResponse:
    """Database reachability and headline counts."""
    settings = get_settings()
    try:
        stats = stats_use_case.system_stats()
    except Exception as e:
        logger.error(f"System health check failed: {e!s}", exc_info=True)
        return SystemHealthResponse(
            status="unhealthy",
            database="unavailable",
            users=0,
            flashcards=0,
            version=settings.VERSION,
            environment=settings.ENVIRONMENT,
        )
    return SystemHealthResponse(
        status="healthy",
        database="connected",
        users=stats.total_users,
        flashcards=stats.total_flashcards,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )
