"""API routes for deck and system statistics."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from lingocards.application.identity.services.access_pipeline import AccessContext
from lingocards.application.learning.use_cases.flashcard_stats_use_case import (
    FlashcardStatsUseCase,
    UserStats,
)
from lingocards.core import container
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.identity.dependencies import (
    CurrentUser,
    admin_access,
    owner_or_admin_access,
)
from lingocards.infrastructure.learning.schemas import (
    DashboardResponse,
    DeckStatsSchema,
    PerformanceResponse,
    RecommendationSchema,
    SystemStatsResponse,
    UserStatsResponse,
)

router = APIRouter(prefix="/stats", tags=["stats"])

StatsService = Annotated[
    FlashcardStatsUseCase, Depends(inject_use_case(container.flashcard_stats_use_case))
]
UserIdPath = Annotated[int, Path(gt=0)]
PeriodQuery = Annotated[int, Query(description="Look-back window in days: 7, 30, 90 or 365")]
MetricQuery = Annotated[str, Query(description="reviews, difficulty or accuracy")]


def _user_stats_response(user_id: int, stats: UserStats) -> UserStatsResponse:
    return UserStatsResponse(
        user_id=user_id,
        **DeckStatsSchema.from_stats(stats.deck).model_dump(),
        recommendations=[RecommendationSchema.from_recommendation(r) for r in stats.recommendations],
    )


def _dashboard_response(user_id: int, stats: UserStats) -> DashboardResponse:
    return DashboardResponse.build(user_id, stats.deck, stats.recommendations, stats.generated_at)


@router.get("/me")
def get_my_stats(current_user: CurrentUser, use_case: StatsService) -> UserStatsResponse:
    user_id = current_user.id.value
    return _user_stats_response(user_id, use_case.user_stats(user_id))


@router.get("/me/dashboard")
def get_my_dashboard(current_user: CurrentUser, use_case: StatsService) -> DashboardResponse:
    user_id = current_user.id.value
    return _dashboard_response(user_id, use_case.user_stats(user_id))


@router.get("/me/performance")
def get_my_performance(
    current_user: CurrentUser,
    use_case: StatsService,
    period: PeriodQuery = 30,
    metric: MetricQuery = "reviews",
) -> PerformanceResponse:
    """Performance over the last `period` days. Unsupported periods or metrics get 400."""
    user_id = current_user.id.value
    return PerformanceResponse.from_report(user_id, use_case.performance(user_id, period, metric))


@router.get("/users/{user_id}")
def get_user_stats(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(owner_or_admin_access("view_user_stats"))],
    use_case: StatsService,
) -> UserStatsResponse:
    """Statistics for one user, visible to that user and to administrators."""
    return _user_stats_response(user_id, use_case.user_stats(user_id))


@router.get("/users/{user_id}/dashboard")
def get_user_dashboard(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(owner_or_admin_access("view_user_dashboard"))],
    use_case: StatsService,
) -> DashboardResponse:
    return _dashboard_response(user_id, use_case.user_stats(user_id))


@router.get("/users/{user_id}/performance")
def get_user_performance(
    user_id: UserIdPath,
    access: Annotated[AccessContext, Depends(owner_or_admin_access("view_user_performance"))],
    use_case: StatsService,
    period: PeriodQuery = 30,
    metric: MetricQuery = "reviews",
) -> PerformanceResponse:
    return PerformanceResponse.from_report(user_id, use_case.performance(user_id, period, metric))


@router.get("/system")
def get_system_stats(
    access: Annotated[AccessContext, Depends(admin_access("view_system_stats"))],
    use_case: StatsService,
) -> SystemStatsResponse:
    stats = use_case.system_stats()
    return SystemStatsResponse(
        total_users=stats.total_users,
        admin_users=stats.admin_users,
        total_flashcards=stats.total_flashcards,
        users_with_flashcards=stats.users_with_flashcards,
        reviewed_last_week=stats.reviewed_last_week,
        reviewed_last_month=stats.reviewed_last_month,
        average_difficulty=stats.average_difficulty,
    )
