"""Pydantic schemas for study sessions and statistics."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from lingocards.domain.learning.services.study_planner import (
    DeckStats,
    Insight,
    PerformanceReport,
    Recommendation,
    SessionMetadata,
)
from lingocards.infrastructure.learning.schemas.flashcard_schemas import Flashcard


class StudyCard(Flashcard):
    priority: int = Field(..., description="Higher means studied sooner")


class SessionMetadataSchema(BaseModel):
    total_cards: int
    new_cards: int
    review_cards: int
    average_difficulty: float
    estimated_minutes: int

    @classmethod
    def from_metadata(cls, metadata: SessionMetadata) -> "SessionMetadataSchema":
        return cls(
            total_cards=metadata.total_cards,
            new_cards=metadata.new_cards,
            review_cards=metadata.review_cards,
            average_difficulty=metadata.average_difficulty,
            estimated_minutes=metadata.estimated_minutes,
        )


class StudySessionResponse(BaseModel):
    flashcards: list[StudyCard]
    session_metadata: SessionMetadataSchema


class DueCardsResponse(BaseModel):
    due_cards: list[Flashcard]
    overdue_cards: list[Flashcard]
    new_cards: list[Flashcard]
    total_due: int


class StudyReviewRequest(BaseModel):
    performance_rating: Any = Field(
        ...,
        validation_alias=AliasChoices("performance_rating", "performanceRating"),
        description="How well the card was recalled, 1 (forgot) to 5 (perfect)",
    )
    time_spent: float | None = Field(
        None,
        validation_alias=AliasChoices("time_spent", "timeSpent"),
        description="Seconds spent on the card",
    )


class SessionProgressSchema(BaseModel):
    reviewed_today: int = Field(..., description="Cards reviewed since midnight UTC")
    remaining_due: int = Field(..., description="Reviewed cards still due now")
    time_spent: float | None = None


class StudyReviewResponse(BaseModel):
    flashcard: Flashcard
    session_progress: SessionProgressSchema


class SessionReviewItem(BaseModel):
    flashcard_id: int
    performance_rating: Any = Field(
        ..., validation_alias=AliasChoices("performance_rating", "performanceRating")
    )


class SessionCompleteRequest(BaseModel):
    reviews: list[SessionReviewItem] = Field(default_factory=list)
    session_duration: float | None = Field(None, description="Session length in seconds")


class RecommendationSchema(BaseModel):
    type: str
    priority: str
    message: str

    @classmethod
    def from_recommendation(cls, recommendation: Recommendation) -> "RecommendationSchema":
        return cls(
            type=recommendation.type,
            priority=recommendation.priority,
            message=recommendation.message,
        )


class DeckStatsSchema(BaseModel):
    total_cards: int
    reviewed_cards: int
    new_cards: int
    total_reviews: int
    average_difficulty: float
    difficulty_distribution: dict[int, int]
    due_cards: int
    overdue_cards: int
    study_load: int

    @classmethod
    def from_stats(cls, stats: DeckStats) -> "DeckStatsSchema":
        return cls(
            total_cards=stats.total_cards,
            reviewed_cards=stats.reviewed_cards,
            new_cards=stats.new_cards,
            total_reviews=stats.total_reviews,
            average_difficulty=stats.average_difficulty,
            difficulty_distribution=stats.difficulty_distribution,
            due_cards=stats.due_cards,
            overdue_cards=stats.overdue_cards,
            study_load=stats.study_load,
        )


class SessionCompleteResponse(BaseModel):
    cards_reviewed: int
    average_performance: float
    accuracy_rate: float = Field(..., description="Percentage of ratings of 3 or higher")
    performance_breakdown: dict[int, int]
    session_duration: float | None
    stats: DeckStatsSchema


class RecommendationsResponse(BaseModel):
    recommendations: list[RecommendationSchema]


class UserStatsResponse(DeckStatsSchema):
    user_id: int
    recommendations: list[RecommendationSchema]


class SystemStatsResponse(BaseModel):
    total_users: int
    admin_users: int
    total_flashcards: int
    users_with_flashcards: int
    reviewed_last_week: int
    reviewed_last_month: int
    average_difficulty: float


class DashboardOverview(BaseModel):
    total_flashcards: int
    total_reviews: int
    average_difficulty: float
    last_study_session: datetime | None


class DashboardProgress(BaseModel):
    reviewed_cards: int
    unreviewed_cards: int
    completion_rate: float = Field(..., description="Percentage of cards reviewed at least once")


class SpacedRepetitionSummary(BaseModel):
    due_cards: int
    overdue_cards: int
    new_cards: int
    study_load: int


class DashboardResponse(BaseModel):
    """Deck statistics grouped the way the dashboard displays them."""

    user_id: int
    overview: DashboardOverview
    progress: DashboardProgress
    spaced_repetition: SpacedRepetitionSummary
    difficulty_distribution: dict[int, int]
    recommendations: list[RecommendationSchema]
    last_updated: datetime

    @classmethod
    def build(
        cls,
        user_id: int,
        stats: DeckStats,
        recommendations: list[Recommendation],
        generated_at: datetime,
    ) -> "DashboardResponse":
        return cls(
            user_id=user_id,
            overview=DashboardOverview(
                total_flashcards=stats.total_cards,
                total_reviews=stats.total_reviews,
                average_difficulty=stats.average_difficulty,
                last_study_session=stats.last_study_session,
            ),
            progress=DashboardProgress(
                reviewed_cards=stats.reviewed_cards,
                unreviewed_cards=stats.new_cards,
                completion_rate=stats.completion_rate,
            ),
            spaced_repetition=SpacedRepetitionSummary(
                due_cards=stats.due_cards,
                overdue_cards=stats.overdue_cards,
                new_cards=stats.new_cards,
                study_load=stats.study_load,
            ),
            difficulty_distribution=stats.difficulty_distribution,
            recommendations=[RecommendationSchema.from_recommendation(r) for r in recommendations],
            last_updated=generated_at,
        )


class InsightSchema(BaseModel):
    type: str = Field(..., description="positive, suggestion or achievement")
    message: str

    @classmethod
    def from_insight(cls, insight: Insight) -> "InsightSchema":
        return cls(type=insight.type, message=insight.message)


class PerformanceResponse(BaseModel):
    user_id: int
    period_days: int
    metric: str
    total_reviews: int
    reviewed_in_period: int = Field(..., description="Cards last reviewed inside the period")
    average_difficulty: float
    difficulty_distribution: dict[int, int]
    study_streak: int
    insights: list[InsightSchema]
    generated_at: datetime

    @classmethod
    def from_report(cls, user_id: int, report: PerformanceReport) -> "PerformanceResponse":
        return cls(
            user_id=user_id,
            period_days=report.period_days,
            metric=report.metric,
            total_reviews=report.stats.total_reviews,
            reviewed_in_period=report.reviewed_in_period,
            average_difficulty=report.stats.average_difficulty,
            difficulty_distribution=report.stats.difficulty_distribution,
            study_streak=report.study_streak,
            insights=[InsightSchema.from_insight(i) for i in report.insights],
            generated_at=report.generated_at,
        )
