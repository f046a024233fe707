"""Learning context schemas."""

from lingocards.infrastructure.learning.schemas.flashcard_schemas import (
    Flashcard,
    FlashcardCountResponse,
    FlashcardCreateRequest,
    FlashcardDeleteResponse,
    FlashcardImportItemResult,
    FlashcardImportRequest,
    FlashcardImportResponse,
    FlashcardResponse,
    FlashcardsListResponse,
    FlashcardUpdateRequest,
    ReviewDetails,
    ReviewRequest,
    ReviewResponse,
)
from lingocards.infrastructure.learning.schemas.study_schemas import (
    DashboardResponse,
    DeckStatsSchema,
    DueCardsResponse,
    InsightSchema,
    PerformanceResponse,
    RecommendationSchema,
    RecommendationsResponse,
    SessionCompleteRequest,
    SessionCompleteResponse,
    SessionMetadataSchema,
    SessionProgressSchema,
    StudyCard,
    StudyReviewRequest,
    StudyReviewResponse,
    StudySessionResponse,
    SystemStatsResponse,
    UserStatsResponse,
)

__all__ = [
    "DashboardResponse",
    "DeckStatsSchema",
    "DueCardsResponse",
    "Flashcard",
    "FlashcardCountResponse",
    "FlashcardCreateRequest",
    "FlashcardDeleteResponse",
    "FlashcardImportItemResult",
    "FlashcardImportRequest",
    "FlashcardImportResponse",
    "FlashcardResponse",
    "FlashcardUpdateRequest",
    "FlashcardsListResponse",
    "InsightSchema",
    "PerformanceResponse",
    "RecommendationSchema",
    "RecommendationsResponse",
    "ReviewDetails",
    "ReviewRequest",
    "ReviewResponse",
    "SessionCompleteRequest",
    "SessionCompleteResponse",
    "SessionMetadataSchema",
    "SessionProgressSchema",
    "StudyCard",
    "StudyReviewRequest",
    "StudyReviewResponse",
    "StudySessionResponse",
    "SystemStatsResponse",
    "UserStatsResponse",
]
