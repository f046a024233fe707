"""API routes for study sessions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from lingocards.application.learning.use_cases.study_session_use_case import (
    MAX_DUE_LIMIT,
    MAX_SESSION_SIZE,
    StudySessionUseCase,
)
from lingocards.core import container
from lingocards.domain.common.exceptions import DomainError
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.identity.dependencies import CurrentUser
from lingocards.infrastructure.learning.schemas import (
    DeckStatsSchema,
    DueCardsResponse,
    Flashcard,
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
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study", tags=["study"])

StudyService = Annotated[
    StudySessionUseCase, Depends(inject_use_case(container.study_session_use_case))
]


def _unexpected(message: str, e: Exception) -> HTTPException:
    logger.error(f"{message}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.get("/session")
def get_study_session(
    current_user: CurrentUser,
    use_case: StudyService,
    limit: Annotated[int, Query(ge=1, le=MAX_SESSION_SIZE)] = 20,
) -> StudySessionResponse:
    """The caller's highest-priority cards for a study session."""
    try:
        session = use_case.get_session(current_user.id.value, limit)
        return StudySessionResponse(
            flashcards=[
                StudyCard(**Flashcard.from_entity(item.flashcard).model_dump(), priority=item.priority)
                for item in session.cards
            ],
            session_metadata=SessionMetadataSchema.from_metadata(session.metadata),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to build study session", e) from e


@router.get("/due")
def get_due_cards(
    current_user: CurrentUser,
    use_case: StudyService,
    limit: Annotated[int, Query(ge=1, le=MAX_DUE_LIMIT)] = 50,
) -> DueCardsResponse:
    """Cards due now, overdue cards and cards never studied."""
    try:
        due = use_case.get_due(current_user.id.value, limit)
        return DueCardsResponse(
            due_cards=[Flashcard.from_entity(f) for f in due.due],
            overdue_cards=[Flashcard.from_entity(f) for f in due.overdue],
            new_cards=[Flashcard.from_entity(f) for f in due.new],
            total_due=due.total,
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to load due cards", e) from e


@router.post("/review/{flashcard_id}")
def review_in_session(
    flashcard_id: Annotated[int, Path(gt=0)],
    request: StudyReviewRequest,
    current_user: CurrentUser,
    use_case: StudyService,
) -> StudyReviewResponse:
    """Review a card during a study session and report session progress."""
    try:
        flashcard, _, progress = use_case.review(
            flashcard_id=flashcard_id,
            user_id=current_user.id.value,
            rating=request.performance_rating,
            time_spent=request.time_spent,
        )
        return StudyReviewResponse(
            flashcard=Flashcard.from_entity(flashcard),
            session_progress=SessionProgressSchema(
                reviewed_today=progress.reviewed_today,
                remaining_due=progress.remaining_due,
                time_spent=progress.time_spent,
            ),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected(f"Failed to review flashcard {flashcard_id} in session", e) from e


@router.post("/session/complete")
def complete_session(
    request: SessionCompleteRequest,
    current_user: CurrentUser,
    use_case: StudyService,
) -> SessionCompleteResponse:
    """Summarize a finished study session."""
    try:
        completed = use_case.complete_session(
            user_id=current_user.id.value,
            ratings=[review.performance_rating for review in request.reviews],
            session_duration=request.session_duration,
        )
        summary = completed.summary
        return SessionCompleteResponse(
            cards_reviewed=summary.cards_reviewed,
            average_performance=summary.average_performance,
            accuracy_rate=summary.accuracy_rate,
            performance_breakdown=summary.performance_breakdown,
            session_duration=completed.session_duration,
            stats=DeckStatsSchema.from_stats(completed.stats),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to complete study session", e) from e


@router.get("/recommendations")
def get_recommendations(current_user: CurrentUser, use_case: StudyService) -> RecommendationsResponse:
    recommendations = use_case.get_recommendations(current_user.id.value)
    return RecommendationsResponse(
        recommendations=[RecommendationSchema.from_recommendation(r) for r in recommendations]
    )
