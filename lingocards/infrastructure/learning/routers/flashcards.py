"""API routes for flashcard management and review."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from lingocards.application.learning.use_cases.flashcard_use_case import FlashcardUseCase
from lingocards.application.learning.use_cases.review_flashcard_use_case import (
    ReviewFlashcardUseCase,
)
from lingocards.core import container
from lingocards.domain.common.exceptions import DomainError
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.identity.dependencies import CurrentUser
from lingocards.infrastructure.learning.schemas import (
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])
# Short alias used by study clients: POST /cards/{id}/review
cards_router = APIRouter(prefix="/cards", tags=["flashcards"])

FlashcardIdPath = Annotated[int, Path(gt=0, description="Flashcard id")]
FlashcardService = Annotated[
    FlashcardUseCase, Depends(inject_use_case(container.flashcard_use_case))
]


def _unexpected(message: str, e: Exception) -> HTTPException:
    logger.error(f"{message}: {e!s}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again later.",
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_flashcard(
    request: FlashcardCreateRequest,
    current_user: CurrentUser,
    use_case: FlashcardService,
) -> FlashcardResponse:
    """Create a flashcard owned by the caller."""
    try:
        flashcard = use_case.create_flashcard(
            user_id=current_user.id.value,
            english=request.english,
            spanish=request.spanish,
        )
        return FlashcardResponse(
            success=True,
            message="Flashcard created successfully",
            flashcard=Flashcard.from_entity(flashcard),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to create flashcard", e) from e


@router.get("")
def list_flashcards(
    current_user: CurrentUser,
    use_case: FlashcardService,
    order_by: str = "created_at",
    order: str = "desc",
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> FlashcardsListResponse:
    """List the caller's flashcards."""
    try:
        flashcards = use_case.list_flashcards(
            user_id=current_user.id.value,
            order_by=order_by,
            order=order,
            limit=limit,
            offset=offset,
        )
        return FlashcardsListResponse(
            flashcards=[Flashcard.from_entity(f) for f in flashcards],
            count=len(flashcards),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to list flashcards", e) from e


@router.get("/count")
def count_flashcards(current_user: CurrentUser, use_case: FlashcardService) -> FlashcardCountResponse:
    return FlashcardCountResponse(count=use_case.count_flashcards(current_user.id.value))


@router.post("/import", status_code=status.HTTP_201_CREATED)
def import_flashcards(
    request: FlashcardImportRequest,
    current_user: CurrentUser,
    use_case: FlashcardService,
) -> FlashcardImportResponse:
    """
    Create up to 100 flashcards in one request.

    Each item is validated on its own; the response reports which ones failed.
    """
    try:
        result = use_case.import_flashcards(
            user_id=current_user.id.value,
            items=[(item.english, item.spanish) for item in request.flashcards],
        )
        return FlashcardImportResponse(
            success=result.failed == 0,
            message=f"Imported {result.imported} flashcards, {result.failed} failed",
            imported=result.imported,
            failed=result.failed,
            results=[
                FlashcardImportItemResult(
                    index=item.index,
                    success=item.success,
                    flashcard=Flashcard.from_entity(item.flashcard) if item.flashcard else None,
                    error=item.error,
                )
                for item in result.results
            ],
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected("Failed to import flashcards", e) from e


@router.get("/{flashcard_id}")
def get_flashcard(
    flashcard_id: FlashcardIdPath,
    current_user: CurrentUser,
    use_case: FlashcardService,
) -> FlashcardResponse:
    try:
        flashcard = use_case.get_flashcard(flashcard_id, current_user.id.value)
        return FlashcardResponse(
            success=True,
            message="Flashcard retrieved successfully",
            flashcard=Flashcard.from_entity(flashcard),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected(f"Failed to get flashcard {flashcard_id}", e) from e


@router.put("/{flashcard_id}")
def update_flashcard(
    flashcard_id: FlashcardIdPath,
    request: FlashcardUpdateRequest,
    current_user: CurrentUser,
    use_case: FlashcardService,
) -> FlashcardResponse:
    """
    Update a flashcard's English and/or Spanish text.

    Returns:
        Updated flashcard

    Raises:
        HTTPException: If flashcard not found or update fails
    """
    try:
        flashcard = use_case.update_flashcard(
            flashcard_id=flashcard_id,
            user_id=current_user.id.value,
            english=request.english,
            spanish=request.spanish,
        )
        return FlashcardResponse(
            success=True,
            message="Flashcard updated successfully",
            flashcard=Flashcard.from_entity(flashcard),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected(f"Failed to update flashcard {flashcard_id}", e) from e


@router.delete("/{flashcard_id}")
def delete_flashcard(
    flashcard_id: FlashcardIdPath,
    current_user: CurrentUser,
    use_case: FlashcardService,
) -> FlashcardDeleteResponse:
    try:
        use_case.delete_flashcard(flashcard_id=flashcard_id, user_id=current_user.id.value)
        return FlashcardDeleteResponse(success=True, message="Flashcard deleted successfully")
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected(f"Failed to delete flashcard {flashcard_id}", e) from e


@router.post("/{flashcard_id}/review")
@cards_router.post("/{flashcard_id}/review")
def review_flashcard(
    flashcard_id: FlashcardIdPath,
    request: ReviewRequest,
    current_user: CurrentUser,
    use_case: ReviewFlashcardUseCase = Depends(
        inject_use_case(container.review_flashcard_use_case)
    ),
) -> ReviewResponse:
    """
    Record how well the caller recalled a flashcard and reschedule it.

    Responds 400 for a rating outside 1..5 and 404 for a card the caller does not own.
    """
    try:
        flashcard, outcome = use_case.review_flashcard(
            flashcard_id=flashcard_id,
            user_id=current_user.id.value,
            rating=request.performance_rating,
        )
        return ReviewResponse(
            success=True,
            message="Flashcard reviewed successfully",
            flashcard=Flashcard.from_entity(flashcard),
            review=ReviewDetails.from_outcome(outcome),
        )
    except (LingoCardsError, DomainError):
        raise
    except Exception as e:
        raise _unexpected(f"Failed to review flashcard {flashcard_id}", e) from e
