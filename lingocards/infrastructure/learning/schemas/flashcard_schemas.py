"""Pydantic schemas for flashcard and study request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from lingocards.domain.learning.entities.flashcard import Flashcard as FlashcardEntity
from lingocards.domain.learning.services.review_scheduler import ReviewOutcome


class Flashcard(BaseModel):
    """Schema for Flashcard response."""

    id: int
    user_id: int
    english: str
    spanish: str
    difficulty: int = Field(..., description="0 (easiest) to 5 (hardest)")
    review_count: int
    last_reviewed: datetime | None
    next_review: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_entity(cls, flashcard: FlashcardEntity) -> "Flashcard":
        return cls(
            id=flashcard.id.value,
            user_id=flashcard.user_id.value,
            english=flashcard.english,
            spanish=flashcard.spanish,
            difficulty=flashcard.difficulty,
            review_count=flashcard.review_count,
            last_reviewed=flashcard.last_reviewed,
            next_review=flashcard.next_review,
            created_at=flashcard.created_at,
            updated_at=flashcard.updated_at,
        )


class FlashcardCreateRequest(BaseModel):
    """Schema for creating a new flashcard. The owner is always the caller."""

    english: str = Field(..., description="English side of the card")
    spanish: str = Field(..., description="Spanish side of the card")


class FlashcardUpdateRequest(BaseModel):
    """Schema for updating a flashcard."""

    english: str | None = Field(None, description="New English text")
    spanish: str | None = Field(None, description="New Spanish text")


class FlashcardResponse(BaseModel):
    """Schema for a single-flashcard response."""

    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    flashcard: Flashcard = Field(..., description="The flashcard")


class FlashcardDeleteResponse(BaseModel):
    """Schema for flashcard deletion response."""

    success: bool = Field(..., description="Whether the deletion was successful")
    message: str = Field(..., description="Response message")


class FlashcardsListResponse(BaseModel):
    """Schema for list of flashcards response."""

    flashcards: list[Flashcard] = Field(..., description="List of flashcards")
    count: int = Field(..., description="Number of flashcards returned")


class FlashcardCountResponse(BaseModel):
    count: int = Field(..., description="Total number of flashcards owned by the user")


class ReviewRequest(BaseModel):
    """
    Schema for reviewing a flashcard.

    The rating is accepted as any JSON value so that out-of-range and
    non-numeric ratings reach the scheduler's validation and get a 400.
    """

    performance_rating: Any = Field(
        ...,
        validation_alias=AliasChoices("performance_rating", "performanceRating"),
        description="How well the card was recalled, 1 (forgot) to 5 (perfect)",
    )


class ReviewDetails(BaseModel):
    rating: int
    previous_difficulty: int
    difficulty_change: int
    interval_days: float = Field(..., description="Days until the card is due again")

    @classmethod
    def from_outcome(cls, outcome: ReviewOutcome) -> "ReviewDetails":
        return cls(
            rating=outcome.rating,
            previous_difficulty=outcome.previous_difficulty,
            difficulty_change=outcome.difficulty_change,
            interval_days=round(outcome.interval_days, 2),
        )


class ReviewResponse(FlashcardResponse):
    review: ReviewDetails = Field(..., description="What the review changed")


class FlashcardImportItem(BaseModel):
    english: str = Field(..., description="English side of the card")
    spanish: str = Field(..., description="Spanish side of the card")


class FlashcardImportRequest(BaseModel):
    flashcards: list[FlashcardImportItem] = Field(
        ..., description="Cards to create, at most 100 per request"
    )


class FlashcardImportItemResult(BaseModel):
    index: int = Field(..., description="Position of the item in the request")
    success: bool
    flashcard: Flashcard | None = None
    error: str | None = None


class FlashcardImportResponse(BaseModel):
    success: bool = Field(..., description="True when every item was imported")
    message: str
    imported: int
    failed: int
    results: list[FlashcardImportItemResult]
