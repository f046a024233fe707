"""Learning domain exceptions."""

from lingocards.domain.common.exceptions import EntityNotFoundError, ValidationError


class FlashcardNotFoundError(EntityNotFoundError):
    """Raised when a flashcard does not exist or belongs to another user."""

    def __init__(self, flashcard_id: int) -> None:
        super().__init__("Flashcard", flashcard_id)


class InvalidPerformanceRatingError(ValidationError):
    """Raised when a review carries a rating outside the accepted scale."""

    def __init__(self, value: object) -> None:
        super().__init__(
            "Performance rating must be an integer between 1 and 5",
            field="performance_rating",
            value=value,
        )
