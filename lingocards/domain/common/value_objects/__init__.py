from .ids import FlashcardId, UserId

__all__ = ["FlashcardId", "UserId"]
