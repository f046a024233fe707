from .flashcard_repository import FlashcardRepositoryProtocol

__all__ = ["FlashcardRepositoryProtocol"]
