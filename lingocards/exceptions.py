"""Application-level exception hierarchy for LingoCards."""

from fastapi import HTTPException
from starlette import status


class LingoCardsError(Exception):
    """Base exception for application errors that carry their own HTTP status."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


CredentialsException = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)
