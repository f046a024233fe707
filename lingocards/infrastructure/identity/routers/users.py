import logging

from fastapi import APIRouter, Depends, HTTPException, status

from lingocards.application.identity.use_cases.user_profile_use_case import UserProfileUseCase
from lingocards.core import container
from lingocards.domain.common.exceptions import DomainError
from lingocards.exceptions import LingoCardsError
from lingocards.infrastructure.common.di import inject_use_case
from lingocards.infrastructure.identity.dependencies import CurrentUser
from lingocards.infrastructure.identity.schemas import (
    AccountDeleteResponse,
    UserDetailsResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_me(current_user: CurrentUser) -> UserDetailsResponse:
    """Get the current user's profile information."""
    return UserDetailsResponse.from_entity(current_user)


@router.post("/me")
def update_me(
    current_user: CurrentUser,
    update_data: UserUpdateRequest,
    use_case: UserProfileUseCase = Depends(inject_use_case(container.user_profile_use_case)),
) -> UserDetailsResponse:
    """
    Update the current user's profile.

    - To change email: provide `email`
    - To change password: provide both `current_password` and `new_password`
    """
    try:
        user = use_case.update_user(
            user_id=current_user.id.value,
            email=update_data.email,
            current_password=update_data.current_password,
            new_password=update_data.new_password,
        )
        return UserDetailsResponse.from_entity(user)
    except (LingoCardsError, DomainError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Failed to update user {current_user.id.value}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.delete("/me")
def delete_me(
    current_user: CurrentUser,
    use_case: UserProfileUseCase = Depends(inject_use_case(container.user_profile_use_case)),
) -> AccountDeleteResponse:
    """Delete the current user's account together with all of their flashcards."""
    try:
        deleted = use_case.delete_account(current_user.id.value)
        return AccountDeleteResponse(
            success=True, message="Account deleted successfully", flashcards_deleted=deleted
        )
    except (LingoCardsError, DomainError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Failed to delete user {current_user.id.value}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
