from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from lingocards.application.identity.services.authorization_service import AuthorizationService
from lingocards.application.identity.use_cases.admin_user_use_case import AdminUserUseCase
from lingocards.application.identity.use_cases.authentication_use_case import (
    AuthenticationUseCase,
)
from lingocards.application.identity.use_cases.register_user_use_case import RegisterUserUseCase
from lingocards.application.identity.use_cases.user_profile_use_case import UserProfileUseCase
from lingocards.application.learning.use_cases.flashcard_stats_use_case import (
    FlashcardStatsUseCase,
)
from lingocards.application.learning.use_cases.flashcard_use_case import FlashcardUseCase
from lingocards.application.learning.use_cases.review_flashcard_use_case import (
    ReviewFlashcardUseCase,
)
from lingocards.application.learning.use_cases.study_session_use_case import (
    StudySessionUseCase,
)
from lingocards.config import get_settings
from lingocards.infrastructure.identity.repositories.user_repository import UserRepository
from lingocards.infrastructure.identity.services.password_service import PasswordService
from lingocards.infrastructure.identity.services.token_service import TokenService
from lingocards.infrastructure.learning.repositories.flashcard_repository import (
    FlashcardRepository,
)


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    settings = providers.Singleton(get_settings)

    # Request-scoped session, overridden per request
    db = providers.Dependency(instance_of=Session)

    # Repositories
    user_repository = providers.Factory(UserRepository, db=db)
    flashcard_repository = providers.Factory(FlashcardRepository, db=db)

    # Identity services
    password_service = providers.Singleton(PasswordService, settings=settings)
    token_service = providers.Singleton(TokenService, settings=settings)
    authorization_service = providers.Singleton(AuthorizationService)

    # Identity use cases
    authentication_use_case = providers.Factory(
        AuthenticationUseCase,
        user_repository=user_repository,
        password_service=password_service,
        token_service=token_service,
    )

    register_user_use_case = providers.Factory(
        RegisterUserUseCase,
        user_repository=user_repository,
        password_service=password_service,
        token_service=token_service,
        password_min_length=settings.provided.PASSWORD_MIN_LENGTH,
    )

    user_profile_use_case = providers.Factory(
        UserProfileUseCase,
        user_repository=user_repository,
        flashcard_repository=flashcard_repository,
        password_service=password_service,
        password_min_length=settings.provided.PASSWORD_MIN_LENGTH,
    )

    admin_user_use_case = providers.Factory(
        AdminUserUseCase,
        user_repository=user_repository,
        flashcard_repository=flashcard_repository,
        password_service=password_service,
        password_min_length=settings.provided.PASSWORD_MIN_LENGTH,
    )

    # Learning use cases
    flashcard_use_case = providers.Factory(
        FlashcardUseCase,
        flashcard_repository=flashcard_repository,
        max_text_length=settings.provided.FLASHCARD_MAX_TEXT_LENGTH,
    )

    review_flashcard_use_case = providers.Factory(
        ReviewFlashcardUseCase,
        flashcard_repository=flashcard_repository,
    )

    study_session_use_case = providers.Factory(
        StudySessionUseCase,
        flashcard_repository=flashcard_repository,
        review_use_case=review_flashcard_use_case,
    )

    flashcard_stats_use_case = providers.Factory(
        FlashcardStatsUseCase,
        flashcard_repository=flashcard_repository,
        user_repository=user_repository,
    )


container = Container()
