from collections.abc import Callable
from typing import TypeVar

from dependency_injector.providers import Provider

from lingocards.core import container
from lingocards.database import DatabaseSession

T = TypeVar("T")


def inject_use_case(provider: Provider[T]) -> Callable[[DatabaseSession], T]:
    """
    Create a FastAPI dependency for a container provider.

    The provider is built against the request's database session.
    """

    def dependency(db: DatabaseSession) -> T:
        with container.db.override(db):
            return provider()

    return dependency
