"""Check user exists query."""

from dataclasses import dataclass

import structlog

from domain.user.core.entities.user_profile import UserProfile
from domain.user.core.exceptions.user_errors import (
    AccountNotFoundError,
    RepositoryError,
    StorageUnavailableError,
)
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class CheckUserExistsQuery:
    """Query telling whether a user name is taken.

    Read-only operation that retrieves the public profile.

    Examples:
        >>> query = CheckUserExistsQuery(repository)
        >>> profile = await query.execute("alice")
    """

    repository: IUserRepository

    async def execute(self, user_name: str) -> UserProfile:
        """Get the profile registered under ``user_name``.

        Raises:
            AccountNotFoundError: If no user has that name
            StorageUnavailableError: If the lookup fails
        """
        try:
            user = await self.repository.find_one(UserCriteria(user_name))
        except RepositoryError as e:
            logger.error("User lookup failed", user_name=user_name, error=str(e))
            raise StorageUnavailableError() from e

        if user is None:
            raise AccountNotFoundError(user_name)

        return user.to_profile()
