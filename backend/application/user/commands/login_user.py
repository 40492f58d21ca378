"""Login user command."""

from dataclasses import dataclass

import structlog

from domain.user.core.entities.user_profile import UserProfile
from domain.user.core.exceptions.user_errors import (
    LoginFailedError,
    RepositoryError,
    StorageUnavailableError,
)
from domain.user.core.ports.password_hasher import IPasswordHasher
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class LoginUserCommand:
    """Command verifying credentials against the stored hash.

    Looks the user up by name and password hash in one predicate, so an
    unknown user and a wrong password produce the same failure.

    Examples:
        >>> command = LoginUserCommand(repository, hasher)
        >>> profile = await command.execute("alice", "pw1")
    """

    repository: IUserRepository
    hasher: IPasswordHasher

    async def execute(self, user_name: str, password: str) -> UserProfile:
        """Execute login verification.

        Args:
            user_name: Account name
            password: Plaintext password

        Returns:
            Public profile of the authenticated user (no password)

        Raises:
            LoginFailedError: If no user matches name and password
            StorageUnavailableError: If the lookup fails
        """
        criteria = UserCriteria(user_name, password=self.hasher.hash(password))

        try:
            user = await self.repository.find_one(criteria)
        except RepositoryError as e:
            logger.error("Credential lookup failed", user_name=user_name, error=str(e))
            raise StorageUnavailableError() from e

        if user is None:
            logger.info("Login rejected", user_name=user_name)
            raise LoginFailedError()

        return user.to_profile()
