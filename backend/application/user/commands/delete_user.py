"""Delete user command."""

from dataclasses import dataclass

import structlog

from domain.user.core.exceptions.user_errors import (
    DeletionFailedError,
    RepositoryError,
)
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class DeleteUserCommand:
    """Command to remove an account.

    Sessions held by the deleted user are not touched.

    Examples:
        >>> command = DeleteUserCommand(repository)
        >>> await command.execute("alice")
    """

    repository: IUserRepository

    async def execute(self, user_name: str) -> None:
        """Execute deletion.

        Raises:
            DeletionFailedError: If no user was removed or storage failed
        """
        try:
            deleted = await self.repository.delete(UserCriteria(user_name))
        except RepositoryError as e:
            logger.error("User deletion failed", user_name=user_name, error=str(e))
            raise DeletionFailedError() from e

        if not deleted:
            raise DeletionFailedError()

        logger.info("User deleted", user_name=user_name)
