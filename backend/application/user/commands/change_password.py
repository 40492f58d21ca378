"""Change password command."""

from dataclasses import dataclass

import structlog

from domain.user.core.exceptions.user_errors import (
    PasswordChangeFailedError,
    RepositoryError,
)
from domain.user.core.ports.password_hasher import IPasswordHasher
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class ChangePasswordCommand:
    """Command to replace the stored credential.

    The old password is re-verified inside the update predicate, so the
    check and the write are a single repository call. Whether the caller's
    session survives is decided by the caller.

    Examples:
        >>> command = ChangePasswordCommand(repository, hasher)
        >>> await command.execute("alice", "pw1", "pw9")
    """

    repository: IUserRepository
    hasher: IPasswordHasher

    async def execute(self, user_name: str, old_password: str, new_password: str) -> None:
        """Execute password change.

        Raises:
            PasswordChangeFailedError: If the old password does not match or
                storage failed
        """
        changes = UserChanges(password=self.hasher.hash(new_password))
        criteria = UserCriteria(user_name, password=self.hasher.hash(old_password))

        try:
            updated = await self.repository.update(changes, criteria)
        except RepositoryError as e:
            logger.error("Password update failed", user_name=user_name, error=str(e))
            raise PasswordChangeFailedError() from e

        if not updated:
            logger.info("Password change rejected", user_name=user_name)
            raise PasswordChangeFailedError()

        logger.info("Password changed", user_name=user_name)
