"""Change user info command."""

from dataclasses import dataclass

import structlog

from domain.user.core.exceptions.user_errors import (
    InvalidInputError,
    ProfileUpdateFailedError,
    RepositoryError,
)
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class ChangeUserInfoCommand:
    """Command to update public profile fields.

    Only nick_name, city, avatar and gender can change here; a password
    in ``changes`` is rejected.

    Examples:
        >>> command = ChangeUserInfoCommand(repository)
        >>> await command.execute("alice", UserChanges(nick_name="Ali"))
    """

    repository: IUserRepository

    async def execute(self, user_name: str, changes: UserChanges) -> None:
        """Execute profile update.

        Args:
            user_name: Authenticated user's name
            changes: Profile fields to set

        Raises:
            ProfileUpdateFailedError: If nothing was updated or storage failed
            InvalidInputError: If changes include a password
        """
        if changes.password is not None:
            raise InvalidInputError("password is changed through ChangePasswordCommand")

        try:
            updated = await self.repository.update(changes, UserCriteria(user_name))
        except RepositoryError as e:
            logger.error("Profile update failed", user_name=user_name, error=str(e))
            raise ProfileUpdateFailedError() from e

        if not updated:
            raise ProfileUpdateFailedError()

        logger.info("Profile updated", user_name=user_name, fields=sorted(changes.as_dict()))
