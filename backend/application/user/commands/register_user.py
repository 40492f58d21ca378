"""Register user command."""

from dataclasses import dataclass
from typing import Optional, Union

import structlog

from domain.user.core.entities.user import User
from domain.user.core.entities.user_profile import UserProfile
from domain.user.core.exceptions.user_errors import (
    AccountExistsError,
    InvalidInputError,
    RegistrationFailedError,
    RepositoryError,
    StorageUnavailableError,
)
from domain.user.core.ports.password_hasher import IPasswordHasher
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserCriteria

logger = structlog.get_logger(__name__)


@dataclass
class RegisterUserCommand:
    """Command to register a new account.

    The availability lookup is only a fast path. Two concurrent
    registrations can both pass it; the repository's unique constraint
    then rejects the loser, which surfaces as a registration failure.

    Examples:
        >>> command = RegisterUserCommand(repository, hasher)
        >>> profile = await command.execute("alice", "pw1", Gender.MALE)
        >>> profile.nick_name
        'alice'
    """

    repository: IUserRepository
    hasher: IPasswordHasher

    async def execute(
        self,
        user_name: str,
        password: str,
        gender: Optional[Union[Gender, int]] = None,
    ) -> UserProfile:
        """Execute registration.

        Args:
            user_name: Requested account name
            password: Plaintext password (hashed before storage)
            gender: Gender code (defaults to undisclosed)

        Returns:
            Public profile of the new user

        Raises:
            AccountExistsError: If user_name is already registered
            RegistrationFailedError: If the insert fails, including a lost
                race on the unique constraint
            StorageUnavailableError: If the availability lookup fails
            InvalidInputError: If user_name or password is blank, or gender
                is not a known code
        """
        if not user_name or not user_name.strip():
            raise InvalidInputError("user_name cannot be empty")
        if not password:
            raise InvalidInputError("password cannot be empty")
        try:
            resolved_gender = Gender.from_value(gender)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"unknown gender {gender!r}") from e

        try:
            existing = await self.repository.find_one(UserCriteria(user_name))
        except RepositoryError as e:
            logger.error(
                "User lookup failed during registration",
                user_name=user_name,
                error=str(e),
            )
            raise StorageUnavailableError() from e

        if existing is not None:
            raise AccountExistsError(user_name)

        user = User.create(user_name, self.hasher.hash(password), resolved_gender)

        try:
            created = await self.repository.create(user)
        except RepositoryError as e:
            logger.error("User creation failed", user_name=user_name, error=str(e))
            raise RegistrationFailedError() from e

        logger.info("User registered", user_name=user_name)
        return created.to_profile()
