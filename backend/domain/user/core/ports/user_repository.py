"""User repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.user.core.entities.user import User
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria


class IUserRepository(ABC):
    """Repository interface for User aggregate.

    Defines the persistence boundary consumed by the account commands.
    Implementations own the backing store and must guarantee:

    - atomic enforcement of the unique ``user_name`` constraint on create
    - atomic predicate-matched update (no read-modify-write gap)

    Every other storage fault is raised as ``RepositoryError``.

    Examples:
        >>> # Implementation example (not actual usage)
        >>> class MongoUserRepository(IUserRepository):
        ...     async def create(self, user: User) -> User:
        ...         # Insert into MongoDB
        ...         pass
    """

    @abstractmethod
    async def find_one(self, criteria: UserCriteria) -> Optional[User]:
        """Find the single user matching the criteria.

        Args:
            criteria: user_name and, optionally, hashed password

        Returns:
            User entity if found, None otherwise

        Raises:
            InconsistentMatchError: If more than one record matches
            RepositoryError: If the lookup fails

        Examples:
            >>> user = await repository.find_one(UserCriteria("alice"))
            >>> if user:
            ...     print(user.nick_name)
        """
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: User entity to persist (password already hashed)

        Returns:
            The stored user

        Raises:
            DuplicateKeyError: If user_name is already taken
            RepositoryError: If the insert fails

        Note:
            Callers may pre-check availability, but this unique constraint
            is the authoritative guard against concurrent registrations.
        """
        pass

    @abstractmethod
    async def update(self, changes: UserChanges, criteria: UserCriteria) -> bool:
        """Apply changes to the user matching the criteria.

        Args:
            changes: Fields to set (None fields are ignored)
            criteria: Predicate evaluated atomically with the write

        Returns:
            True if a record matched and was updated, False otherwise

        Raises:
            RepositoryError: If the update fails

        Examples:
            >>> changed = await repository.update(
            ...     UserChanges(password=new_hash),
            ...     UserCriteria("alice", password=old_hash),
            ... )
        """
        pass

    @abstractmethod
    async def delete(self, criteria: UserCriteria) -> bool:
        """Delete the user matching the criteria.

        Args:
            criteria: Predicate selecting the record

        Returns:
            True if a record was removed, False if nothing matched

        Raises:
            RepositoryError: If the delete fails
        """
        pass
