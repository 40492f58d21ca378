"""In-memory User Repository for testing."""

from typing import Dict, Optional

from domain.user.core.entities.user import User
from domain.user.core.exceptions.user_errors import DuplicateKeyError
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria


class InMemoryUserRepository(IUserRepository):
    """In-memory implementation of User repository for testing.

    Stores users in memory using user_name as key, which doubles as the
    unique constraint. No operation suspends between its check and its
    write, so each one is atomic on the event loop.

    Examples:
        >>> repo = InMemoryUserRepository()
        >>> await repo.create(User.create("alice", "<hash>"))
        >>> found = await repo.find_one(UserCriteria("alice"))
    """

    def __init__(self) -> None:
        """Initialize empty in-memory storage."""
        self._users: Dict[str, User] = {}

    async def find_one(self, criteria: UserCriteria) -> Optional[User]:
        """Find user matching user_name (and password hash, if given)."""
        user = self._users.get(criteria.user_name)
        if user is None or not criteria.matches(user):
            return None
        return user

    async def create(self, user: User) -> User:
        """Insert user, rejecting a taken user_name.

        Raises:
            DuplicateKeyError: If user_name already exists
        """
        if user.user_name in self._users:
            raise DuplicateKeyError(user.user_name)
        self._users[user.user_name] = user
        return user

    async def update(self, changes: UserChanges, criteria: UserCriteria) -> bool:
        """Apply changes if the stored user matches the criteria."""
        if changes.is_empty:
            return False

        user = self._users.get(criteria.user_name)
        if user is None or not criteria.matches(user):
            return False

        self._users[user.user_name] = user.apply(changes)
        return True

    async def delete(self, criteria: UserCriteria) -> bool:
        """Delete user matching the criteria.

        Returns:
            True if user was deleted, False if nothing matched
        """
        user = self._users.get(criteria.user_name)
        if user is None or not criteria.matches(user):
            return False

        del self._users[user.user_name]
        return True

    def clear(self) -> None:
        """Clear all users from memory.

        Useful for test cleanup.
        """
        self._users.clear()

    def count(self) -> int:
        """Get total number of users in memory."""
        return len(self._users)
