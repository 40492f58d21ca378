"""Session store port.

Keyed slot per caller holding the authenticated profile snapshot. The key
is an opaque caller identity (cookie value, connection id...) supplied by
the outer layer.
"""

from typing import AsyncContextManager, Callable, Optional, Protocol

from domain.user.core.entities.user_profile import UserProfile


class ISessionStore(Protocol):
    """Port for the per-caller session store.

    Single operations are atomic. Multi-step sequences on one key
    (read session, write storage, patch session) must run inside
    ``lock(key)``; the lock is not reentrant, so store methods never take
    it themselves.
    """

    def lock(self, key: str) -> AsyncContextManager[None]:
        """Serialize operations on a single key.

        Different keys never contend with each other.
        """
        ...

    async def get(self, key: str) -> Optional[UserProfile]:
        """Get a snapshot of the session profile.

        Args:
            key: Caller identity

        Returns:
            A copy of the cached profile, or None if there is no session
        """
        ...

    async def set(self, key: str, profile: UserProfile) -> None:
        """Create or replace the session for a key."""
        ...

    async def set_if_absent(self, key: str, profile: UserProfile) -> UserProfile:
        """Create the session only if none exists.

        Returns:
            Snapshot of the session now held (existing or newly created)
        """
        ...

    async def mutate(self, key: str, fn: Callable[[UserProfile], None]) -> bool:
        """Apply ``fn`` to the cached profile in place.

        Returns:
            True if a session existed and was mutated
        """
        ...

    async def clear(self, key: str) -> None:
        """Destroy the session. Clearing an absent session is not an error."""
        ...
