"""
In-memory session store implementation.

Per-process store for authenticated session profiles.
Deployments with several instances need a shared store behind the same port.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, Optional, Tuple

from domain.user.core.entities.user_profile import UserProfile

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """In-memory implementation of the session store.

    Stores one profile per caller key with an expiration time. Expired
    entries behave exactly like absent ones. Reads hand out copies; only
    ``mutate`` touches the cached profile.
    """

    def __init__(self, ttl_seconds: int = 86400) -> None:
        """Initialize empty store.

        Args:
            ttl_seconds: Session lifetime (default: 24 hours)
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = timedelta(seconds=ttl_seconds)
        # Storage: key -> (profile, expiration_time)
        self._sessions: Dict[str, Tuple[UserProfile, datetime]] = {}
        # Entries vanish once no caller holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )
        logger.debug("InMemorySessionStore initialized")

    @asynccontextmanager
    async def lock(self, key: str) -> AsyncIterator[None]:
        """Hold the per-key lock for a multi-step sequence."""
        key_lock = self._locks.get(key)
        if key_lock is None:
            key_lock = asyncio.Lock()
            self._locks[key] = key_lock
        async with key_lock:
            yield

    def _live(self, key: str) -> Optional[UserProfile]:
        entry = self._sessions.get(key)
        if entry is None:
            return None

        profile, expiration = entry
        if datetime.now(timezone.utc) > expiration:
            logger.debug(f"Session expired for key: {key}")
            del self._sessions[key]
            return None

        return profile

    async def get(self, key: str) -> Optional[UserProfile]:
        """Get a copy of the session profile, or None."""
        profile = self._live(key)
        if profile is None:
            return None
        return replace(profile)

    async def set(self, key: str, profile: UserProfile) -> None:
        """Create or replace a session, restarting its TTL."""
        self._sessions[key] = (replace(profile), datetime.now(timezone.utc) + self._ttl)
        logger.debug(f"Session set for key: {key}, user: {profile.user_name}")

    async def set_if_absent(self, key: str, profile: UserProfile) -> UserProfile:
        """Create the session unless one is already live."""
        current = self._live(key)
        if current is not None:
            logger.debug(f"Session already present for key: {key}, kept")
            return replace(current)

        await self.set(key, profile)
        return replace(profile)

    async def mutate(self, key: str, fn: Callable[[UserProfile], None]) -> bool:
        """Apply ``fn`` to the cached profile in place."""
        profile = self._live(key)
        if profile is None:
            return False

        fn(profile)
        return True

    async def clear(self, key: str) -> None:
        """Delete a session; absent keys are ignored."""
        if self._sessions.pop(key, None) is not None:
            logger.debug(f"Session cleared for key: {key}")

    def count(self) -> int:
        """Number of stored sessions, expired ones included."""
        return len(self._sessions)

    def cleanup_expired(self) -> int:
        """Remove all expired sessions.

        Returns:
            Number of expired sessions removed
        """
        now = datetime.now(timezone.utc)
        expired_keys = [
            key for key, (_, expiration) in self._sessions.items() if now > expiration
        ]

        for key in expired_keys:
            del self._sessions[key]

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired sessions")

        return len(expired_keys)
