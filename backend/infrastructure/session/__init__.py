"""Session store implementations."""

from infrastructure.session.in_memory_session_store import (
    InMemorySessionStore,
)

__all__ = [
    "InMemorySessionStore",
]
