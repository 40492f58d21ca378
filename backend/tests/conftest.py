"""Shared test fixtures.

Every fixture here is in-memory; no test needs MongoDB or the network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

from application.user.account_controller import AccountController
from infrastructure.session.in_memory_session_store import InMemorySessionStore
from infrastructure.user.hmac_password_hasher import HmacPasswordHasher
from infrastructure.user.in_memory_user_repository import InMemoryUserRepository
from infrastructure.user.repository_factory import reset_user_repository

# Load .env.test if present (overrides nothing already set)
env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path)


@pytest.fixture(autouse=True)
def _reset_repository_singleton() -> Generator[None, None, None]:
    """Isolate tests from the repository factory singleton."""
    reset_user_repository()
    yield
    reset_user_repository()


@pytest.fixture
def repository() -> InMemoryUserRepository:
    """Create fresh repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def hasher() -> HmacPasswordHasher:
    """Hasher with a fixed test key."""
    return HmacPasswordHasher(secret_key="test-secret")


@pytest.fixture
def sessions() -> InMemorySessionStore:
    """Create fresh session store for each test."""
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture
def controller(
    repository: InMemoryUserRepository,
    hasher: HmacPasswordHasher,
    sessions: InMemorySessionStore,
) -> AccountController:
    """Account controller wired to in-memory collaborators."""
    return AccountController(repository, hasher, sessions)
