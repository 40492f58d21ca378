"""User repository factory for environment-based selection.

This factory creates the appropriate repository implementation based on
the USER_REPOSITORY environment variable:
- "inmemory": InMemoryUserRepository (for testing)
- "mongodb": MongoUserRepository (for production)

Default: inmemory
"""

import os
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from domain.user.core.ports.user_repository import IUserRepository
from infrastructure.config import get_mongodb_database, get_mongodb_uri
from infrastructure.user.in_memory_user_repository import (
    InMemoryUserRepository,
)
from infrastructure.user.mongo_user_repository import MongoUserRepository


def create_user_repository() -> IUserRepository:
    """Create user repository based on environment configuration.

    Returns:
        IUserRepository: The configured repository implementation

    Environment Variables:
        USER_REPOSITORY: "inmemory" | "mongodb" (default: inmemory)
        MONGODB_URI: MongoDB connection string (required for mongodb)
        MONGODB_DATABASE: Database name (default: accounts)
    """
    repo_type = os.getenv("USER_REPOSITORY", "inmemory").lower()

    if repo_type == "mongodb":
        mongo_uri = get_mongodb_uri()
        if not mongo_uri:
            raise ValueError(
                "MONGODB_URI environment variable is required "
                "when USER_REPOSITORY=mongodb"
            )

        client: AsyncIOMotorClient = AsyncIOMotorClient(mongo_uri)  # type: ignore
        return MongoUserRepository(client[get_mongodb_database()])

    elif repo_type == "inmemory":
        return InMemoryUserRepository()

    else:
        raise ValueError(
            f"Invalid USER_REPOSITORY value: {repo_type}. "
            "Expected 'inmemory' or 'mongodb'"
        )


# Singleton instance
_user_repository: Optional[IUserRepository] = None


def get_user_repository() -> IUserRepository:
    """Get singleton user repository instance."""
    global _user_repository

    if _user_repository is None:
        _user_repository = create_user_repository()

    return _user_repository


def reset_user_repository() -> None:
    """Reset the singleton (for testing purposes)."""
    global _user_repository
    _user_repository = None
