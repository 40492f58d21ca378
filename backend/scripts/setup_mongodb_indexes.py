"""Setup MongoDB indexes for the account service.

Creates the unique index on ``users.userName``. The index is what makes
registration safe under concurrency, so run this before the first deploy
(the application also ensures it at startup).

Usage:
    python scripts/setup_mongodb_indexes.py

Environment Variables:
    MONGODB_URI: MongoDB connection string (required)
    MONGODB_DATABASE: Database name (default: accounts)
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient

from domain.user.core.exceptions.user_errors import RepositoryError
from infrastructure.config import get_mongodb_database, get_mongodb_uri
from infrastructure.user.mongo_user_repository import MongoUserRepository

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main() -> int:
    uri = get_mongodb_uri()
    if not uri:
        logger.error("MONGODB_URI not set")
        return 1

    client: AsyncIOMotorClient = AsyncIOMotorClient(uri)  # type: ignore
    database_name = get_mongodb_database()
    try:
        repository = MongoUserRepository(client[database_name])
        logger.info(f"Creating indexes for '{database_name}.users'...")
        await repository.ensure_indexes()
        logger.info("Created unique index: userName")
    except RepositoryError as e:
        logger.error(f"Index setup failed: {e}")
        return 1
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
