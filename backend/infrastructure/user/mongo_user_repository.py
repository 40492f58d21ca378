"""MongoDB User Repository implementation."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from domain.user.core.entities.user import User
from domain.user.core.exceptions.user_errors import (
    DuplicateKeyError,
    InconsistentMatchError,
    RepositoryError,
)
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria
from domain.user.core.value_objects.user_id import UserId

logger = logging.getLogger(__name__)

# Entity attribute -> document field
_FIELD_NAMES: Dict[str, str] = {
    "nick_name": "nickName",
    "city": "city",
    "avatar": "avatar",
    "gender": "gender",
    "password": "password",
}


class MongoUserRepository(IUserRepository):
    """MongoDB implementation of User repository.

    Document layout:
    - userId: Internal UUID
    - userName: Account name (unique index, see ensure_indexes)
    - password: Hashed credential
    - nickName, gender, city, avatar: Public profile
    - createdAt / updatedAt: Timestamps

    Examples:
        >>> repo = MongoUserRepository(db)
        >>> await repo.ensure_indexes()
        >>> await repo.create(User.create("alice", "<hash>"))
        >>> found = await repo.find_one(UserCriteria("alice"))
    """

    collection_name = "users"

    def __init__(self, db: Any) -> None:
        """Initialize repository with MongoDB database.

        Args:
            db: Motor database instance
        """
        self.db = db
        self.collection = db[self.collection_name]
        logger.info(
            f"Initialized {self.__class__.__name__} " f"for collection '{self.collection_name}'"
        )

    async def ensure_indexes(self) -> None:
        """Create the unique index on userName.

        The index is the authoritative guard against duplicate
        registrations; run it before serving traffic.
        """
        try:
            await self.collection.create_index(
                [("userName", 1)],
                name="idx_user_name_unique",
                unique=True,
            )
        except PyMongoError as e:
            logger.error(f"Error creating indexes: collection={self.collection_name}, error={e}")
            raise RepositoryError(f"Index creation failed: {e}") from e

    async def find_one(self, criteria: UserCriteria) -> Optional[User]:
        """Find the single user matching the criteria.

        Fetches up to two documents so that a broken uniqueness guarantee
        surfaces as an error instead of an arbitrary pick.
        """
        try:
            cursor = self.collection.find(self._criteria_to_filter(criteria)).limit(2)
            documents = await cursor.to_list(length=2)
        except PyMongoError as e:
            logger.error(
                f"Error in find_one: collection={self.collection_name}, "
                f"criteria={criteria!r}, error={e}"
            )
            raise RepositoryError(f"find_one failed: {e}") from e

        if not documents:
            return None
        if len(documents) > 1:
            raise InconsistentMatchError(criteria.user_name, len(documents))

        return self._document_to_entity(documents[0])

    async def create(self, user: User) -> User:
        """Insert a new user document.

        Raises:
            DuplicateKeyError: If the unique index rejects the userName
            RepositoryError: On any other MongoDB failure
        """
        try:
            await self.collection.insert_one(self._entity_to_document(user))
        except MongoDuplicateKeyError as e:
            raise DuplicateKeyError(user.user_name) from e
        except PyMongoError as e:
            logger.error(f"Error in insert_one: collection={self.collection_name}, error={e}")
            raise RepositoryError(f"create failed: {e}") from e

        return user

    async def update(self, changes: UserChanges, criteria: UserCriteria) -> bool:
        """Apply changes with a single filtered update_one.

        The filter carries the whole predicate (including the old password
        hash for password changes), so check and write are one atomic
        server-side operation.
        """
        if changes.is_empty:
            return False

        document = {_FIELD_NAMES[name]: value for name, value in changes.as_dict().items()}
        if "gender" in document:
            document["gender"] = int(document["gender"])
        document["updatedAt"] = datetime.now(timezone.utc)

        try:
            result = await self.collection.update_one(
                self._criteria_to_filter(criteria), {"$set": document}
            )
        except PyMongoError as e:
            logger.error(
                f"Error in update_one: collection={self.collection_name}, "
                f"criteria={criteria!r}, error={e}"
            )
            raise RepositoryError(f"update failed: {e}") from e

        return bool(result.matched_count > 0)

    async def delete(self, criteria: UserCriteria) -> bool:
        """Delete the user matching the criteria."""
        try:
            result = await self.collection.delete_one(self._criteria_to_filter(criteria))
        except PyMongoError as e:
            logger.error(
                f"Error in delete_one: collection={self.collection_name}, "
                f"criteria={criteria!r}, error={e}"
            )
            raise RepositoryError(f"delete failed: {e}") from e

        return bool(result.deleted_count > 0)

    @staticmethod
    def _criteria_to_filter(criteria: UserCriteria) -> Dict[str, Any]:
        filter_dict: Dict[str, Any] = {"userName": criteria.user_name}
        if criteria.password is not None:
            filter_dict["password"] = criteria.password
        return filter_dict

    @staticmethod
    def _entity_to_document(user: User) -> Dict[str, Any]:
        return {
            "userId": str(user.user_id),
            "userName": user.user_name,
            "password": user.password,
            "nickName": user.nick_name,
            "gender": int(user.gender),
            "city": user.city,
            "avatar": user.avatar,
            "createdAt": user.created_at,
            "updatedAt": user.updated_at,
        }

    def _document_to_entity(self, document: Dict[str, Any]) -> User:
        """Convert MongoDB document to User entity.

        Args:
            document: MongoDB document

        Returns:
            User entity instance
        """
        now = datetime.now(timezone.utc)
        return User(
            user_id=UserId(document["userId"]),
            user_name=document["userName"],
            password=document["password"],
            nick_name=document.get("nickName") or document["userName"],
            gender=Gender.from_value(document.get("gender")),
            city=document.get("city"),
            avatar=document.get("avatar"),
            created_at=document.get("createdAt", now),
            updated_at=document.get("updatedAt", now),
        )
