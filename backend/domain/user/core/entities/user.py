"""User entity - aggregate root."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from domain.user.core.entities.user_profile import UserProfile
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserChanges
from domain.user.core.value_objects.user_id import UserId


@dataclass
class User:
    """User aggregate root.

    Represents a registered account. The business key is ``user_name``.

    Invariants:
    - user_name is non-empty, unique and immutable
    - password always holds the hashed credential, never plaintext
    - nick_name defaults to user_name when not given at creation

    Examples:
        >>> user = User.create("alice", "<hash>")
        >>> user.nick_name
        'alice'
        >>> user.gender
        <Gender.UNDISCLOSED: 3>
        >>> "password" in user.to_profile().to_dict()
        False
    """

    user_id: UserId
    user_name: str
    password: str = field(repr=False)
    nick_name: str
    gender: Gender = Gender.UNDISCLOSED
    city: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.user_name or not self.user_name.strip():
            raise ValueError("user_name cannot be empty")
        if not self.password:
            raise ValueError("password hash cannot be empty")
        self.gender = Gender.from_value(self.gender)

    @staticmethod
    def create(
        user_name: str,
        password_hash: str,
        gender: Optional[Gender] = None,
        nick_name: Optional[str] = None,
    ) -> "User":
        """Factory method to create a new user.

        Args:
            user_name: Unique account name
            password_hash: Already hashed credential
            gender: Declared gender (defaults to undisclosed)
            nick_name: Display name (defaults to user_name)

        Returns:
            New User instance
        """
        return User(
            user_id=UserId.generate(),
            user_name=user_name,
            password=password_hash,
            nick_name=nick_name or user_name,
            gender=Gender.from_value(gender),
        )

    def apply(self, changes: UserChanges) -> "User":
        """Return a copy of this user with the changes applied."""
        return replace(self, **changes.as_dict(), updated_at=datetime.now(timezone.utc))

    def to_profile(self) -> UserProfile:
        """Public snapshot of the user (no password)."""
        return UserProfile(
            user_name=self.user_name,
            nick_name=self.nick_name,
            gender=self.gender,
            city=self.city,
            avatar=self.avatar,
        )

    def __eq__(self, other: object) -> bool:
        """Equality based on user_id (aggregate identity)."""
        if not isinstance(other, User):
            return False
        return self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash(self.user_id)
