"""Lookup and update value objects for the user repository."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from domain.user.core.value_objects.gender import Gender

if TYPE_CHECKING:
    from domain.user.core.entities.user import User
    from domain.user.core.entities.user_profile import UserProfile


@dataclass(frozen=True)
class UserCriteria:
    """Conjunctive predicate over a stored user.

    Always constrains ``user_name``; optionally also the stored password
    hash. The password must already be hashed, plaintext never reaches the
    repository.

    Examples:
        >>> UserCriteria("alice").password is None
        True
        >>> UserCriteria("alice", password="5f4d...").password
        '5f4d...'
    """

    user_name: str
    password: Optional[str] = None

    def matches(self, user: "User") -> bool:
        """Check whether a user satisfies every constraint."""
        if user.user_name != self.user_name:
            return False
        if self.password is not None and user.password != self.password:
            return False
        return True

    def __repr__(self) -> str:
        # Hash stays out of logs
        masked = "***" if self.password is not None else None
        return f"UserCriteria(user_name={self.user_name!r}, password={masked!r})"


@dataclass(frozen=True)
class UserChanges:
    """Set of field changes applied by a repository update.

    Only fields that are not None are applied; everything else is left
    untouched both in storage and in the cached session profile.

    Examples:
        >>> changes = UserChanges(nick_name="Ali", city="Turin")
        >>> sorted(changes.as_dict())
        ['city', 'nick_name']
        >>> UserChanges().is_empty
        True
    """

    nick_name: Optional[str] = None
    city: Optional[str] = None
    avatar: Optional[str] = None
    gender: Optional[Gender] = None
    password: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return only the provided fields."""
        fields = {
            "nick_name": self.nick_name,
            "city": self.city,
            "avatar": self.avatar,
            "gender": self.gender,
            "password": self.password,
        }
        return {name: value for name, value in fields.items() if value is not None}

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()

    def apply_to_profile(self, profile: "UserProfile") -> None:
        """Mutate a session profile in place with the public changes.

        The password change, if any, is never copied into the profile.
        """
        for name, value in self.as_dict().items():
            if name == "password":
                continue
            setattr(profile, name, value)

    def __repr__(self) -> str:
        shown = {k: ("***" if k == "password" else v) for k, v in self.as_dict().items()}
        return f"UserChanges({shown!r})"
