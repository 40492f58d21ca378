"""Public user profile cached in the session."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.user.core.value_objects.gender import Gender


@dataclass
class UserProfile:
    """Public profile fields of a user.

    This is the value held by a session after a successful login. It is
    mutable on purpose: a successful profile update patches the cached copy
    in place so it never diverges from storage.
    """

    user_name: str
    nick_name: str
    gender: Gender = Gender.UNDISCLOSED
    city: Optional[str] = None
    avatar: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the external field names."""
        return {
            "userName": self.user_name,
            "nickName": self.nick_name,
            "gender": int(self.gender),
            "city": self.city,
            "avatar": self.avatar,
        }
