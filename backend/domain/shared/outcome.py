"""Uniform success/error envelope returned by account operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged result: success with optional data, or error with a code.

    A single type covers both variants; ``error_kind`` is None exactly
    when the outcome is a success.

    Examples:
        >>> Outcome.success({"a": 1}).to_dict()
        {'errno': 0, 'data': {'a': 1}}
        >>> Outcome.failure("LOGIN_FAILED", 10004, "Login failed").to_dict()
        {'errno': 10004, 'message': 'Login failed'}
    """

    data: Optional[T] = None
    error_kind: Optional[str] = None
    errno: int = 0
    message: Optional[str] = None

    @classmethod
    def success(cls, data: Optional[T] = None) -> Outcome[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, kind: str, errno: int, message: str) -> Outcome[T]:
        if errno == 0:
            raise ValueError("errno 0 is reserved for success")
        return cls(error_kind=kind, errno=errno, message=message)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire envelope."""
        if not self.ok:
            return {"errno": self.errno, "message": self.message}

        body: Dict[str, Any] = {"errno": 0}
        if self.data is not None:
            to_dict = getattr(self.data, "to_dict", None)
            body["data"] = to_dict() if callable(to_dict) else self.data
        return body
