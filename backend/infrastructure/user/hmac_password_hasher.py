"""Keyed one-way password hasher."""

import hashlib
import hmac
from typing import Optional

from infrastructure.config import get_password_secret_key


class HmacPasswordHasher:
    """HMAC-SHA256 implementation of the password hasher port.

    Deterministic for a given secret key, so digests can be matched by
    equality in repository predicates. Changing the key invalidates every
    stored credential.

    Examples:
        >>> hasher = HmacPasswordHasher(secret_key="k")
        >>> hasher.hash("pw1") == hasher.hash("pw1")
        True
        >>> hasher.hash("pw1") == "pw1"
        False
    """

    def __init__(self, secret_key: Optional[str] = None) -> None:
        """Initialize hasher.

        Args:
            secret_key: HMAC key (defaults to PASSWORD_SECRET_KEY)
        """
        key = secret_key if secret_key is not None else get_password_secret_key()
        if not key:
            raise ValueError("Password secret key cannot be empty")
        self._key = key.encode("utf-8")

    def hash(self, secret: str) -> str:
        """Return the hex HMAC-SHA256 digest of ``secret``.

        Raises:
            TypeError: If secret is not a string
        """
        if not isinstance(secret, str):
            raise TypeError(f"secret must be str, got {type(secret).__name__}")
        return hmac.new(self._key, secret.encode("utf-8"), hashlib.sha256).hexdigest()
