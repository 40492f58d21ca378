"""Password hasher port."""

from typing import Protocol


class IPasswordHasher(Protocol):
    """Port for one-way credential hashing.

    The transform must be deterministic (the same secret always yields the
    same digest) because stored credentials are matched by equality inside
    repository predicates. It must never return the plaintext.
    """

    def hash(self, secret: str) -> str:
        """Hash a plaintext secret for storage or comparison.

        Args:
            secret: Plaintext credential

        Returns:
            Stored representation of the credential
        """
        ...
