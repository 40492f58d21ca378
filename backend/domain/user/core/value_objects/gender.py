"""Gender value object."""

from enum import IntEnum
from typing import Union


class Gender(IntEnum):
    """Gender declared by the user.

    Stored as an integer (1 male, 2 female, 3 undisclosed).

    Examples:
        >>> Gender.from_value(1)
        <Gender.MALE: 1>
        >>> Gender.from_value(None)
        <Gender.UNDISCLOSED: 3>
    """

    MALE = 1
    FEMALE = 2
    UNDISCLOSED = 3

    @classmethod
    def from_value(cls, value: Union["Gender", int, None]) -> "Gender":
        """Coerce an integer (or None) into a Gender.

        Args:
            value: Raw gender code, None means undisclosed

        Returns:
            Matching Gender member

        Raises:
            ValueError: If value is not a known gender code
        """
        if value is None:
            return cls.UNDISCLOSED
        return cls(int(value))
