"""User domain exceptions."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Outward-facing failure kinds with their envelope code and message."""

    ACCOUNT_EXISTS = (10001, "User name already exists")
    REGISTRATION_FAILED = (10002, "Registration failed, please retry")
    ACCOUNT_NOT_FOUND = (10003, "User name does not exist")
    LOGIN_FAILED = (10004, "Login failed, wrong user name or password")
    NOT_LOGGED_IN = (10005, "You are not logged in")
    PASSWORD_CHANGE_FAILED = (10006, "Password change failed, please retry")
    PROFILE_UPDATE_FAILED = (10008, "Profile update failed")
    INVALID_INPUT = (10009, "Data format validation failed")
    DELETION_FAILED = (10010, "User deletion failed")
    STORAGE_UNAVAILABLE = (10011, "Storage is unavailable, please retry")

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message


class UserDomainError(Exception):
    """Base exception for User domain errors."""

    pass


# Business failures


class AccountError(UserDomainError):
    """Business-level failure returned to the caller as an error outcome.

    Subclasses pin the ``kind``; the message never carries storage details.
    """

    kind: ErrorKind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = self.kind.message if detail is None else f"{self.kind.message}: {detail}"
        super().__init__(message)


class AccountExistsError(AccountError):
    """A user with the requested user name is already registered."""

    kind = ErrorKind.ACCOUNT_EXISTS

    def __init__(self, user_name: str):
        self.user_name = user_name
        super().__init__(user_name)


class AccountNotFoundError(AccountError):
    """No user is registered under the given user name."""

    kind = ErrorKind.ACCOUNT_NOT_FOUND

    def __init__(self, user_name: str):
        self.user_name = user_name
        super().__init__(user_name)


class RegistrationFailedError(AccountError):
    kind = ErrorKind.REGISTRATION_FAILED


class LoginFailedError(AccountError):
    """Credentials did not match.

    Deliberately carries no detail: unknown user and wrong password must
    look the same from outside.
    """

    kind = ErrorKind.LOGIN_FAILED

    def __init__(self) -> None:
        super().__init__()


class NotLoggedInError(AccountError):
    kind = ErrorKind.NOT_LOGGED_IN


class ProfileUpdateFailedError(AccountError):
    kind = ErrorKind.PROFILE_UPDATE_FAILED


class PasswordChangeFailedError(AccountError):
    kind = ErrorKind.PASSWORD_CHANGE_FAILED


class DeletionFailedError(AccountError):
    kind = ErrorKind.DELETION_FAILED


class InvalidInputError(AccountError):
    """Arguments rejected before touching storage."""

    kind = ErrorKind.INVALID_INPUT


class StorageUnavailableError(AccountError):
    """Storage fault with no more specific business meaning."""

    kind = ErrorKind.STORAGE_UNAVAILABLE


# Storage failures (raised by repository adapters, never returned outward)


class RepositoryError(UserDomainError):
    """Storage operation failed."""

    pass


class DuplicateKeyError(RepositoryError):
    """Unique constraint on user_name was violated."""

    def __init__(self, user_name: str):
        self.user_name = user_name
        super().__init__(f"Duplicate user_name: {user_name}")


class InconsistentMatchError(RepositoryError):
    """A single-record lookup matched more than one record."""

    def __init__(self, user_name: str, count: int):
        self.user_name = user_name
        self.count = count
        super().__init__(f"Expected at most one user named {user_name!r}, found {count}")
