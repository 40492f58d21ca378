"""Account controller.

Orchestrates the user commands and the session store for one caller and
turns every result into an ``Outcome``. This is the only layer that
converts domain exceptions into error envelopes.
"""

from typing import Optional, Union

import structlog

from application.user.commands.change_password import ChangePasswordCommand
from application.user.commands.change_user_info import ChangeUserInfoCommand
from application.user.commands.delete_user import DeleteUserCommand
from application.user.commands.login_user import LoginUserCommand
from application.user.commands.register_user import RegisterUserCommand
from application.user.queries.check_user_exists import CheckUserExistsQuery
from domain.shared.outcome import Outcome
from domain.user.core.entities.user_profile import UserProfile
from domain.user.core.exceptions.user_errors import AccountError, NotLoggedInError
from domain.user.core.ports.password_hasher import IPasswordHasher
from domain.user.core.ports.session_store import ISessionStore
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserChanges

logger = structlog.get_logger(__name__)


def _failure(error: AccountError) -> Outcome:
    return Outcome.failure(error.kind.name, error.kind.code, error.kind.message)


class AccountController:
    """Entry point for account operations.

    Every session-touching operation runs under the session store's
    per-key lock, so a profile update and a logout racing on the same
    caller are serialized.

    Args:
        repository: User persistence
        hasher: Credential hasher
        sessions: Per-caller session store
        logout_on_password_change: Clear the caller's session after a
            successful password change (forces a new login). Off by default,
            the session is kept.

    Examples:
        >>> controller = AccountController(repository, hasher, sessions)
        >>> outcome = await controller.register("alice", "pw1", 1)
        >>> outcome.ok
        True
    """

    def __init__(
        self,
        repository: IUserRepository,
        hasher: IPasswordHasher,
        sessions: ISessionStore,
        logout_on_password_change: bool = False,
    ) -> None:
        self.repository = repository
        self.hasher = hasher
        self.sessions = sessions
        self.logout_on_password_change = logout_on_password_change

    async def register(
        self,
        user_name: str,
        password: str,
        gender: Optional[Union[Gender, int]] = None,
    ) -> Outcome[UserProfile]:
        command = RegisterUserCommand(self.repository, self.hasher)
        try:
            profile = await command.execute(user_name, password, gender)
        except AccountError as e:
            return _failure(e)
        return Outcome.success(profile)

    async def is_exist(self, user_name: str) -> Outcome[UserProfile]:
        try:
            profile = await CheckUserExistsQuery(self.repository).execute(user_name)
        except AccountError as e:
            return _failure(e)
        return Outcome.success(profile)

    async def login(self, session_key: str, user_name: str, password: str) -> Outcome[UserProfile]:
        """Verify credentials and open a session for the caller.

        An already open session is kept as is, even if it belongs to a
        different user; the returned profile is the one the session holds.
        """
        command = LoginUserCommand(self.repository, self.hasher)
        try:
            profile = await command.execute(user_name, password)
        except AccountError as e:
            return _failure(e)

        async with self.sessions.lock(session_key):
            current = await self.sessions.set_if_absent(session_key, profile)
        return Outcome.success(current)

    async def change_user_info(self, session_key: str, changes: UserChanges) -> Outcome[None]:
        """Update profile fields and patch the cached session.

        Storage and session change together or not at all.
        """
        async with self.sessions.lock(session_key):
            profile = await self.sessions.get(session_key)
            if profile is None:
                return _failure(NotLoggedInError())

            try:
                await ChangeUserInfoCommand(self.repository).execute(profile.user_name, changes)
            except AccountError as e:
                return _failure(e)

            await self.sessions.mutate(session_key, changes.apply_to_profile)
        return Outcome.success()

    async def change_password(
        self, session_key: str, old_password: str, new_password: str
    ) -> Outcome[None]:
        async with self.sessions.lock(session_key):
            profile = await self.sessions.get(session_key)
            if profile is None:
                return _failure(NotLoggedInError())

            command = ChangePasswordCommand(self.repository, self.hasher)
            try:
                await command.execute(profile.user_name, old_password, new_password)
            except AccountError as e:
                return _failure(e)

            if self.logout_on_password_change:
                await self.sessions.clear(session_key)
                logger.info("Session closed after password change", user_name=profile.user_name)
        return Outcome.success()

    async def delete_user_info(self, user_name: str) -> Outcome[None]:
        """Delete an account. Open sessions of that user are left alone."""
        try:
            await DeleteUserCommand(self.repository).execute(user_name)
        except AccountError as e:
            return _failure(e)
        return Outcome.success()

    async def logout(self, session_key: str) -> Outcome[None]:
        async with self.sessions.lock(session_key):
            await self.sessions.clear(session_key)
        return Outcome.success()

    async def session_profile(self, session_key: str) -> Optional[UserProfile]:
        """Snapshot of the caller's session profile, None when logged out."""
        return await self.sessions.get(session_key)
