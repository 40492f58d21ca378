"""Unit tests for profile, password and deletion commands and the exists query."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from application.user.commands.change_password import ChangePasswordCommand
from application.user.commands.change_user_info import ChangeUserInfoCommand
from application.user.commands.delete_user import DeleteUserCommand
from application.user.commands.register_user import RegisterUserCommand
from application.user.queries.check_user_exists import CheckUserExistsQuery
from domain.user.core.exceptions.user_errors import (
    AccountNotFoundError,
    DeletionFailedError,
    InvalidInputError,
    PasswordChangeFailedError,
    ProfileUpdateFailedError,
    RepositoryError,
    StorageUnavailableError,
)
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserChanges, UserCriteria


@pytest_asyncio.fixture
async def registered(repository, hasher):
    await RegisterUserCommand(repository, hasher).execute("alice", "pw1", Gender.MALE)
    return repository


@pytest.fixture
def failing_repository():
    repository = AsyncMock()
    repository.find_one.side_effect = RepositoryError("down")
    repository.update.side_effect = RepositoryError("down")
    repository.delete.side_effect = RepositoryError("down")
    return repository


class TestChangeUserInfoCommand:
    @pytest.mark.asyncio
    async def test_updates_only_given_fields(self, registered):
        await ChangeUserInfoCommand(registered).execute(
            "alice", UserChanges(nick_name="Ali", city="Turin")
        )

        stored = await registered.find_one(UserCriteria("alice"))
        assert stored.nick_name == "Ali"
        assert stored.city == "Turin"
        assert stored.gender is Gender.MALE
        assert stored.avatar is None

    @pytest.mark.asyncio
    async def test_unknown_user_fails(self, registered):
        with pytest.raises(ProfileUpdateFailedError):
            await ChangeUserInfoCommand(registered).execute("ghost", UserChanges(city="Turin"))

    @pytest.mark.asyncio
    async def test_empty_changes_fail(self, registered):
        with pytest.raises(ProfileUpdateFailedError):
            await ChangeUserInfoCommand(registered).execute("alice", UserChanges())

    @pytest.mark.asyncio
    async def test_password_not_accepted(self, registered):
        with pytest.raises(InvalidInputError):
            await ChangeUserInfoCommand(registered).execute("alice", UserChanges(password="x"))

    @pytest.mark.asyncio
    async def test_storage_error(self, failing_repository):
        with pytest.raises(ProfileUpdateFailedError):
            await ChangeUserInfoCommand(failing_repository).execute(
                "alice", UserChanges(city="Turin")
            )


class TestChangePasswordCommand:
    @pytest.mark.asyncio
    async def test_password_replaced(self, registered, hasher):
        await ChangePasswordCommand(registered, hasher).execute("alice", "pw1", "pw9")

        assert await registered.find_one(UserCriteria("alice", hasher.hash("pw9"))) is not None
        assert await registered.find_one(UserCriteria("alice", hasher.hash("pw1"))) is None

    @pytest.mark.asyncio
    async def test_wrong_old_password_changes_nothing(self, registered, hasher):
        with pytest.raises(PasswordChangeFailedError):
            await ChangePasswordCommand(registered, hasher).execute("alice", "bad", "pw9")

        assert await registered.find_one(UserCriteria("alice", hasher.hash("pw1"))) is not None

    @pytest.mark.asyncio
    async def test_single_predicated_update(self, hasher):
        repository = AsyncMock()
        repository.update.return_value = True

        await ChangePasswordCommand(repository, hasher).execute("alice", "pw1", "pw9")

        repository.update.assert_awaited_once()
        changes, criteria = repository.update.call_args.args
        assert changes.password == hasher.hash("pw9")
        assert criteria.password == hasher.hash("pw1")
        repository.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_error(self, failing_repository, hasher):
        with pytest.raises(PasswordChangeFailedError):
            await ChangePasswordCommand(failing_repository, hasher).execute("alice", "a", "b")


class TestDeleteUserCommand:
    @pytest.mark.asyncio
    async def test_deletes_user(self, registered):
        await DeleteUserCommand(registered).execute("alice")

        assert registered.count() == 0

    @pytest.mark.asyncio
    async def test_unknown_user_fails(self, registered):
        with pytest.raises(DeletionFailedError):
            await DeleteUserCommand(registered).execute("ghost")

    @pytest.mark.asyncio
    async def test_storage_error(self, failing_repository):
        with pytest.raises(DeletionFailedError):
            await DeleteUserCommand(failing_repository).execute("alice")


class TestCheckUserExistsQuery:
    @pytest.mark.asyncio
    async def test_returns_profile(self, registered):
        profile = await CheckUserExistsQuery(registered).execute("alice")

        assert profile.to_dict() == {
            "userName": "alice",
            "nickName": "alice",
            "gender": 1,
            "city": None,
            "avatar": None,
        }

    @pytest.mark.asyncio
    async def test_unknown_user(self, registered):
        with pytest.raises(AccountNotFoundError):
            await CheckUserExistsQuery(registered).execute("ghost")

    @pytest.mark.asyncio
    async def test_storage_error(self, failing_repository):
        with pytest.raises(StorageUnavailableError):
            await CheckUserExistsQuery(failing_repository).execute("alice")
