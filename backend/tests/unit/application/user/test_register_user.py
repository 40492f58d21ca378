"""Unit tests for RegisterUserCommand."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from application.user.commands.register_user import RegisterUserCommand
from domain.user.core.exceptions.user_errors import (
    AccountExistsError,
    InvalidInputError,
    RegistrationFailedError,
    RepositoryError,
    StorageUnavailableError,
)
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserCriteria
from infrastructure.user.in_memory_user_repository import InMemoryUserRepository


class YieldingUserRepository(InMemoryUserRepository):
    """Suspends inside find_one so concurrent registrations interleave."""

    async def find_one(self, criteria):
        await asyncio.sleep(0)
        return await super().find_one(criteria)


class TestRegisterUserCommand:
    """Test register user command."""

    @pytest.mark.asyncio
    async def test_register_new_user(self, repository, hasher):
        command = RegisterUserCommand(repository, hasher)

        profile = await command.execute("alice", "pw1", Gender.MALE)

        assert profile.user_name == "alice"
        assert profile.nick_name == "alice"
        assert profile.gender is Gender.MALE
        assert not hasattr(profile, "password")

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, repository, hasher):
        await RegisterUserCommand(repository, hasher).execute("alice", "pw1")

        stored = await repository.find_one(UserCriteria("alice"))

        assert stored.password == hasher.hash("pw1")
        assert stored.password != "pw1"

    @pytest.mark.asyncio
    async def test_gender_defaults_to_undisclosed(self, repository, hasher):
        profile = await RegisterUserCommand(repository, hasher).execute("alice", "pw1")

        assert profile.gender is Gender.UNDISCLOSED

    @pytest.mark.asyncio
    async def test_integer_gender_accepted(self, repository, hasher):
        profile = await RegisterUserCommand(repository, hasher).execute("alice", "pw1", 2)

        assert profile.gender is Gender.FEMALE

    @pytest.mark.asyncio
    async def test_unknown_gender_rejected_before_storage(self, hasher):
        repository = AsyncMock()

        with pytest.raises(InvalidInputError):
            await RegisterUserCommand(repository, hasher).execute("alice", "pw1", 7)

        repository.find_one.assert_not_called()
        repository.create.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_name", ["", "   "])
    async def test_blank_user_name_rejected_before_lookup(self, hasher, user_name):
        repository = AsyncMock()

        with pytest.raises(InvalidInputError):
            await RegisterUserCommand(repository, hasher).execute(user_name, "pw1", 1)

        repository.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_user_name_rejected(self, repository, hasher):
        command = RegisterUserCommand(repository, hasher)
        await command.execute("alice", "pw1")

        with pytest.raises(AccountExistsError):
            await command.execute("alice", "pw2")

        assert repository.count() == 1

    @pytest.mark.asyncio
    async def test_lookup_failure_is_storage_unavailable(self, hasher):
        repository = AsyncMock()
        repository.find_one.side_effect = RepositoryError("down")

        with pytest.raises(StorageUnavailableError):
            await RegisterUserCommand(repository, hasher).execute("alice", "pw1")

        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_failure_is_registration_failed(self, hasher):
        repository = AsyncMock()
        repository.find_one.return_value = None
        repository.create.side_effect = RepositoryError("write failed")

        with pytest.raises(RegistrationFailedError):
            await RegisterUserCommand(repository, hasher).execute("alice", "pw1")

    @pytest.mark.asyncio
    async def test_concurrent_registration_creates_one_user(self, hasher):
        repository = YieldingUserRepository()
        command = RegisterUserCommand(repository, hasher)

        results = await asyncio.gather(
            command.execute("bob", "pw1"),
            command.execute("bob", "pw2"),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], (AccountExistsError, RegistrationFailedError))
        assert repository.count() == 1
