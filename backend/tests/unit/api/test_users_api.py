"""HTTP tests for the /api/users endpoints."""

import gc
from typing import Any, AsyncIterator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient, Response

from app import app
from application.user.account_controller import AccountController
from infrastructure.config import get_session_cookie_name
from infrastructure.session.in_memory_session_store import InMemorySessionStore


@pytest_asyncio.fixture
async def client(controller: AccountController) -> AsyncIterator[AsyncClient]:
    """Client bound to the app with an in-memory controller.

    ASGITransport skips the lifespan, so the controller is injected here.
    """
    app.state.account_controller = controller
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.account_controller = None


async def _register(client: AsyncClient, user_name: str = "alice", password: str = "pw1") -> None:
    resp = await client.post(
        "/api/users/register", json={"userName": user_name, "password": password, "gender": 1}
    )
    assert resp.json()["errno"] == 0


async def _login(client: AsyncClient, user_name: str = "alice", password: str = "pw1") -> Response:
    return await client.post(
        "/api/users/login", json={"userName": user_name, "password": password}
    )


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp: Response = await client.get("/health")
    body: Dict[str, Any] = resp.json()
    assert resp.status_code == 200
    assert body["status"] == "ok"


class TestRegisterEndpoint:
    @pytest.mark.asyncio
    async def test_register_returns_profile(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/users/register", json={"userName": "alice", "password": "pw1", "gender": 1}
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "errno": 0,
            "data": {
                "userName": "alice",
                "nickName": "alice",
                "gender": 1,
                "city": None,
                "avatar": None,
            },
        }

    @pytest.mark.asyncio
    async def test_duplicate(self, client: AsyncClient) -> None:
        await _register(client)

        resp = await client.post(
            "/api/users/register", json={"userName": "alice", "password": "pw2"}
        )

        assert resp.json()["errno"] == 10001

    @pytest.mark.asyncio
    async def test_invalid_user_name(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/users/register", json={"userName": "1alice", "password": "pw1"}
        )

        assert resp.status_code == 200
        assert resp.json() == {"errno": 10009, "message": "Data format validation failed"}

    @pytest.mark.asyncio
    async def test_missing_password(self, client: AsyncClient) -> None:
        resp = await client.post("/api/users/register", json={"userName": "alice"})

        assert resp.json()["errno"] == 10009


class TestIsExistEndpoint:
    @pytest.mark.asyncio
    async def test_known_and_unknown(self, client: AsyncClient) -> None:
        await _register(client)

        known = await client.post("/api/users/isExist", json={"userName": "alice"})
        unknown = await client.post("/api/users/isExist", json={"userName": "ghost"})

        assert known.json()["data"]["userName"] == "alice"
        assert unknown.json()["errno"] == 10003


class TestSessionEndpoints:
    @pytest.mark.asyncio
    async def test_login_sets_session_cookie(self, client: AsyncClient) -> None:
        await _register(client)

        resp = await _login(client)

        assert resp.json()["errno"] == 0
        assert "password" not in resp.json()["data"]
        assert get_session_cookie_name() in resp.cookies

    @pytest.mark.asyncio
    async def test_failed_login_sets_no_cookie(self, client: AsyncClient) -> None:
        await _register(client)

        resp = await _login(client, password="bad")

        assert resp.json()["errno"] == 10004
        assert get_session_cookie_name() not in resp.cookies

    @pytest.mark.asyncio
    async def test_change_info_requires_login(self, client: AsyncClient) -> None:
        resp = await client.patch("/api/users/changeInfo", json={"nickName": "Ali"})

        assert resp.json()["errno"] == 10005

    @pytest.mark.asyncio
    async def test_change_info_updates_profile(self, client: AsyncClient) -> None:
        await _register(client)
        await _login(client)

        resp = await client.patch(
            "/api/users/changeInfo", json={"nickName": "Ali", "city": "Turin"}
        )
        exists = await client.post("/api/users/isExist", json={"userName": "alice"})

        assert resp.json() == {"errno": 0}
        assert exists.json()["data"]["nickName"] == "Ali"
        assert exists.json()["data"]["city"] == "Turin"

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient) -> None:
        await _register(client)
        await _login(client)

        wrong = await client.patch(
            "/api/users/changePassword", json={"password": "bad", "newPassword": "pw9"}
        )
        right = await client.patch(
            "/api/users/changePassword", json={"password": "pw1", "newPassword": "pw9"}
        )

        assert wrong.json()["errno"] == 10006
        assert right.json() == {"errno": 0}

    @pytest.mark.asyncio
    async def test_logout_then_delete_requires_login(self, client: AsyncClient) -> None:
        await _register(client)
        await _login(client)

        first = await client.post("/api/users/logout")
        second = await client.post("/api/users/logout")
        delete = await client.post("/api/users/delete")

        assert first.json() == {"errno": 0}
        assert second.json() == {"errno": 0}
        assert delete.json()["errno"] == 10005

    @pytest.mark.asyncio
    async def test_delete_current_user(self, client: AsyncClient) -> None:
        await _register(client)
        await _login(client)

        resp = await client.post("/api/users/delete")
        exists = await client.post("/api/users/isExist", json={"userName": "alice"})

        assert resp.json() == {"errno": 0}
        assert exists.json()["errno"] == 10003

    @pytest.mark.asyncio
    async def test_logout_with_unknown_cookies_keeps_no_state(
        self, client: AsyncClient, sessions: InMemorySessionStore
    ) -> None:
        for i in range(50):
            client.cookies.set(get_session_cookie_name(), f"junk{i}")
            resp = await client.post("/api/users/logout")
            assert resp.json() == {"errno": 0}
        gc.collect()

        assert sessions.count() == 0
        assert len(sessions._locks) == 0
