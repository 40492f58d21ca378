"""REST API endpoints for user accounts.

Thin HTTP adapter over ``AccountController``. The session key is an
opaque random value kept in an http-only cookie; every response body is
the serialized ``Outcome`` envelope.
"""

import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from application.user.account_controller import AccountController
from domain.shared.outcome import Outcome
from domain.user.core.exceptions.user_errors import ErrorKind
from domain.user.core.value_objects.gender import Gender
from domain.user.core.value_objects.user_criteria import UserChanges
from infrastructure.config import get_session_cookie_name, get_session_ttl_seconds

router = APIRouter(prefix="/api/users", tags=["users"])

USER_NAME_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]+$"
PASSWORD_PATTERN = r"^[a-zA-Z0-9]+$"


class RegisterRequest(BaseModel):
    """Request body for registration."""

    userName: str = Field(..., min_length=2, max_length=255, pattern=USER_NAME_PATTERN)
    password: str = Field(..., min_length=3, max_length=255, pattern=PASSWORD_PATTERN)
    gender: int = Field(default=int(Gender.UNDISCLOSED), ge=1, le=3)


class UserNameRequest(BaseModel):
    """Request body carrying only a user name."""

    userName: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Request body for login."""

    userName: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)


class ChangeInfoRequest(BaseModel):
    """Request body for profile update; omitted fields are left unchanged."""

    nickName: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, min_length=2, max_length=255)
    avatar: Optional[str] = Field(default=None, max_length=255)
    gender: Optional[int] = Field(default=None, ge=1, le=3)

    def to_domain(self) -> UserChanges:
        return UserChanges(
            nick_name=self.nickName,
            city=self.city,
            avatar=self.avatar,
            gender=Gender(self.gender) if self.gender is not None else None,
        )


class ChangePasswordRequest(BaseModel):
    """Request body for password change."""

    password: str = Field(..., min_length=3, max_length=255, pattern=PASSWORD_PATTERN)
    newPassword: str = Field(..., min_length=3, max_length=255, pattern=PASSWORD_PATTERN)


def get_account_controller(request: Request) -> AccountController:
    """Resolve the controller built at application startup.

    Raises:
        RuntimeError: If the application did not initialize it
    """
    controller = getattr(request.app.state, "account_controller", None)
    if controller is None:
        raise RuntimeError("account_controller not initialized on app.state")
    return controller


def _session_key(request: Request) -> Optional[str]:
    return request.cookies.get(get_session_cookie_name())


def invalid_input_body() -> Dict[str, Any]:
    """Envelope returned when a request body fails validation."""
    kind = ErrorKind.INVALID_INPUT
    return Outcome.failure(kind.name, kind.code, kind.message).to_dict()


def _not_logged_in_body() -> Dict[str, Any]:
    kind = ErrorKind.NOT_LOGGED_IN
    return Outcome.failure(kind.name, kind.code, kind.message).to_dict()


@router.post("/register")
async def register(
    body: RegisterRequest,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    outcome = await controller.register(body.userName, body.password, body.gender)
    return outcome.to_dict()


@router.post("/isExist")
async def is_exist(
    body: UserNameRequest,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    outcome = await controller.is_exist(body.userName)
    return outcome.to_dict()


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    """Log in, issuing a session cookie if the caller has none."""
    session_key = _session_key(request)
    issue_cookie = session_key is None
    if session_key is None:
        session_key = secrets.token_urlsafe(32)

    outcome = await controller.login(session_key, body.userName, body.password)

    if outcome.ok and issue_cookie:
        response.set_cookie(
            key=get_session_cookie_name(),
            value=session_key,
            max_age=get_session_ttl_seconds(),
            httponly=True,
            samesite="lax",
        )
    return outcome.to_dict()


@router.patch("/changeInfo")
async def change_info(
    body: ChangeInfoRequest,
    request: Request,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    session_key = _session_key(request)
    if session_key is None:
        return _not_logged_in_body()

    outcome = await controller.change_user_info(session_key, body.to_domain())
    return outcome.to_dict()


@router.patch("/changePassword")
async def change_password(
    body: ChangePasswordRequest,
    request: Request,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    session_key = _session_key(request)
    if session_key is None:
        return _not_logged_in_body()

    outcome = await controller.change_password(session_key, body.password, body.newPassword)
    return outcome.to_dict()


@router.post("/delete")
async def delete_current_user(
    request: Request,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    """Delete the account of the logged-in caller."""
    session_key = _session_key(request)
    profile = await controller.session_profile(session_key) if session_key else None
    if profile is None:
        return _not_logged_in_body()

    outcome = await controller.delete_user_info(profile.user_name)
    return outcome.to_dict()


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    controller: AccountController = Depends(get_account_controller),
) -> Dict[str, Any]:
    session_key = _session_key(request)
    if session_key is not None:
        await controller.logout(session_key)
    response.delete_cookie(get_session_cookie_name())
    return Outcome.success().to_dict()
