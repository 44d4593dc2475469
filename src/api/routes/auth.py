"""Authentication routes.

This module handles HTTP endpoints for registration, login, logout and the
current account.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, status

import config
from core.dependencies import AccountManagerDep, require
from core.exceptions import ForbiddenError
from core.permissions import Action
from core.security import create_access_token
from schemas.account import (
    Account,
    CurrentAccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    Role,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _check_admin_token(supplied: str) -> None:
    if not config.ADMIN_TOKEN:
        logger.warning("Admin self-registration attempted but ADMIN_TOKEN is not set")
        raise ForbiddenError("Admin registration is not enabled")
    # compare_digest only accepts ASCII str, so compare the encoded bytes
    if not supplied or not secrets.compare_digest(
        supplied.encode("utf-8"), config.ADMIN_TOKEN.encode("utf-8")
    ):
        raise ForbiddenError("Invalid admin token")


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
def register(
    req: RegisterRequest,
    account_manager: AccountManagerDep,
) -> LoginResponse:
    """Register a new account and sign it in.

    Registration requirements:
    - Student: open registration
    - Admin: requires ADMIN_TOKEN from environment variable

    Args:
        req: Registration request with username, password, role, etc.
        account_manager: Injected AccountManager instance.

    Returns:
        LoginResponse with the new account and a JWT token.

    Raises:
        ValidationError: If the passwords differ or a field is invalid.
        ForbiddenError: If an admin registration has a wrong admin token.
        UsernameTakenError: If the username is taken.
    """
    req.check_passwords_match()
    if req.role == Role.ADMIN:
        _check_admin_token(req.admin_token or "")

    account = account_manager.create_account(req.to_candidate())
    return LoginResponse(user=account, token=create_access_token(account.id))


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    req: LoginRequest,
    account_manager: AccountManagerDep,
) -> LoginResponse:
    """Login with username and password.

    Raises:
        InvalidCredentialsError: If the username or password is wrong.
    """
    account = account_manager.verify_credentials(req.username, req.password)
    logger.info("Login successful for user: %s", account.username)
    return LoginResponse(user=account, token=create_access_token(account.id))


@router.post("/logout", summary="Log out")
def logout(current_account: Account = Depends(require(Action.LOGOUT))) -> dict:
    """Logout endpoint.

    Note: Since we're using stateless JWT tokens, logout is handled
    client-side by removing the token. This endpoint exists for API
    consistency.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentAccountResponse, summary="Current account")
def get_current_account_info(
    current_account: Account = Depends(require(Action.WHOAMI)),
) -> CurrentAccountResponse:
    return CurrentAccountResponse(user=current_account)
