"""Dependency injection module for FastAPI.

This module provides the request-scoped managers, resolution of the calling
account from the bearer token, and the policy guard used by every protected
route.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.database import get_db
from core.permissions import Action, authorize
from core.security import decode_access_token
from schemas.account import Account
from utils import account_manager
from utils import complaint_manager

# auto_error=False: a missing header is reported by the policy check, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def get_account_manager(db: Session = Depends(get_db)) -> account_manager.AccountManager:
    """Get AccountManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        AccountManager instance.
    """
    return account_manager.AccountManager(db)


def get_complaint_manager(
    db: Session = Depends(get_db),
) -> complaint_manager.ComplaintManager:
    """Get ComplaintManager instance with request-scoped DB session."""
    return complaint_manager.ComplaintManager(db)


# Type aliases for dependency injection
AccountManagerDep = Annotated[
    account_manager.AccountManager, Depends(get_account_manager)
]
ComplaintManagerDep = Annotated[
    complaint_manager.ComplaintManager, Depends(get_complaint_manager)
]


def get_optional_account(
    manager: AccountManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Account]:
    """Resolve the calling account from the Authorization header.

    Returns:
        The account named by a valid token, or None when the header is missing,
        the token is invalid or expired, or the account has been deleted.
    """
    if credentials is None:
        return None
    account_id = decode_access_token(credentials.credentials)
    if account_id is None:
        return None
    return manager.get_account_by_id(account_id)


def require(action: Action) -> Callable[..., Account]:
    """Build a dependency that admits only callers allowed to perform action.

    Args:
        action: The guarded operation.

    Returns:
        A FastAPI dependency returning the authorized Account.
    """

    def _guard(caller: Optional[Account] = Depends(get_optional_account)) -> Account:
        return authorize(caller, action)

    return _guard
