"""Account management routes (admin only)."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from api.params import build_filter
from core.dependencies import AccountManagerDep, require
from core.exceptions import AccountNotFoundError
from core.permissions import Action
from schemas.account import Account, AccountFilter, CreateAccountRequest

router = APIRouter(prefix="/api/users", tags=["Account"])


@router.get("", response_model=List[Account], summary="List accounts")
def list_accounts(
    account_manager: AccountManagerDep,
    role: Optional[str] = None,
    search: Optional[str] = None,
    current_account: Account = Depends(require(Action.LIST_ACCOUNTS)),
) -> List[Account]:
    """List accounts, newest first.

    Args:
        role: Exact role to match ('student' or 'admin').
        search: Case-insensitive text found in the name or username.
    """
    filters = build_filter(AccountFilter, role=role, search=search)
    return account_manager.list_accounts(filters)


@router.post(
    "",
    response_model=Account,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
def create_account(
    req: CreateAccountRequest,
    account_manager: AccountManagerDep,
    current_account: Account = Depends(require(Action.CREATE_ACCOUNT)),
) -> Account:
    """Create a student or admin account.

    Raises:
        ValidationError: If the passwords differ or a field is invalid.
        UsernameTakenError: If the username is taken.
    """
    req.check_passwords_match()
    return account_manager.create_account(req.to_candidate())


@router.delete("/{account_id}", summary="Delete an account")
def delete_account(
    account_id: str,
    account_manager: AccountManagerDep,
    current_account: Account = Depends(require(Action.DELETE_ACCOUNT)),
) -> dict:
    """Delete an account.

    Accounts that have filed complaints cannot be deleted; complaints are
    never removed.

    Raises:
        AccountHasComplaintsError: If the account still owns complaints.
        AccountNotFoundError: If no account has this ID, including when it
            was already deleted.
    """
    if not account_manager.delete_account(account_id):
        raise AccountNotFoundError(account_id)
    return {"success": True, "message": "Account deleted successfully"}
