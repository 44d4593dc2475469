"""Access policy for API operations.

Every guarded operation is an ``Action``. ``ROLE_PERMISSIONS`` is the single
table deciding which role may perform which action; route handlers never
compare role strings themselves.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from core.exceptions import (
    ComplaintNotFoundError,
    ForbiddenError,
    UnauthenticatedError,
)
from schemas.account import Account, Role
from schemas.complaint import Complaint


class Action(str, Enum):
    """Operations that require a verified caller."""

    WHOAMI = "whoami"
    LOGOUT = "logout"
    FILE_COMPLAINT = "file_complaint"
    LIST_OWN_COMPLAINTS = "list_own_complaints"
    VIEW_OWN_STATS = "view_own_stats"
    VIEW_COMPLAINT = "view_complaint"
    LIST_ALL_COMPLAINTS = "list_all_complaints"
    VIEW_GLOBAL_STATS = "view_global_stats"
    UPDATE_COMPLAINT = "update_complaint"
    LIST_ACCOUNTS = "list_accounts"
    CREATE_ACCOUNT = "create_account"
    DELETE_ACCOUNT = "delete_account"


_SESSION_ACTIONS = frozenset({Action.WHOAMI, Action.LOGOUT})

ROLE_PERMISSIONS: Dict[Role, FrozenSet[Action]] = {
    Role.STUDENT: _SESSION_ACTIONS
    | {
        Action.FILE_COMPLAINT,
        Action.LIST_OWN_COMPLAINTS,
        Action.VIEW_OWN_STATS,
        # Restricted to the student's own complaints by ensure_can_view_complaint
        Action.VIEW_COMPLAINT,
    },
    Role.ADMIN: _SESSION_ACTIONS
    | {
        Action.VIEW_COMPLAINT,
        Action.LIST_ALL_COMPLAINTS,
        Action.VIEW_GLOBAL_STATS,
        Action.UPDATE_COMPLAINT,
        Action.LIST_ACCOUNTS,
        Action.CREATE_ACCOUNT,
        Action.DELETE_ACCOUNT,
    },
}

_unmapped_roles = set(Role) - set(ROLE_PERMISSIONS)
if _unmapped_roles:
    raise RuntimeError(f"No permissions defined for roles: {sorted(_unmapped_roles)}")


def is_allowed(role: Role, action: Action) -> bool:
    return action in ROLE_PERMISSIONS.get(role, frozenset())


def authorize(caller: Optional[Account], action: Action) -> Account:
    """Check that caller may perform action.

    Args:
        caller: The verified account, or None for an anonymous request.
        action: The operation being attempted.

    Returns:
        The caller, for use by the operation.

    Raises:
        UnauthenticatedError: If there is no verified caller.
        ForbiddenError: If the caller's role does not grant the action.
    """
    if caller is None:
        raise UnauthenticatedError()
    if not is_allowed(caller.role, action):
        raise ForbiddenError(
            f"Role '{caller.role.value}' is not permitted to {action.value.replace('_', ' ')}"
        )
    return caller


def ensure_can_view_complaint(caller: Account, complaint: Complaint) -> None:
    """Students may only view complaints they filed.

    Another student's complaint is reported as missing, so a student cannot
    tell it apart from an unknown id.

    Raises:
        ComplaintNotFoundError: If a student asks for someone else's complaint.
    """
    if caller.role == Role.STUDENT and complaint.student_id != caller.id:
        raise ComplaintNotFoundError(complaint.id)
