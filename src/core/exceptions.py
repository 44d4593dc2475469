"""Custom exception classes for the Hostel Complaint Tracker.

This module defines the application error taxonomy. Every error carries a
stable ``code`` that the API layer sends to clients alongside the message.
"""

from typing import Optional


class ComplaintTrackerError(Exception):
    """Base exception for all Complaint Tracker errors."""

    code = "internal"


class ValidationError(ComplaintTrackerError):
    """Raised when input is malformed or a required field is missing."""

    code = "validation_error"


class ConflictError(ComplaintTrackerError):
    """Raised when an operation clashes with existing records."""

    code = "conflict"


class UsernameTakenError(ConflictError):
    """Raised when a username is already taken."""

    def __init__(self, username: str):
        """Initialize the exception.

        Args:
            username: The username that is already in use.
        """
        self.username = username
        super().__init__(f"Username '{username}' already exists")


class AccountHasComplaintsError(ConflictError):
    """Raised when deleting an account that still owns complaints."""

    def __init__(self, account_id: str, complaint_count: Optional[int] = None):
        """Initialize the exception.

        Args:
            account_id: The ID of the account being deleted.
            complaint_count: How many complaints it owns, if known.
        """
        self.account_id = account_id
        self.complaint_count = complaint_count
        owned = f"{complaint_count} complaint(s)" if complaint_count else "complaints"
        super().__init__(f"Account '{account_id}' still owns {owned} and cannot be deleted")


class InvalidCredentialsError(ComplaintTrackerError):
    """Raised when a login attempt fails.

    Unknown usernames and wrong passwords share this error and message.
    """

    code = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid username or password")


class UnauthenticatedError(ComplaintTrackerError):
    """Raised when an operation requires a verified session and none is present."""

    code = "unauthenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ForbiddenError(ComplaintTrackerError):
    """Raised when the caller's role or ownership does not permit the operation."""

    code = "forbidden"


class NotFoundError(ComplaintTrackerError):
    """Raised when a referenced record does not exist."""

    code = "not_found"


class AccountNotFoundError(NotFoundError):
    """Raised when a requested account cannot be found."""

    def __init__(self, account_id: str):
        """Initialize the exception.

        Args:
            account_id: The ID of the account that was not found.
        """
        self.account_id = account_id
        super().__init__(f"Account '{account_id}' not found")


class ComplaintNotFoundError(NotFoundError):
    """Raised when a requested complaint cannot be found."""

    def __init__(self, complaint_id: str):
        """Initialize the exception.

        Args:
            complaint_id: The ID of the complaint that was not found.
        """
        self.complaint_id = complaint_id
        super().__init__(f"Complaint '{complaint_id}' not found")


class InternalError(ComplaintTrackerError):
    """Raised for unexpected store or infrastructure failures."""

    code = "internal"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
