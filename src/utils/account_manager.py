"""Account management utilities.

This module provides the identity store: account persistence, password
hashing, credential verification, and account listing.
"""

import functools
import logging
import re
import uuid
from typing import List, Optional

import bcrypt
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, COLLEGE_EMAIL_DOMAINS
from core.exceptions import (
    AccountHasComplaintsError,
    InvalidCredentialsError,
    UsernameTakenError,
    ValidationError,
)
from models.account import AccountModel
from models.complaint import ComplaintModel
from schemas.account import Account, AccountCreate, AccountFilter, Role
from utils.clock import utc_now
from utils.converters import model_to_account
from utils.search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@([^@\s]+\.)*[^@\s.]+$")


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    """Hash checked when a username is unknown, so both paths cost one bcrypt run."""
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


def is_college_email(email: str) -> bool:
    """Check that email is well formed and belongs to an institutional domain.

    Args:
        email: Address to check.

    Returns:
        True if the address domain is, or is a subdomain of, one of
        COLLEGE_EMAIL_DOMAINS.
    """
    email = email.strip().lower()
    if not _EMAIL_PATTERN.match(email):
        return False
    domain = email.rsplit("@", 1)[1]
    return any(
        domain == allowed or domain.endswith("." + allowed)
        for allowed in COLLEGE_EMAIL_DOMAINS
    )


class AccountManager:
    """Manages account persistence and authentication using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize AccountManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh random salt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def _validate_candidate(self, candidate: AccountCreate) -> None:
        if not candidate.username.strip():
            raise ValidationError("Username is required")
        if not candidate.password:
            raise ValidationError("Password is required")
        if not candidate.name.strip():
            raise ValidationError("Name is required")
        if not candidate.college_email or not candidate.college_email.strip():
            raise ValidationError("College email is required")
        if not is_college_email(candidate.college_email):
            raise ValidationError("Please use your college email address")

    def create_account(self, candidate: AccountCreate) -> Account:
        """Create a new account.

        Args:
            candidate: Account details including the plaintext password.

        Returns:
            Created Account object (without the password hash).

        Raises:
            ValidationError: If a required field is blank or the email is not
                an institutional address.
            UsernameTakenError: If the username already exists.
        """
        self._validate_candidate(candidate)
        username = candidate.username.strip()

        existing = (
            self.db.query(AccountModel)
            .filter(AccountModel.username == username)
            .first()
        )
        if existing:
            raise UsernameTakenError(username)

        room_number = (candidate.room_number or "").strip() or None
        model = AccountModel(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=self.hash_password(candidate.password),
            name=candidate.name.strip(),
            role=candidate.role.value,
            # Room numbers only apply to students
            room_number=room_number if candidate.role == Role.STUDENT else None,
            college_email=candidate.college_email.strip(),
            created_at=utc_now(),
        )

        # Two requests can pass the check above at once; the unique index
        # on username decides which one wins.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise UsernameTakenError(username) from e

        logger.info("Created %s account: %s", model.role, username)
        return model_to_account(model)

    def verify_credentials(self, username: str, password: str) -> Account:
        """Check a username/password pair.

        Args:
            username: Login identifier.
            password: Plain text password.

        Returns:
            The matching Account.

        Raises:
            InvalidCredentialsError: If the username is unknown or the password
                is wrong. Both cases take one bcrypt check.
        """
        model = (
            self.db.query(AccountModel)
            .filter(AccountModel.username == username)
            .first()
        )
        if model is None:
            bcrypt.checkpw(_password_bytes(password), _dummy_hash())
            logger.warning("Failed login attempt for username: %s", username)
            raise InvalidCredentialsError()

        if not self.verify_password(password, model.password_hash):
            logger.warning("Failed login attempt for username: %s", username)
            raise InvalidCredentialsError()

        return model_to_account(model)

    def get_account_by_id(self, account_id: str) -> Optional[Account]:
        """Get an account by ID.

        Args:
            account_id: Account ID to look up.

        Returns:
            Account object if found, None otherwise.
        """
        model = self.db.query(AccountModel).filter(AccountModel.id == account_id).first()
        if model:
            return model_to_account(model)
        return None

    def get_account_by_username(self, username: str) -> Optional[Account]:
        model = (
            self.db.query(AccountModel)
            .filter(AccountModel.username == username)
            .first()
        )
        if model:
            return model_to_account(model)
        return None

    def list_accounts(self, filters: Optional[AccountFilter] = None) -> List[Account]:
        """List accounts, newest first.

        Args:
            filters: Optional role and search filters.

        Returns:
            List of Account objects.
        """
        filters = filters or AccountFilter()
        query = self.db.query(AccountModel)
        if filters.role:
            query = query.filter(AccountModel.role == filters.role.value)
        if filters.search:
            pattern = contains_pattern(filters.search)
            query = query.filter(
                or_(
                    AccountModel.name.ilike(pattern, escape=LIKE_ESCAPE),
                    AccountModel.username.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        models = query.order_by(AccountModel.created_at.desc()).all()
        return [model_to_account(m) for m in models]

    def delete_account(self, account_id: str) -> bool:
        """Delete an account that owns no complaints.

        Complaints are never deleted, so an account that has filed any is
        kept.

        Args:
            account_id: Account ID to delete.

        Returns:
            True if an account was removed, False if none matched.

        Raises:
            AccountHasComplaintsError: If the account still owns complaints.
        """
        model = self.db.query(AccountModel).filter(AccountModel.id == account_id).first()
        if not model:
            return False

        complaint_count = (
            self.db.query(ComplaintModel)
            .filter(ComplaintModel.student_id == account_id)
            .count()
        )
        if complaint_count:
            raise AccountHasComplaintsError(account_id, complaint_count)

        username = model.username
        # A complaint filed after the count is caught by the foreign key
        try:
            self.db.delete(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AccountHasComplaintsError(account_id) from e
        logger.info("Deleted account: %s (%s)", username, account_id)
        return True
