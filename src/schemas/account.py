"""Account schema definitions.

This module defines the Account data model, the role enumeration, and the
request/response bodies used by the auth and account management routes.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from core.exceptions import ValidationError


class Role(str, Enum):
    """Closed set of account roles."""

    STUDENT = "student"
    ADMIN = "admin"


class Account(BaseModel):
    """Public view of an account. The password hash never leaves the store."""

    id: str
    username: str
    name: str
    role: Role
    room_number: Optional[str] = None
    college_email: Optional[str] = None
    created_at: str


class AccountCreate(BaseModel):
    """Candidate account handed to the identity store."""

    username: str
    password: str
    name: str
    role: Role = Role.STUDENT
    room_number: Optional[str] = None
    college_email: Optional[str] = None


class AccountFilter(BaseModel):
    """Filter for account listings.

    role matches exactly; search is a case-insensitive substring of name or
    username.
    """

    role: Optional[Role] = None
    search: Optional[str] = None


class CreateAccountRequest(BaseModel):
    username: str = Field(description="Login identifier, unique across accounts.")
    password: str
    confirm_password: str
    name: str = Field(description="Display name.")
    role: Role = Role.STUDENT
    room_number: Optional[str] = None
    college_email: str = Field(description="Institutional email address.")

    def check_passwords_match(self) -> None:
        if self.password != self.confirm_password:
            raise ValidationError("Passwords don't match")

    def to_candidate(self) -> AccountCreate:
        return AccountCreate(
            username=self.username,
            password=self.password,
            name=self.name,
            role=self.role,
            room_number=self.room_number,
            college_email=self.college_email,
        )


class RegisterRequest(CreateAccountRequest):
    """Self-registration body. Admin registration also needs admin_token."""

    admin_token: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: Account
    token: str


class CurrentAccountResponse(BaseModel):
    user: Account
