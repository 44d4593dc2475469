"""
Hostel Complaint Tracker - Test Configuration and Fixtures
"""
import os

# Set testing environment before any application module reads it
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["COLLEGE_EMAIL_DOMAINS"] = "college.edu,university.edu,edu"

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.database import enable_sqlite_foreign_keys, get_db
from core.security import create_access_token
from models.base import Base
from schemas.account import Account, AccountCreate, Role
from schemas.complaint import Complaint, ComplaintCreate
from utils.account_manager import AccountManager
from utils.complaint_manager import ComplaintManager

DEFAULT_PASSWORD = "s3cret-pass"


@pytest.fixture
def engine():
    """In-memory database shared by every session in one test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def account_manager(db_session: Session) -> AccountManager:
    return AccountManager(db_session)


@pytest.fixture
def complaint_manager(db_session: Session) -> ComplaintManager:
    return ComplaintManager(db_session)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """Create test client with database override"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(account_manager: AccountManager) -> Callable[..., Account]:
    """Factory creating accounts with sensible defaults"""

    def _make(
        username: str,
        role: Role = Role.STUDENT,
        name: str = None,
        room_number: str = None,
        password: str = DEFAULT_PASSWORD,
    ) -> Account:
        return account_manager.create_account(
            AccountCreate(
                username=username,
                password=password,
                name=name or username.title(),
                role=role,
                room_number=room_number,
                college_email=f"{username}@college.edu",
            )
        )

    return _make


@pytest.fixture
def student(make_account) -> Account:
    return make_account("alice", name="Alice Sharma", room_number="B-12")


@pytest.fixture
def other_student(make_account) -> Account:
    return make_account("bob", name="Bob Mensah", room_number="C-07")


@pytest.fixture
def admin(make_account) -> Account:
    return make_account("warden", role=Role.ADMIN, name="Hostel Warden")


@pytest.fixture
def make_complaint(complaint_manager: ComplaintManager) -> Callable[..., Complaint]:
    def _make(
        owner: Account,
        subject: str = "Leaky faucet",
        description: str = "Bathroom faucet won't stop dripping",
        category: str = "maintenance",
        room_number: str = None,
    ) -> Complaint:
        return complaint_manager.file_complaint(
            owner.id,
            ComplaintCreate(
                subject=subject,
                description=description,
                category=category,
                room_number=room_number or owner.room_number or "A-01",
            ),
        )

    return _make


def auth_headers_for(account: Account) -> dict:
    """Generate authentication headers for an account"""
    return {"Authorization": f"Bearer {create_access_token(account.id)}"}


@pytest.fixture
def student_headers(student: Account) -> dict:
    return auth_headers_for(student)


@pytest.fixture
def other_student_headers(other_student: Account) -> dict:
    return auth_headers_for(other_student)


@pytest.fixture
def admin_headers(admin: Account) -> dict:
    return auth_headers_for(admin)


@pytest.fixture
def headers_for() -> Callable[[Account], dict]:
    return auth_headers_for
