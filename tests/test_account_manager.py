import bcrypt
import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AccountHasComplaintsError,
    ConflictError,
    InvalidCredentialsError,
    ValidationError,
)
from models.account import AccountModel
from models.complaint import ComplaintModel
from schemas.account import AccountCreate, AccountFilter, Role
from utils import account_manager as account_manager_module
from utils.account_manager import is_college_email


def _candidate(**overrides) -> AccountCreate:
    data = {
        "username": "carol",
        "password": "hunter22",
        "name": "Carol Diaz",
        "role": Role.STUDENT,
        "room_number": "D-03",
        "college_email": "carol@college.edu",
    }
    data.update(overrides)
    return AccountCreate(**data)


def _set_created_at(db_session, account_id: str, created_at: str) -> None:
    db_session.query(AccountModel).filter(AccountModel.id == account_id).update(
        {"created_at": created_at}
    )
    db_session.commit()


def test_create_then_verify_credentials(account_manager):
    """Test that a new account can log in with its original password"""
    created = account_manager.create_account(_candidate())

    verified = account_manager.verify_credentials("carol", "hunter22")

    assert verified.id == created.id
    assert verified.role == Role.STUDENT
    assert verified.room_number == "D-03"


def test_password_is_stored_as_salted_hash(account_manager, db_session):
    account = account_manager.create_account(_candidate())
    account_manager.create_account(_candidate(username="dave", college_email="dave@college.edu"))

    models = db_session.query(AccountModel).order_by(AccountModel.username).all()
    hashes = [m.password_hash for m in models]

    assert all(h.startswith("$2") for h in hashes)
    assert "hunter22" not in hashes
    # same password, different salt
    assert hashes[0] != hashes[1]
    assert not hasattr(account, "password_hash")


def test_duplicate_username_conflicts_and_keeps_first(account_manager):
    first = account_manager.create_account(_candidate())

    with pytest.raises(ConflictError):
        account_manager.create_account(_candidate(password="another-one", name="Imposter"))

    accounts = account_manager.list_accounts()
    assert [a.id for a in accounts] == [first.id]
    assert account_manager.verify_credentials("carol", "hunter22").name == "Carol Diaz"


def test_wrong_password_and_unknown_user_are_indistinguishable(account_manager):
    account_manager.create_account(_candidate())

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        account_manager.verify_credentials("carol", "not-it")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        account_manager.verify_credentials("nobody", "hunter22")

    assert str(wrong_password.value) == str(unknown_user.value)


def test_unknown_user_still_runs_one_bcrypt_check(account_manager, monkeypatch):
    """Both failure paths pay for exactly one hash comparison"""
    account_manager.create_account(_candidate())
    calls = []
    real_checkpw = bcrypt.checkpw

    def counting_checkpw(password, hashed):
        calls.append(hashed)
        return real_checkpw(password, hashed)

    monkeypatch.setattr(account_manager_module.bcrypt, "checkpw", counting_checkpw)

    with pytest.raises(InvalidCredentialsError):
        account_manager.verify_credentials("nobody", "hunter22")
    with pytest.raises(InvalidCredentialsError):
        account_manager.verify_credentials("carol", "wrong")

    assert len(calls) == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": "   "},
        {"password": ""},
        {"name": ""},
        {"college_email": None},
        {"college_email": "carol@gmail.com"},
        {"college_email": "not-an-email"},
    ],
)
def test_invalid_candidates_are_rejected_before_writing(account_manager, overrides):
    with pytest.raises(ValidationError):
        account_manager.create_account(_candidate(**overrides))

    assert account_manager.list_accounts() == []


def test_room_number_is_dropped_for_admins(account_manager):
    account = account_manager.create_account(
        _candidate(username="boss", role=Role.ADMIN, college_email="boss@college.edu")
    )

    assert account.role == Role.ADMIN
    assert account.room_number is None


@pytest.mark.parametrize(
    "email,expected",
    [
        ("a@college.edu", True),
        ("A@University.EDU", True),
        ("a@edu", True),
        ("a@cs.college.edu", True),
        ("a@college.com", False),
        ("a@notcollege.edu.com", False),
        ("a b@college.edu", False),
        ("@college.edu", False),
    ],
)
def test_is_college_email(email, expected):
    assert is_college_email(email) is expected


def test_list_accounts_filters_by_role_and_search(make_account, account_manager):
    make_account("alice", name="Alice Sharma")
    make_account("bob", name="Bob Mensah")
    make_account("warden", role=Role.ADMIN, name="Hostel Warden")

    students = account_manager.list_accounts(AccountFilter(role=Role.STUDENT))
    assert {a.username for a in students} == {"alice", "bob"}

    by_name = account_manager.list_accounts(AccountFilter(search="SHARMA"))
    assert [a.username for a in by_name] == ["alice"]

    by_username = account_manager.list_accounts(AccountFilter(search="ward"))
    assert [a.username for a in by_username] == ["warden"]

    combined = account_manager.list_accounts(
        AccountFilter(role=Role.ADMIN, search="alice")
    )
    assert combined == []


def test_list_accounts_search_treats_wildcards_literally(make_account, account_manager):
    make_account("alice", name="Alice Sharma")

    assert account_manager.list_accounts(AccountFilter(search="%")) == []
    assert account_manager.list_accounts(AccountFilter(search="_")) == []


def test_list_accounts_is_newest_first(make_account, account_manager, db_session):
    older = make_account("alice")
    newer = make_account("bob")
    _set_created_at(db_session, older.id, "2024-01-01T00:00:00.000000+00:00")
    _set_created_at(db_session, newer.id, "2024-06-01T00:00:00.000000+00:00")

    assert [a.id for a in account_manager.list_accounts()] == [newer.id, older.id]


def test_delete_account_twice(account_manager, student):
    assert account_manager.delete_account(student.id) is True
    assert account_manager.delete_account(student.id) is False
    assert account_manager.get_account_by_id(student.id) is None


def test_delete_account_refused_while_it_owns_complaints(
    account_manager, student, make_complaint, db_session
):
    filed = make_complaint(student)

    with pytest.raises(AccountHasComplaintsError) as exc_info:
        account_manager.delete_account(student.id)

    assert exc_info.value.complaint_count == 1
    assert account_manager.get_account_by_id(student.id) is not None
    assert [c.id for c in db_session.query(ComplaintModel).all()] == [filed.id]


def test_foreign_key_blocks_deleting_a_complaint_owner(
    student, make_complaint, db_session
):
    make_complaint(student)
    model = db_session.query(AccountModel).filter(AccountModel.id == student.id).one()

    db_session.delete(model)
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

    assert db_session.query(ComplaintModel).count() == 1


def test_lookup_by_username(account_manager, student):
    assert account_manager.get_account_by_username("alice").id == student.id
    assert account_manager.get_account_by_username("ghost") is None
