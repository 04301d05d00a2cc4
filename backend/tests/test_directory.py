"""Tests for the admin directory"""
import pytest
from sqlalchemy.orm import Session

from voyage_admin.auth.directory import AdminDirectory, DirectoryError

from conftest import UnreachableDatabase


@pytest.fixture
def directory(db: Session) -> AdminDirectory:
    return AdminDirectory(db)


def _insert(directory: AdminDirectory, user_id: str = "identity-1", email: str = "staff@example.com"):
    return directory.insert(
        user_id=user_id,
        email=email,
        first_name="Staff",
        last_name="Member",
        role="staff",
        created_by=None,
    )


def test_find_active_by_user_id(directory):
    profile = _insert(directory)

    assert directory.find_active_by_user_id("identity-1") == profile
    assert directory.find_active_by_user_id("someone-else") is None


def test_deactivated_profile_is_not_found(directory):
    profile = _insert(directory)

    assert directory.deactivate(profile.id) is True

    assert directory.find_active_by_user_id("identity-1") is None
    assert directory.get(profile.id).is_active is False


def test_deactivate_unknown_profile(directory):
    assert directory.deactivate("missing") is False


def test_list_all(directory):
    first = _insert(directory, "identity-1", "first@example.com")
    second = _insert(directory, "identity-2", "second@example.com")

    ids = [row.id for row in directory.list_all()]

    assert set(ids) == {first.id, second.id}


def test_duplicate_identity_rejected(directory):
    _insert(directory)

    with pytest.raises(DirectoryError):
        _insert(directory, email="other@example.com")

    # the session is usable again after the rollback
    assert directory.find_active_by_user_id("identity-1") is not None


@pytest.mark.parametrize("call", [
    lambda d: d.find_active_by_user_id("identity-1"),
    lambda d: d.get("admin-1"),
    lambda d: d.list_all(),
    lambda d: d.deactivate("admin-1"),
])
def test_database_failures_raise_directory_error(call):
    database = UnreachableDatabase()

    with pytest.raises(DirectoryError):
        call(AdminDirectory(database))

    assert database.rollbacks == 1
