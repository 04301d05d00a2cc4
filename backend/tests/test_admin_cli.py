"""Tests for the command-line admin session"""
import pytest

import admin_cli
from voyage_admin.config import settings


@pytest.fixture
def session_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SESSION_STORE_DIR", str(tmp_path))
    return tmp_path


def test_login_whoami_logout(db, create_local_admin, session_dir, capsys):
    create_local_admin("staff@example.com", "staff-pass", "staff", "Sam", "Staff")

    assert admin_cli.main(["login", "--email", "staff@example.com", "--password", "staff-pass"]) == 0
    assert (session_dir / "admin_session.json").exists()

    assert admin_cli.main(["whoami"]) == 0
    out = capsys.readouterr().out
    assert "Sam Staff <staff@example.com>" in out
    assert "role: staff" in out
    assert "inquiries:read" in out

    assert admin_cli.main(["logout"]) == 0
    assert not (session_dir / "admin_session.json").exists()
    assert admin_cli.main(["whoami"]) == 1


def test_login_with_wrong_password(db, create_local_admin, session_dir, capsys):
    create_local_admin("staff@example.com", "staff-pass", "staff")

    assert admin_cli.main(["login", "--email", "staff@example.com", "--password", "nope"]) == 1

    assert "Invalid email or password" in capsys.readouterr().out
    assert not (session_dir / "admin_session.json").exists()


def test_whoami_without_session(db, session_dir, capsys):
    assert admin_cli.main(["whoami"]) == 1
    assert "Not logged in" in capsys.readouterr().out
