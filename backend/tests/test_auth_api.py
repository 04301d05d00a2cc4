"""Tests for authentication endpoints"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from voyage_admin.auth.local_provider import LocalIdentityProvider
from voyage_admin.models.activity_log import AdminActivityLog


def test_login(client: TestClient, super_admin):
    """Test logging in with valid credentials"""
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["user"]["id"] == super_admin.id
    assert data["user"]["role"] == "super_admin"
    assert data["user"]["display_name"] == "Super Admin"
    assert data["user"]["initials"] == "SA"
    assert data["session"]["user"]["id"] == super_admin.id
    assert isinstance(data["session"]["login_time"], int)
    assert data["session"]["provider_session"]["access_token"]


def test_login_wrong_password(client: TestClient, super_admin):
    """Test that a wrong password is rejected without detail"""
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "wrong-pass"})
    assert response.status_code == 401

    detail = response.json()["detail"]
    assert detail["error"] == "invalid_credentials"
    assert detail["message"] == "Invalid email or password"
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_unknown_email(client: TestClient, super_admin):
    response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "admin123"})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_credentials"


def test_login_identity_without_admin_profile(client: TestClient, db: Session):
    """Test that a valid identity with no admin row is denied"""
    LocalIdentityProvider(db, session_lifetime=3600).create_user("customer@example.com", "customer-pw")

    response = client.post("/auth/login", json={"email": "customer@example.com", "password": "customer-pw"})
    assert response.status_code == 403
    assert response.json()["detail"]["message"] == "Access denied. Admin account required."


def test_login_requires_body(client: TestClient):
    response = client.post("/auth/login", json={"email": "admin@example.com"})
    assert response.status_code == 422


def test_login_is_logged(client: TestClient, db: Session, super_admin):
    client.post(
        "/auth/login",
        json={"email": "admin@example.com", "password": "admin123"},
        headers={"User-Agent": "dashboard-test"},
    )

    entry = db.query(AdminActivityLog).filter(AdminActivityLog.action == "login").one()
    assert entry.admin_user_id == super_admin.id
    assert entry.user_agent == "dashboard-test"


def test_me(client: TestClient, admin_headers: dict, super_admin):
    response = client.get("/auth/me", headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    assert data["id"] == super_admin.id
    assert data["email"] == "admin@example.com"
    assert data["last_login"] is not None


def test_me_requires_token(client: TestClient):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "not_authenticated"


def test_me_rejects_bad_token(client: TestClient):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_credentials"


def test_permissions_super_admin(client: TestClient, admin_headers: dict):
    response = client.get("/auth/permissions", headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    assert data == {"role": "super_admin", "is_super_admin": True, "permissions": ["*"]}


def test_permissions_staff(client: TestClient, create_local_admin, login_headers):
    create_local_admin("staff@example.com", "staff-pass", "staff")
    headers = login_headers("staff@example.com", "staff-pass")

    data = client.get("/auth/permissions", headers=headers).json()
    assert data["is_super_admin"] is False
    assert data["permissions"] == sorted([
        "inquiries:read", "inquiries:write", "inquiries:update", "pdf:generate", "pdf:download",
    ])


def test_navigation_staff(client: TestClient, create_local_admin, login_headers):
    create_local_admin("staff@example.com", "staff-pass", "staff")
    headers = login_headers("staff@example.com", "staff-pass")

    response = client.get("/auth/navigation", headers=headers)
    assert response.status_code == 200
    assert response.json() == [
        {"title": "Dashboard", "href": "/dashboard"},
        {"title": "Inquiries", "href": "/dashboard/inquiries"},
    ]


def test_navigation_super_admin_includes_admin_users(client: TestClient, admin_headers: dict):
    titles = [item["title"] for item in client.get("/auth/navigation", headers=admin_headers).json()]
    assert titles[-1] == "Admin Users"
    assert len(titles) == 8


def test_logout_revokes_session(client: TestClient, db: Session, admin_headers: dict):
    response = client.post("/auth/logout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.get("/auth/me", headers=admin_headers).status_code == 401
    assert db.query(AdminActivityLog).filter(AdminActivityLog.action == "logout").count() == 1


def test_logout_without_token(client: TestClient):
    response = client.post("/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_jwks(client: TestClient):
    response = client.get("/.well-known/jwks.json")
    assert response.status_code == 200
    assert response.json()["keys"][0]["kty"] == "RSA"
