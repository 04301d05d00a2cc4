"""Tests for the permission-gated dependency"""
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from voyage_admin.api.deps import require_permission
from voyage_admin.database import get_db
from voyage_admin.schemas.admin_user import AdminProfile


@pytest.fixture
def gated_client(db: Session, client: TestClient):
    """Small app with one endpoint per permission tag, sharing the test database"""
    gated = FastAPI()

    @gated.get("/destinations")
    def write_destination(admin: AdminProfile = Depends(require_permission("destinations:write"))):
        return {"admin": admin.id}

    @gated.get("/inquiries")
    def read_inquiries(admin: AdminProfile = Depends(require_permission("inquiries:read"))):
        return {"admin": admin.id}

    def override_get_db():
        yield db

    gated.dependency_overrides[get_db] = override_get_db
    return TestClient(gated)


def test_staff_reads_inquiries_but_not_destinations(gated_client, create_local_admin, login_headers):
    staff = create_local_admin("staff@example.com", "staff-pass", "staff")
    headers = login_headers("staff@example.com", "staff-pass")

    assert gated_client.get("/inquiries", headers=headers).json() == {"admin": staff.id}

    response = gated_client.get("/destinations", headers=headers)
    assert response.status_code == 403
    assert response.json()["detail"]["message"] == "Permission 'destinations:write' required"


def test_content_manager_writes_destinations(gated_client, create_local_admin, login_headers):
    create_local_admin("cm@example.com", "cm-password", "content_manager")
    headers = login_headers("cm@example.com", "cm-password")

    assert gated_client.get("/destinations", headers=headers).status_code == 200


def test_gated_endpoint_requires_token(gated_client):
    assert gated_client.get("/inquiries").status_code == 401
