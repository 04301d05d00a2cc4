"""Tests for the built-in identity provider"""
import pytest
from sqlalchemy.orm import Session

from voyage_admin.auth.identity import ProviderError
from voyage_admin.auth.local_provider import LocalIdentityProvider
from voyage_admin.models.identity_user import IdentityUser
from voyage_admin.models.revoked_token import RevokedToken
from voyage_admin.utils.jwt_utils import get_jwks, read_claims


@pytest.fixture
def local(db: Session) -> LocalIdentityProvider:
    return LocalIdentityProvider(db, session_lifetime=3600)


def test_create_user_stores_bcrypt_hash(local, db: Session):
    user = local.create_user("Person@Example.com", "s3cret-pass")

    row = db.query(IdentityUser).filter(IdentityUser.id == user.id).first()
    assert row.email == "person@example.com"
    assert row.password_hash != "s3cret-pass"
    assert row.password_hash.startswith("$2")
    assert row.email_confirmed_at is not None


def test_sign_in_issues_session_token(local):
    created = local.create_user("person@example.com", "s3cret-pass")

    auth = local.sign_in_with_password("PERSON@example.com", "s3cret-pass")

    assert auth.user == created
    claims = read_claims(auth.session.access_token)
    assert claims["sub"] == created.id
    assert claims["type"] == "session"
    assert auth.session.expires_in == 3600
    assert auth.session.expires_at == claims["exp"]
    assert local.get_user(auth.session.access_token) == created


def test_sign_in_records_last_sign_in(local, db: Session):
    created = local.create_user("person@example.com", "s3cret-pass")

    local.sign_in_with_password("person@example.com", "s3cret-pass")

    row = db.query(IdentityUser).filter(IdentityUser.id == created.id).first()
    assert row.last_sign_in_at is not None


@pytest.mark.parametrize("email,password", [
    ("person@example.com", "wrong-pass"),
    ("nobody@example.com", "s3cret-pass"),
])
def test_sign_in_rejects_bad_credentials(local, email, password):
    local.create_user("person@example.com", "s3cret-pass")

    with pytest.raises(ProviderError) as exc_info:
        local.sign_in_with_password(email, password)

    assert str(exc_info.value) == "Invalid login credentials"


def test_sign_in_requires_confirmed_email(local):
    local.create_user("person@example.com", "s3cret-pass", email_confirm=False)

    with pytest.raises(ProviderError, match="Email not confirmed"):
        local.sign_in_with_password("person@example.com", "s3cret-pass")


def test_duplicate_email_rejected(local):
    local.create_user("person@example.com", "s3cret-pass")

    with pytest.raises(ProviderError) as exc_info:
        local.create_user("PERSON@example.com", "another-pass")

    assert exc_info.value.status_code == 422


def test_sign_out_revokes_token(local, db: Session):
    local.create_user("person@example.com", "s3cret-pass")
    session = local.sign_in_with_password("person@example.com", "s3cret-pass").session

    local.sign_out(session)

    assert db.query(RevokedToken).count() == 1
    with pytest.raises(ProviderError) as exc_info:
        local.get_user(session.access_token)
    assert exc_info.value.status_code == 401

    # already revoked: nothing more to do
    local.sign_out(session)
    assert db.query(RevokedToken).count() == 1


def test_sign_out_without_session_is_noop(local, db: Session):
    local.sign_out(None)

    assert db.query(RevokedToken).count() == 0


def test_get_user_rejects_garbage(local):
    with pytest.raises(ProviderError) as exc_info:
        local.get_user("not.a.jwt")

    assert exc_info.value.status_code == 401


def test_get_user_after_identity_deleted(local):
    created = local.create_user("person@example.com", "s3cret-pass")
    token = local.sign_in_with_password("person@example.com", "s3cret-pass").session.access_token

    local.delete_user(created.id)

    with pytest.raises(ProviderError):
        local.get_user(token)


def test_delete_unknown_user(local):
    with pytest.raises(ProviderError) as exc_info:
        local.delete_user("missing")

    assert exc_info.value.status_code == 404


def test_jwks_exposes_rsa_key():
    jwks = get_jwks()

    assert len(jwks["keys"]) == 1
    key = jwks["keys"][0]
    assert key["kty"] == "RSA"
    assert key["alg"] == "RS256"
    assert key["e"] == "AQAB"
