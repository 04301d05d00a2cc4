"""JWT utilities: RS256 keypair management, session token signing, verification, and JWKS"""
import base64
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from voyage_admin.config import settings
from voyage_admin.utils.logger import logger

# ---------------------------------------------------------------------------
# Keypair management
# ---------------------------------------------------------------------------

_private_key: Any = None   # cryptography RSAPrivateKey object
_public_key: Any = None    # cryptography RSAPublicKey object


class TokenError(Exception):
    """Raised when a session token is malformed, expired, or revoked"""


def _load_keypair() -> None:
    """Load or auto-generate the RSA keypair.

    Reads JWT_PRIVATE_KEY from settings (PEM string).
    If absent, generates a fresh RSA-2048 keypair for this process; every
    issued session is invalidated on restart in that case.
    """
    global _private_key, _public_key

    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa
    from cryptography.hazmat.backends import default_backend

    if settings.JWT_PRIVATE_KEY:
        pem = settings.JWT_PRIVATE_KEY.encode()
        _private_key = serialization.load_pem_private_key(pem, password=None, backend=default_backend())
        _public_key = _private_key.public_key()
        logger.info("JWT keypair loaded from JWT_PRIVATE_KEY setting")
    else:
        _private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=2048,
            backend=default_backend(),
        )
        _public_key = _private_key.public_key()

        logger.warning(
            "JWT_PRIVATE_KEY not set; auto-generated RSA-2048 keypair for this process. "
            "All admin sessions will be invalidated on restart."
        )


def get_private_key() -> Any:
    """Return the loaded private key, initialising on first call."""
    if _private_key is None:
        _load_keypair()
    return _private_key


def get_public_key() -> Any:
    """Return the loaded public key, initialising on first call."""
    if _public_key is None:
        _load_keypair()
    return _public_key


# ---------------------------------------------------------------------------
# Token creation
# ---------------------------------------------------------------------------

def create_access_token(subject: str, extra_claims: Dict[str, Any], expires_in: int) -> str:
    """Sign and return a session JWT.

    Args:
        subject:      Value for the 'sub' claim (identity user id).
        extra_claims: Additional claims to embed (email, etc.).
        expires_in:   Lifetime in seconds.

    Returns:
        Signed JWT string.
    """
    now = int(datetime.now(timezone.utc).timestamp())

    payload: Dict[str, Any] = {
        "sub": subject,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + expires_in,
        "type": "session",
        **extra_claims,
    }

    if settings.JWT_KEY_ID:
        payload["kid"] = settings.JWT_KEY_ID

    return jwt.encode(payload, get_private_key(), algorithm=settings.JWT_ALGORITHM)


def read_claims(token: str) -> Dict[str, Any]:
    """Return the claims of a token without verifying it (used for exp bookkeeping)."""
    return jwt.get_unverified_claims(token)


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

def decode_access_token(token: str, db: Session) -> Dict[str, Any]:
    """Verify a session JWT and return its payload.

    Checks:
    1. Signature validity (RS256 with our public key)
    2. Token not expired (jose handles 'exp')
    3. jti not in the revoked_tokens table

    Raises:
        TokenError: on any verification failure.
    """
    from voyage_admin.models.revoked_token import RevokedToken

    try:
        payload = jwt.decode(
            token,
            get_public_key(),
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug(f"JWT decode failed: {exc}")
        raise TokenError("Invalid or expired token") from exc

    jti = payload.get("jti")
    if not jti or payload.get("type") != "session":
        raise TokenError("Invalid or expired token")

    revoked = db.query(RevokedToken).filter(RevokedToken.jti == jti).first()
    if revoked:
        raise TokenError("Token has been revoked")

    return payload


# ---------------------------------------------------------------------------
# JWKS
# ---------------------------------------------------------------------------

def get_jwks() -> Dict[str, Any]:
    """Return the public key in JWKS format for third-party token verification."""
    public_key = get_public_key()

    # Only RSA keys are supported; the key is already the public half
    try:
        pub_numbers = public_key.public_numbers()
    except AttributeError:
        raise NotImplementedError("JWKS export is only implemented for RSA public keys")

    def _to_base64url(n: int) -> str:
        byte_length = (n.bit_length() + 7) // 8
        return base64.urlsafe_b64encode(n.to_bytes(byte_length, "big")).rstrip(b"=").decode()

    key_entry: Dict[str, Any] = {
        "kty": "RSA",
        "use": "sig",
        "alg": settings.JWT_ALGORITHM,
        "n": _to_base64url(pub_numbers.n),
        "e": _to_base64url(pub_numbers.e),
    }

    if settings.JWT_KEY_ID:
        key_entry["kid"] = settings.JWT_KEY_ID

    return {"keys": [key_entry]}
