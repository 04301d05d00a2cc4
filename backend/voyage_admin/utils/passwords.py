"""Password hashing utilities"""
import bcrypt

from voyage_admin.config import settings


def hash_password(password: str, rounds: int = None) -> str:
    """Hash a password with bcrypt (salt embedded in the result)"""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash; malformed hashes never match"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
