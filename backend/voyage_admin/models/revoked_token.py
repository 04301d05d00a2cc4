"""RevokedToken: jti blocklist for signed-out sessions"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from voyage_admin.database import Base


class RevokedToken(Base):
    """Stores revoked session token IDs (jti claims).

    ``LocalIdentityProvider.sign_out`` inserts the jti of the session being ended;
    ``decode_access_token()`` rejects any token whose jti is listed here.
    expires_at mirrors the token's original exp so old rows can be pruned safely.
    """

    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String(36), unique=True, nullable=False, index=True)
    revoked_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)  # original token exp, for TTL cleanup
