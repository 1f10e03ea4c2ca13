from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Literal
import jwt
from passlib.context import CryptContext
from demonight.config import settings

TokenType = Literal["access", "refresh"]

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
JWT_ALG = "HS256"

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def _issue(sub: str, token_type: TokenType, ttl: timedelta) -> str:
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": sub,
        "type": token_type,
        "iat": issued.timestamp(),  # sub-second, so a refresh never reissues the same token
        "exp": int((issued + ttl).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALG)

def make_access_token(sub: str) -> str:
    return _issue(sub, "access", timedelta(minutes=settings.access_ttl_min))

def make_refresh_token(sub: str) -> str:
    return _issue(sub, "refresh", timedelta(minutes=settings.refresh_ttl_min))

def decode_token(token: str, expected: TokenType | None = None) -> dict[str, Any]:
    """Verify signature and expiry; with `expected`, also the token type. Raises jwt.InvalidTokenError."""
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALG])
    if expected is not None and claims.get("type") != expected:
        raise jwt.InvalidTokenError(f"expected a {expected} token")
    return claims
