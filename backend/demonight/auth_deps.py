from __future__ import annotations
from uuid import UUID
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from demonight.db import get_session
from demonight.security import decode_token
from demonight.models.user import User

# Attendees vote without an account, so a missing header is not an error until a route demands a user.
bearer = HTTPBearer(auto_error=False)

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    session: AsyncSession = Depends(get_session),
) -> User:
    if credentials is None:
        raise _unauthorized("Missing access token")
    try:
        claims = decode_token(credentials.credentials, expected="access")
        user_id = UUID(str(claims.get("sub")))
    except (jwt.InvalidTokenError, ValueError):
        raise _unauthorized("Invalid token")
    user = await session.get(User, user_id)
    if not user:
        raise _unauthorized("User not found")
    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Gate for match control, the live-event pointer and vote moderation."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
