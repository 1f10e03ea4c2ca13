from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from demonight.schemas.common import CamelModel

class RegisterRequest(BaseModel):
    email: EmailStr
    # lowercased before storing
    username: str = Field(min_length=3, max_length=20, pattern=r"^[A-Za-z0-9_]+$")
    password: str = Field(min_length=8, max_length=72)  # bcrypt ignores bytes past 72

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserPublic(CamelModel):
    id: UUID
    email: EmailStr
    username: str
    is_admin: bool
    created_at: datetime

class TokenPair(BaseModel):
    access: str
    refresh: str
