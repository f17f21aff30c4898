from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel

from edu_resources.core.time import utcnow


class UserBase(SQLModel):
    email: str = Field(index=True, unique=True)
    username: str = Field(index=True)
    is_admin: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True, index=True)


class User(UserBase, table=True):
    """Back-office account. Only admins can edit resources or read stats."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None


class UserPublic(UserBase):
    id: str
    created_at: datetime
    last_login_at: Optional[datetime] = None
