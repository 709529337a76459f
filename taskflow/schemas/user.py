from sqlmodel import SQLModel
from pydantic import field_validator
from typing import Any, Dict, Optional
from datetime import datetime
import uuid


class UserCreate(SQLModel):
    email: str
    password: str
    full_name: str


class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    user_metadata: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        return self.user_metadata.get("full_name", "")

    @property
    def avatar_url(self) -> Optional[str]:
        return self.user_metadata.get("avatar_url")


class UserLogin(SQLModel):
    email: str
    password: str


class Token(SQLModel):
    access_token: str
    token_type: str


class ProfileUpdate(SQLModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value):
        if value is None or not value.strip():
            raise ValueError("Full name is required")
        return value.strip()


class AvatarUpload(SQLModel):
    path: str
    public_url: str
