from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Any, Dict, List
from datetime import datetime, timezone
import uuid


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, nullable=False)
    password_hash: str = Field(nullable=False)

    # Free-form profile data: full_name, avatar_url
    user_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationship to tasks
    tasks: List["Task"] = Relationship(back_populates="user")

    @property
    def full_name(self) -> str:
        return self.user_metadata.get("full_name", "")
