from sqlmodel import SQLModel, Field
from datetime import datetime

from ..ids import generate
from .base import utc_now

class User(SQLModel, table=True):
    """User model for authentication; owner of workspaces, tasks and tags."""
    __tablename__ = "users"

    id: bytes = Field(default_factory=generate, primary_key=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
