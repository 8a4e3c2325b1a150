from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import List

from ..ids import generate
from .base import utc_now

class TaskTagLink(SQLModel, table=True):
    __tablename__ = "task_tags"

    task_id: bytes = Field(foreign_key="tasks.id", primary_key=True, ondelete="CASCADE")
    tag_id: bytes = Field(foreign_key="tags.id", primary_key=True, ondelete="CASCADE")


class Tag(SQLModel, table=True):
    """Owner-scoped label. Names are not unique; every add creates a new row."""
    __tablename__ = "tags"

    id: bytes = Field(default_factory=generate, primary_key=True)
    name: str = Field(max_length=16)
    owner_id: bytes = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now)

    tasks: List["Task"] = Relationship(back_populates="tags", link_model=TaskTagLink)
