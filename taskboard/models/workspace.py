from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import List

from ..ids import generate
from .base import utc_now

class Workspace(SQLModel, table=True):
    """Top-level container owned by a single user."""
    __tablename__ = "workspaces"

    id: bytes = Field(default_factory=generate, primary_key=True)
    name: str = Field(max_length=255)
    owner_id: bytes = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now)

    projects: List["Project"] = Relationship(back_populates="workspace")


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: bytes = Field(default_factory=generate, primary_key=True)
    name: str = Field(max_length=255)
    workspace_id: bytes = Field(foreign_key="workspaces.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now)

    workspace: Workspace = Relationship(back_populates="projects")
