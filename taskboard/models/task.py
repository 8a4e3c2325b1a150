from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional, List
import enum

from ..ids import generate
from .base import utc_now
from .tag import Tag, TaskTagLink

class TaskStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

class Priority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

class Task(SQLModel, table=True):
    """Task model.

    Ids are 16-byte binary keys; see ``taskboard.ids`` for the string form.
    ``version`` is bumped by one on every update.
    """
    __tablename__ = "tasks"

    id: bytes = Field(default_factory=generate, primary_key=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    status: TaskStatus = Field(default=TaskStatus.NOT_STARTED, index=True)
    priority: Optional[Priority] = Field(default=None, index=True)
    due_date: Optional[datetime] = Field(default=None, index=True)
    rrule: Optional[str] = None
    version: int = Field(default=1)

    workspace_id: bytes = Field(foreign_key="workspaces.id", index=True, ondelete="CASCADE")
    project_id: bytes = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    owner_id: bytes = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    section_id: Optional[bytes] = None
    parent_id: Optional[bytes] = Field(
        default=None, foreign_key="tasks.id", index=True, ondelete="SET NULL"
    )

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    parent: Optional["Task"] = Relationship(
        back_populates="subtasks",
        sa_relationship_kwargs={"remote_side": "Task.id"},
    )
    subtasks: List["Task"] = Relationship(back_populates="parent")
    tags: List[Tag] = Relationship(back_populates="tasks", link_model=TaskTagLink)
