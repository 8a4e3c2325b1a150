from pydantic import Field
from datetime import datetime
from typing import Annotated, List, Optional

from ..models import Priority, TaskStatus
from .common import CamelModel, IdStr

TagName = Annotated[str, Field(min_length=1, max_length=16)]


class TaskCreate(CamelModel):
    """Schema for creating new tasks.

    The owner always comes from the authenticated caller, never the body.
    """
    project_id: str
    title: str = Field(max_length=255)
    workspace_id: Optional[str] = None
    parent_id: Optional[str] = None
    section_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=255)
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    rrule: Optional[str] = None
    tags: Optional[List[TagName]] = None


class TaskUpdate(CamelModel):
    """Partial update; only fields present in the body are applied."""
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None
    section_id: Optional[str] = None
    rrule: Optional[str] = None


class AddTag(CamelModel):
    name: str = Field(min_length=1, max_length=16)


class TagRead(CamelModel):
    id: IdStr
    name: str
    owner_id: IdStr


class SubtaskRead(CamelModel):
    id: IdStr
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    version: int
    workspace_id: IdStr
    project_id: IdStr
    owner_id: IdStr
    section_id: Optional[IdStr] = None
    parent_id: Optional[IdStr] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class TaskRead(SubtaskRead):
    """Task aggregate: the task with its tags and direct subtasks."""
    rrule: Optional[str] = None
    updated_at: datetime
    tags: List[TagRead] = []
    subtasks: List[SubtaskRead] = []


class TaskQueryParams(CamelModel):
    """Raw list-query parameters, before they are turned into a filter."""
    page: int = 0
    page_size: Optional[int] = None
    dir: Optional[str] = None
    workspace_id: Optional[str] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    lt: Optional[str] = None
    gt: Optional[str] = None
