from pydantic import Field
from datetime import datetime

from .common import CamelModel, IdStr


class WorkspaceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class WorkspaceRead(CamelModel):
    id: IdStr
    name: str
    owner_id: IdStr
    created_at: datetime


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class ProjectRead(CamelModel):
    id: IdStr
    name: str
    workspace_id: IdStr
    created_at: datetime
