from .base import to_naive_utc, utc_now
from .user import User
from .workspace import Workspace, Project
from .tag import Tag, TaskTagLink
from .task import Task, TaskStatus, Priority

# Export all models for easy importing
__all__ = [
    "to_naive_utc",
    "utc_now",
    "User",
    "Workspace",
    "Project",
    "Tag",
    "TaskTagLink",
    "Task",
    "TaskStatus",
    "Priority",
]
