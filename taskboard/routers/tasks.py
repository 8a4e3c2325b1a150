from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .. import ids
from ..config import MAX_PAGE
from ..database import get_db
from ..exceptions import InvalidIdentifier
from ..schemas.common import PageResponse
from ..schemas.task import AddTag, TaskCreate, TaskQueryParams, TaskRead, TaskUpdate
from ..services.tasks import TasksService
from .auth import get_current_owner_id

router = APIRouter()


def get_tasks_service(db: Session = Depends(get_db)) -> TasksService:
    return TasksService(db)


def task_query_params(
    page: int = Query(0, ge=0, le=MAX_PAGE),
    page_size: Optional[int] = Query(None, ge=1, alias="pageSize"),
    dir: Optional[str] = None,
    workspace_id: Optional[str] = Query(None, alias="workspaceId"),
    project_id: Optional[str] = Query(None, alias="projectId"),
    parent_id: Optional[str] = Query(None, alias="parentId"),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    lt: Optional[str] = None,
    gt: Optional[str] = None,
) -> TaskQueryParams:
    return TaskQueryParams(
        page=page,
        page_size=page_size,
        dir=dir,
        workspace_id=workspace_id,
        project_id=project_id,
        parent_id=parent_id,
        status=status,
        priority=priority,
        from_=from_,
        to=to,
        lt=lt,
        gt=gt,
    )


def _valid_tag_id(tag_id: str) -> str:
    if not ids.is_valid(tag_id):
        raise InvalidIdentifier("Invalid tagId. Must be a valid UUID.")
    return tag_id


# =========================================================================
# Tags
# =========================================================================

@router.patch("/tasks/{task_id}/tags", response_model=TaskRead)
def add_tag(
    task_id: str,
    dto: AddTag,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.add_tag(task_id, owner_id, dto)


@router.patch("/tasks/{task_id}/tags/{tag_id}", response_model=TaskRead)
def connect_tag(
    task_id: str,
    tag_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    """Attach an existing tag. Requires a signed-in caller but is not owner-scoped."""
    return service.connect_tag(task_id, _valid_tag_id(tag_id))


@router.patch("/tasks/{task_id}/tags/{tag_id}/remove", response_model=TaskRead)
def remove_tag(
    task_id: str,
    tag_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.remove_tag(task_id, _valid_tag_id(tag_id), owner_id)


# =========================================================================

@router.post("/tasks", response_model=TaskRead, status_code=status.HTTP_200_OK)
def create_task(
    dto: TaskCreate,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.create(dto, owner_id)


@router.get("/tasks", response_model=PageResponse[TaskRead])
def fetch_tasks(
    params: TaskQueryParams = Depends(task_query_params),
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.fetch(params, owner_id)


@router.get("/tasks/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.find_one(task_id, owner_id)


@router.patch("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    task_id: str,
    dto: TaskUpdate,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    return service.update(task_id, owner_id, dto)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_200_OK, response_class=Response)
def delete_task(
    task_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: TasksService = Depends(get_tasks_service),
):
    service.remove(task_id, owner_id)
    return Response(status_code=status.HTTP_200_OK)
