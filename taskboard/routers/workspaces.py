from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..config import MAX_PAGE
from ..database import get_db
from ..schemas.common import PageResponse
from ..schemas.workspace import ProjectCreate, ProjectRead, WorkspaceCreate, WorkspaceRead
from ..services.workspaces import WorkspacesService
from .auth import get_current_owner_id

router = APIRouter()


def get_workspaces_service(db: Session = Depends(get_db)) -> WorkspacesService:
    return WorkspacesService(db)


@router.post("/workspaces", response_model=WorkspaceRead, status_code=status.HTTP_200_OK)
def create_workspace(
    dto: WorkspaceCreate,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    return service.create(dto, owner_id)


@router.get("/workspaces", response_model=PageResponse[WorkspaceRead])
def fetch_workspaces(
    page: int = Query(0, ge=0, le=MAX_PAGE),
    page_size: Optional[int] = Query(None, ge=1, alias="pageSize"),
    dir: Optional[str] = None,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    return service.fetch(page, page_size, dir, owner_id)


@router.get("/workspaces/{workspace_id}", response_model=WorkspaceRead)
def get_workspace(
    workspace_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    return service.find_one(workspace_id, owner_id)


@router.delete("/workspaces/{workspace_id}", status_code=status.HTTP_200_OK, response_class=Response)
def delete_workspace(
    workspace_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    service.remove(workspace_id, owner_id)
    return Response(status_code=status.HTTP_200_OK)


@router.post("/workspaces/{workspace_id}/projects", response_model=ProjectRead)
def create_project(
    workspace_id: str,
    dto: ProjectCreate,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    return service.create_project(workspace_id, owner_id, dto)


@router.get("/workspaces/{workspace_id}/projects", response_model=List[ProjectRead])
def list_projects(
    workspace_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: WorkspacesService = Depends(get_workspaces_service),
):
    return service.list_projects(workspace_id, owner_id)
