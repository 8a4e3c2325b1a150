import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import ids
from ..exceptions import (
    ProjectCreationFailed,
    WorkspaceCreationFailed,
    WorkspaceDeletionFailed,
    WorkspaceNotFound,
)
from ..filters import check_page, clamp_page_size
from ..models import Project, Workspace, utc_now
from ..pagination import build_page
from ..schemas.common import PageResponse
from ..schemas.workspace import ProjectCreate, ProjectRead, WorkspaceCreate, WorkspaceRead

logger = logging.getLogger(__name__)


class WorkspacesService:
    """Owner-scoped workspaces and the projects inside them."""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, workspace_key: bytes, owner_key: bytes) -> Workspace:
        workspace = (
            self.db.query(Workspace)
            .filter(Workspace.id == workspace_key, Workspace.owner_id == owner_key)
            .first()
        )
        if workspace is None:
            raise WorkspaceNotFound()
        return workspace

    def create(self, dto: WorkspaceCreate, owner_id: str) -> WorkspaceRead:
        workspace = Workspace(
            id=ids.generate(),
            name=dto.name,
            owner_id=ids.encode(owner_id),
            created_at=utc_now(),
        )
        self.db.add(workspace)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Creating workspace failed")
            raise WorkspaceCreationFailed() from exc
        self.db.refresh(workspace)
        logger.info("Created workspace %s", ids.decode(workspace.id))
        return WorkspaceRead.model_validate(workspace)

    def fetch(self, page: int, page_size: int, dir: str, owner_id: str) -> PageResponse:
        page = check_page(page)
        page_size = clamp_page_size(page_size)
        order = Workspace.created_at.asc() if dir == "asc" else Workspace.created_at.desc()

        query = self.db.query(Workspace).filter(Workspace.owner_id == ids.encode(owner_id))
        workspaces = query.order_by(order).offset(page * page_size).limit(page_size).all()
        return build_page(
            [WorkspaceRead.model_validate(workspace) for workspace in workspaces],
            page=page,
            page_size=page_size,
            count=query.count(),
        )

    def find_one(self, id: str, owner_id: str) -> WorkspaceRead:
        workspace = self._get_owned(ids.encode(id), ids.encode(owner_id))
        return WorkspaceRead.model_validate(workspace)

    def remove(self, id: str, owner_id: str) -> None:
        """Delete a workspace; its projects and tasks go with it."""
        workspace_key = ids.encode(id)
        owner_key = ids.encode(owner_id)
        try:
            deleted = (
                self.db.query(Workspace)
                .filter(Workspace.id == workspace_key, Workspace.owner_id == owner_key)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Deleting workspace %s failed", id)
            raise WorkspaceDeletionFailed() from exc
        if deleted == 0:
            raise WorkspaceNotFound()
        logger.info("Deleted workspace %s", id)

    def create_project(self, id: str, owner_id: str, dto: ProjectCreate) -> ProjectRead:
        workspace = self._get_owned(ids.encode(id), ids.encode(owner_id))
        project = Project(
            id=ids.generate(),
            name=dto.name,
            workspace_id=workspace.id,
            created_at=utc_now(),
        )
        self.db.add(project)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Creating project failed")
            raise ProjectCreationFailed() from exc
        self.db.refresh(project)
        return ProjectRead.model_validate(project)

    def list_projects(self, id: str, owner_id: str) -> List[ProjectRead]:
        workspace = self._get_owned(ids.encode(id), ids.encode(owner_id))
        projects = (
            self.db.query(Project)
            .filter(Project.workspace_id == workspace.id)
            .order_by(Project.created_at.asc())
            .all()
        )
        return [ProjectRead.model_validate(project) for project in projects]
