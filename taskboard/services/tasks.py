import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import ids
from ..database import is_foreign_key_violation
from ..exceptions import (
    ProjectNotFound,
    TagNotFound,
    TaskCreationFailed,
    TaskDeletionFailed,
    TaskNotFound,
    TaskUpdateFailed,
    WorkspaceMismatch,
)
from ..filters import build_task_query
from ..models import Project, Tag, Task, TaskStatus, Workspace, to_naive_utc, utc_now
from ..pagination import build_page
from ..schemas.common import PageResponse
from ..schemas.task import AddTag, TaskCreate, TaskQueryParams, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)

# Task aggregate: the task plus its tags and direct subtasks.
_AGGREGATE = (selectinload(Task.tags), selectinload(Task.subtasks))

# Patch fields copied as-is; None clears them.
_NULLABLE_FIELDS = ("description", "priority", "rrule")


def _stamp_status(values: dict, status, now) -> None:
    if status == TaskStatus.IN_PROGRESS:
        values["started_at"] = now
    elif status == TaskStatus.COMPLETED:
        values["completed_at"] = now


class TasksService:
    """Create, read, update and delete task aggregates.

    Every public method takes the caller's id as ``owner_id`` (a UUID
    string) and scopes its queries with it. A task owned by someone else
    is reported exactly like a task that does not exist.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _scoped(self, task_key: bytes, owner_key: bytes):
        return self.db.query(Task).filter(Task.id == task_key, Task.owner_id == owner_key)

    def _get_owned(self, task_key: bytes, owner_key: bytes) -> Task:
        task = self._scoped(task_key, owner_key).options(*_AGGREGATE).first()
        if task is None:
            raise TaskNotFound()
        return task

    def _read(self, task_key: bytes) -> TaskRead:
        task = self.db.query(Task).options(*_AGGREGATE).filter(Task.id == task_key).first()
        if task is None:
            raise TaskNotFound()
        return TaskRead.model_validate(task)

    def _ensure_parent(self, parent_key: bytes, owner_key: bytes) -> None:
        parent = (
            self.db.query(Task.id)
            .filter(Task.id == parent_key, Task.owner_id == owner_key)
            .first()
        )
        if parent is None:
            raise TaskNotFound()

    def _project_workspace(self, project_key: bytes, owner_key: bytes) -> bytes:
        """Workspace of a project the caller owns; anyone else's is not found."""
        row = (
            self.db.query(Project.workspace_id)
            .join(Workspace, Project.workspace_id == Workspace.id)
            .filter(Project.id == project_key, Workspace.owner_id == owner_key)
            .first()
        )
        if row is None:
            raise ProjectNotFound()
        return row.workspace_id

    def _commit(self, failure, task_key: bytes) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Persisting task %s failed", ids.decode(task_key))
            raise failure()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, dto: TaskCreate, owner_id: str) -> TaskRead:
        """Create a task, and its tags in the same transaction.

        Tags are always created fresh, even when the owner already has a
        tag with the same name.
        """
        owner_key = ids.encode(owner_id)
        project_key = ids.encode(dto.project_id)
        parent_key = ids.encode_optional(dto.parent_id)
        section_key = ids.encode_optional(dto.section_id)

        if parent_key is not None:
            self._ensure_parent(parent_key, owner_key)

        workspace_key = self._project_workspace(project_key, owner_key)
        if dto.workspace_id and ids.encode(dto.workspace_id) != workspace_key:
            raise WorkspaceMismatch()

        task_key = ids.generate()
        status = dto.status or TaskStatus.NOT_STARTED
        now = utc_now()
        stamps = {}
        _stamp_status(stamps, status, now)

        task = Task(
            id=task_key,
            title=dto.title,
            description=dto.description,
            status=status,
            priority=dto.priority,
            due_date=to_naive_utc(dto.due_date),
            rrule=dto.rrule,
            workspace_id=workspace_key,
            project_id=project_key,
            owner_id=owner_key,
            section_id=section_key,
            parent_id=parent_key,
            created_at=now,
            updated_at=now,
            **stamps,
        )
        if dto.tags:
            task.tags = [
                Tag(id=ids.generate(), name=name, owner_id=owner_key) for name in dto.tags
            ]

        self.db.add(task)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_foreign_key_violation(exc):
                # project deleted between the lookup and the insert
                raise ProjectNotFound() from exc
            logger.exception("Creating task failed")
            raise TaskCreationFailed() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Creating task failed")
            raise TaskCreationFailed() from exc

        logger.info("Created task %s", ids.decode(task_key))
        return self._read(task_key)

    def fetch(self, params: TaskQueryParams, owner_id: str) -> PageResponse:
        query = build_task_query(params, ids.encode(owner_id))
        where = query.filter.to_sql()

        tasks = (
            self.db.query(Task)
            .options(*_AGGREGATE)
            .filter(where)
            .order_by(query.order_by())
            .offset(query.offset)
            .limit(query.page_size)
            .all()
        )
        count = self.db.query(Task).filter(where).count()

        return build_page(
            [TaskRead.model_validate(task) for task in tasks],
            page=query.page,
            page_size=query.page_size,
            count=count,
        )

    def find_one(self, id: str, owner_id: str) -> TaskRead:
        task = self._get_owned(ids.encode(id), ids.encode(owner_id))
        return TaskRead.model_validate(task)

    def update(self, id: str, owner_id: str, dto: TaskUpdate) -> TaskRead:
        """Apply a partial update in one conditional UPDATE on (id, owner).

        ``version`` goes up by one on every call. Entering IN_PROGRESS or
        COMPLETED always restamps startedAt / completedAt; reopening a task
        leaves completedAt as it was.
        """
        task_key = ids.encode(id)
        owner_key = ids.encode(owner_id)
        changes = dto.model_dump(exclude_unset=True)

        values = {}
        for field in ("title", "status"):
            if changes.get(field) is not None:
                values[field] = changes[field]
        for field in _NULLABLE_FIELDS:
            if field in changes:
                values[field] = changes[field]
        if "due_date" in changes:
            values["due_date"] = to_naive_utc(changes["due_date"])
        if "section_id" in changes:
            values["section_id"] = ids.encode_optional(changes["section_id"])
        if changes.get("project_id") is not None:
            project_key = ids.encode(changes["project_id"])
            values["project_id"] = project_key
            values["workspace_id"] = self._project_workspace(project_key, owner_key)
        if "parent_id" in changes:
            parent_key = ids.encode_optional(changes["parent_id"])
            if parent_key is not None:
                self._ensure_parent(parent_key, owner_key)
            values["parent_id"] = parent_key

        now = utc_now()
        _stamp_status(values, values.get("status"), now)
        values["updated_at"] = now
        values["version"] = Task.version + 1

        try:
            matched = self._scoped(task_key, owner_key).update(
                values, synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Updating task %s failed", id)
            raise TaskUpdateFailed() from exc

        if matched == 0:
            raise TaskNotFound()

        logger.info("Updated task %s", id)
        return self._read(task_key)

    def remove(self, id: str, owner_id: str) -> None:
        """Delete the task if the caller owns it.

        Subtasks are detached and tag links dropped by the schema's
        ON DELETE rules.
        """
        task_key = ids.encode(id)
        owner_key = ids.encode(owner_id)

        try:
            deleted = self._scoped(task_key, owner_key).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Deleting task %s failed", id)
            raise TaskDeletionFailed() from exc

        if deleted == 0:
            raise TaskNotFound()
        logger.info("Deleted task %s", id)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def add_tag(self, id: str, owner_id: str, dto: AddTag) -> TaskRead:
        task_key = ids.encode(id)
        owner_key = ids.encode(owner_id)
        task = self._get_owned(task_key, owner_key)
        task.tags.append(Tag(id=ids.generate(), name=dto.name, owner_id=owner_key))
        self._commit(TaskUpdateFailed, task_key)
        return self._read(task_key)

    def connect_tag(self, id: str, tag_id: str) -> TaskRead:
        """Attach an existing tag to a task.

        Unlike add_tag/remove_tag this is not scoped to the caller.
        """
        task_key = ids.encode(id)
        tag_key = ids.encode(tag_id)

        task = self.db.query(Task).options(selectinload(Task.tags)).filter(Task.id == task_key).first()
        if task is None:
            raise TaskNotFound()
        tag = self.db.get(Tag, tag_key)
        if tag is None:
            raise TagNotFound()

        if all(existing.id != tag_key for existing in task.tags):
            task.tags.append(tag)
            self._commit(TaskUpdateFailed, task_key)
        return self._read(task_key)

    def remove_tag(self, id: str, tag_id: str, owner_id: str) -> TaskRead:
        task_key = ids.encode(id)
        tag_key = ids.encode(tag_id)
        task = self._get_owned(task_key, ids.encode(owner_id))

        task.tags = [tag for tag in task.tags if tag.id != tag_key]
        self._commit(TaskUpdateFailed, task_key)
        return self._read(task_key)
