class TaskboardError(Exception):
    """Base class for errors that map onto an HTTP response.

    ``detail`` is always safe to show to the client.
    """

    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFoundError(TaskboardError):
    status_code = 404
    detail = "Not found"


class InvalidInputError(TaskboardError):
    status_code = 400
    detail = "Invalid input"


class UnprocessableError(TaskboardError):
    status_code = 422
    detail = "Request could not be processed"


class TaskNotFound(NotFoundError):
    detail = "Task not found"


class ProjectNotFound(NotFoundError):
    detail = "Project not found"


class WorkspaceNotFound(NotFoundError):
    detail = "Workspace not found"


class TagNotFound(NotFoundError):
    detail = "Tag not found"


class InvalidIdentifier(InvalidInputError):
    detail = "Invalid identifier. Must be a valid UUID."


class InvalidFilterValue(InvalidInputError):
    detail = "Invalid filter value"


class TaskCreationFailed(UnprocessableError):
    detail = "Task could not be created"


class TaskUpdateFailed(UnprocessableError):
    detail = "Task could not be updated"


class TaskDeletionFailed(UnprocessableError):
    detail = "Task could not be deleted"


class WorkspaceMismatch(InvalidInputError):
    detail = "workspaceId does not match the project's workspace"


class WorkspaceCreationFailed(UnprocessableError):
    detail = "Workspace could not be created"


class WorkspaceDeletionFailed(UnprocessableError):
    detail = "Workspace could not be deleted"


class ProjectCreationFailed(UnprocessableError):
    detail = "Project could not be created"
