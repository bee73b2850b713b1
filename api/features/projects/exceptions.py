"""Exceptions for the Projects feature."""
from api.shared.exceptions import NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, project_id: str):
        super().__init__("Project", project_id)
