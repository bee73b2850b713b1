"""DTOs for the Projects feature."""
from typing import Optional

from pydantic import Field

from api.shared.dtos import BaseDTO, TimestampedDTO


class CreateProjectRequest(BaseDTO):
    """Request to create a project."""

    name: Optional[str] = Field(default=None, description="Project name")


class UpdateProjectRequest(BaseDTO):
    """Partial project update; omitted fields stay unchanged."""

    name: Optional[str] = Field(default=None, description="New project name")


class ProjectDTO(TimestampedDTO):
    """Project DTO."""

    id: str = Field(description="Project identifier")
    name: str = Field(description="Project name")
