"""Controller for the Projects feature."""
from typing import List, Optional

from api.features.projects.dtos import (
    CreateProjectRequest,
    ProjectDTO,
    UpdateProjectRequest,
)
from api.features.projects.exceptions import ProjectNotFoundError
from api.features.projects.repository import ProjectRepository
from api.shared.exceptions import ValidationError


class ProjectController:
    """Validates project requests and maps entities to DTOs."""

    def __init__(self, project_repository: ProjectRepository) -> None:
        self.project_repository = project_repository

    async def list_projects(self) -> List[ProjectDTO]:
        projects = await self.project_repository.get_all_projects()
        return [ProjectDTO.model_validate(p) for p in projects]

    async def get_project(self, project_id: str) -> Optional[ProjectDTO]:
        project = await self.project_repository.get_project_by_id(project_id)
        return ProjectDTO.model_validate(project) if project else None

    async def create_project(self, request: CreateProjectRequest) -> ProjectDTO:
        if request.name is None or not request.name.strip():
            raise ValidationError("Missing required field: name")
        project = await self.project_repository.create_project(request.name)
        return ProjectDTO.model_validate(project)

    async def update_project(
        self, project_id: str, request: UpdateProjectRequest
    ) -> ProjectDTO:
        if await self.project_repository.get_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)

        if request.name is None:
            raise ValidationError("At least one field must be provided for update")
        if not request.name.strip():
            raise ValidationError("Name cannot be empty", {"field": "name"})

        project = await self.project_repository.update_project(
            project_id, name=request.name
        )
        if project is None:
            # deleted between the existence check and the update
            raise ProjectNotFoundError(project_id)
        return ProjectDTO.model_validate(project)

    async def delete_project(self, project_id: str) -> ProjectDTO:
        project = await self.project_repository.delete_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return ProjectDTO.model_validate(project)
