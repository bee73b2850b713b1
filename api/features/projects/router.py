"""Router for the Projects feature."""
from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from api.features.projects.controller import ProjectController
from api.features.projects.dtos import (
    CreateProjectRequest,
    ProjectDTO,
    UpdateProjectRequest,
)
from di.container import ApplicationContainer

router = APIRouter()


@router.get("", response_model=List[ProjectDTO])
@inject
async def list_projects(
    controller: ProjectController = Depends(
        Provide[ApplicationContainer.controllers.project_controller]
    ),
):
    """All projects, sorted by name."""
    return await controller.list_projects()


@router.post("", response_model=ProjectDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_project(
    request: CreateProjectRequest,
    controller: ProjectController = Depends(
        Provide[ApplicationContainer.controllers.project_controller]
    ),
):
    return await controller.create_project(request)


@router.get("/{project_id}", response_model=Optional[ProjectDTO])
@inject
async def get_project(
    project_id: str,
    controller: ProjectController = Depends(
        Provide[ApplicationContainer.controllers.project_controller]
    ),
):
    """The project, or ``null`` when it does not exist."""
    return await controller.get_project(project_id)


@router.put("/{project_id}", response_model=ProjectDTO)
@inject
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    controller: ProjectController = Depends(
        Provide[ApplicationContainer.controllers.project_controller]
    ),
):
    return await controller.update_project(project_id, request)


@router.delete("/{project_id}", response_model=ProjectDTO)
@inject
async def delete_project(
    project_id: str,
    controller: ProjectController = Depends(
        Provide[ApplicationContainer.controllers.project_controller]
    ),
):
    """Delete a project; chats that reference it are left as they are."""
    return await controller.delete_project(project_id)
