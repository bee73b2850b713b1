"""In-memory project store.

One ``asyncio.Lock`` serializes every access to the collection. Callers get
snapshots, never the stored objects.
"""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from api.features.projects.entities import Project
from core.recency import utc_now

logger = structlog.get_logger("chat.projects")


class ProjectRepository:
    """Owns ``Project`` entities."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._projects: Dict[str, Project] = {}
        self._lock = asyncio.Lock()

    def _now(self) -> datetime:
        return self._clock()

    async def create_project(self, name: str) -> Project:
        now = self._now()
        project = Project(id=str(uuid.uuid4()), created_at=now, updated_at=now, name=name)
        async with self._lock:
            self._projects[project.id] = project
        logger.info("project_created", project_id=project.id)
        return project.snapshot()

    async def get_project_by_id(self, project_id: str) -> Optional[Project]:
        async with self._lock:
            project = self._projects.get(project_id)
            return project.snapshot() if project else None

    async def get_all_projects(self) -> List[Project]:
        """All projects sorted by name."""
        async with self._lock:
            projects = [p.snapshot() for p in self._projects.values()]
        return sorted(projects, key=lambda p: p.name)

    async def update_project(
        self, project_id: str, *, name: Optional[str] = None
    ) -> Optional[Project]:
        """Partial update; ``updated_at`` is refreshed even when nothing else changes."""
        async with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                return None
            if name is not None:
                project.name = name
            project.touch(self._now())
            return project.snapshot()

    async def delete_project(self, project_id: str) -> Optional[Project]:
        """Remove a project. Chats referencing it keep their ``project_id``."""
        async with self._lock:
            project = self._projects.pop(project_id, None)
        if project is None:
            return None
        logger.info("project_deleted", project_id=project_id)
        return project.snapshot()
