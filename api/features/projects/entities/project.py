"""Project entity: a named grouping container for chats."""
from dataclasses import dataclass, replace

from api.shared.entities.base import BaseEntity


@dataclass(repr=False)
class Project(BaseEntity):
    name: str = ""

    def snapshot(self) -> "Project":
        return replace(self)
