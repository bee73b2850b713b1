"""Shared base entity for all in-memory records."""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class BaseEntity:
    """Identity plus timestamps; ids are generated by the owning store."""

    id: str
    created_at: datetime
    updated_at: datetime

    def touch(self, now: datetime) -> None:
        """Refresh ``updated_at`` after a mutation."""
        self.updated_at = now

    def __repr__(self) -> str:
        """String representation of the entity."""
        return f"<{self.__class__.__name__}(id={self.id})>"
