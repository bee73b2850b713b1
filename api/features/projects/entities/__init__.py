"""Project entities module."""
from .project import Project

__all__ = ["Project"]
