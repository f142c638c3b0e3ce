"""Data models for Backstage."""

from .schemas import (
    Contributor,
    ContributorRole,
    FileType,
    Message,
    Post,
    ProjectFile,
    ProjectStatus,
    StudioProject,
    Task,
    TaskPriority,
    TaskStatus,
    User,
    utcnow,
)

__all__ = [
    "Contributor",
    "ContributorRole",
    "FileType",
    "Message",
    "Post",
    "ProjectFile",
    "ProjectStatus",
    "StudioProject",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
    "utcnow",
]
