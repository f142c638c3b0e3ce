"""SQLModel schemas for Studio projects and the Stage feed.

These are plain (non-table) models: the engine works on an in-memory
snapshot, so nothing here is bound to a database. Validation still runs on
construction, which is what keeps seed data honest.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so seed timestamps stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProjectStatus(str, Enum):
    """Production pipeline stages of a Studio project."""

    PLANNING = "planning"  # Concept, references, arrangement sketch
    RECORDING = "recording"  # Tracking parts
    MIXING = "mixing"  # Balancing and processing
    MASTERING = "mastering"  # Final loudness and polish
    COMPLETED = "completed"  # Released / done


class TaskStatus(str, Enum):
    """Completion state of a project task."""

    PENDING = "pending"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Priority of a project task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FileType(str, Enum):
    """Kind of an uploaded project file. Only audio files are playable."""

    AUDIO = "audio"
    OTHER = "other"


class ContributorRole(str, Enum):
    """Production role a contributor holds on a project."""

    PRODUCER = "Producer"
    COMPOSER = "Composer"
    VOCALIST = "Vocalist"
    MIXING_ENGINEER = "Mixing Engineer"
    MASTERING_ENGINEER = "Mastering Engineer"
    OTHER = "Other"  # Any role label outside the known set


class User(SQLModel):
    """A platform user. Referenced by projects and posts, never owned."""

    id: str
    name: str
    avatar_url: Optional[str] = None
    following_ids: list[str] = Field(default_factory=list)

    def follows(self, user_id: str) -> bool:
        return user_id in self.following_ids


class Task(SQLModel):
    """A to-do item owned by a project."""

    id: str
    title: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: Optional[User] = None
    due_date: Optional[date] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def toggle(self) -> TaskStatus:
        """Flip between pending and completed. Returns the new status."""
        self.status = TaskStatus.PENDING if self.is_completed else TaskStatus.COMPLETED
        return self.status


class ProjectFile(SQLModel):
    """A file uploaded to a project (stems, bounces, session exports...)."""

    id: str
    name: str
    type: FileType = FileType.OTHER
    uploaded_by: User
    uploaded_at: datetime = Field(default_factory=utcnow)
    version: str = "v1"
    comments: int = Field(default=0, ge=0)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, value):
        # Anything that is not audio is displayed as a generic file
        if isinstance(value, FileType):
            return value
        return FileType.AUDIO if str(value).lower() == "audio" else FileType.OTHER

    @property
    def is_audio(self) -> bool:
        return self.type == FileType.AUDIO


class Contributor(SQLModel):
    """A user working on a project, with their role."""

    user: User
    role: ContributorRole = ContributorRole.OTHER

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, value):
        if isinstance(value, ContributorRole):
            return value
        try:
            return ContributorRole(value)
        except ValueError:
            return ContributorRole.OTHER


class Message(SQLModel):
    """A chat message in a project's conversation."""

    id: str
    sender: User
    text: str
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)


class Post(SQLModel):
    """A short-form post shown on the Stage feed."""

    id: str
    author: User
    likes: int = Field(default=0, ge=0)
    caption: Optional[str] = None
    project_id: Optional[str] = None  # Studio project the post links to


class StudioProject(SQLModel):
    """A collaborative music production project.

    ``status`` and ``progress`` are stored independently; neither is derived
    from the other, and toggling tasks touches neither.
    """

    id: str
    title: str
    description: Optional[str] = None
    genre: Optional[str] = None
    bpm: int = Field(default=120, gt=0)
    key: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)
    is_public: bool = False
    cover_image: Optional[str] = None
    last_updated_at: datetime = Field(default_factory=utcnow)

    tasks: list[Task] = Field(default_factory=list)
    files: list[ProjectFile] = Field(default_factory=list)
    contributors: list[Contributor] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)

    # Scheduled date per timeline milestone ("plan", "record", ...)
    milestone_dates: dict[str, date] = Field(default_factory=dict)

    @field_validator("last_updated_at")
    @classmethod
    def normalize_last_updated_at(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("contributors")
    @classmethod
    def unique_contributors(cls, value: list[Contributor]) -> list[Contributor]:
        seen: set[str] = set()
        for contributor in value:
            if contributor.user.id in seen:
                raise ValueError(f"duplicate contributor: {contributor.user.id}")
            seen.add(contributor.user.id)
        return value

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.COMPLETED

    def find_task(self, task_id: str) -> Optional[Task]:
        """Get a task by id, or None."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def toggle_task(self, task_id: str) -> Optional[Task]:
        """Toggle a task's status in place.

        Returns the toggled task, or None if the id is unknown (nothing is
        changed in that case).
        """
        task = self.find_task(task_id)
        if task is None:
            return None
        task.toggle()
        return task
