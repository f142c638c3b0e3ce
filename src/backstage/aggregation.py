"""Derived statistics over projects and their sub-entities.

Everything here is a single pass over the relevant collection, has no side
effects, and returns the same result when called again on the same data.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from backstage.errors import InvalidArgument
from backstage.models import Message, ProjectFile, ProjectStatus, StudioProject, Task
from backstage.pipeline import PIPELINE_ORDER


DEFAULT_VISIBLE_LIMIT = 3  # Avatars / overview rows shown before truncating


@dataclass(frozen=True)
class TaskCompletion:
    """Completed tasks out of all tasks."""

    completed: int
    total: int

    @property
    def ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total

    def __str__(self) -> str:
        return f"{self.completed}/{self.total}"


@dataclass(frozen=True)
class FileSummary:
    """File counts for a project."""

    total: int
    audio: int
    comments: int


@dataclass(frozen=True)
class ProjectStats:
    """Dashboard counters. ``total == in_progress + completed`` always holds."""

    total: int
    in_progress: int
    completed: int


@dataclass(frozen=True)
class ProjectSummary:
    """Everything a project card shows, computed in one place."""

    project_id: str
    title: str
    status: ProjectStatus
    progress: int
    tasks: TaskCompletion
    files: FileSummary
    messages: int
    contributors: int
    contributor_overflow: int


def task_completion(project: StudioProject) -> TaskCompletion:
    """Count completed tasks over all tasks."""
    completed = sum(1 for task in project.tasks if task.is_completed)
    return TaskCompletion(completed=completed, total=len(project.tasks))


def contributor_overflow(project: StudioProject, visible_limit: int = DEFAULT_VISIBLE_LIMIT) -> int:
    """Number of contributors hidden behind a "+N" badge.

    Never negative: a project with fewer contributors than the limit has no
    overflow.
    """
    if visible_limit < 0:
        raise InvalidArgument(f"visible_limit must be >= 0, got {visible_limit}")
    return max(0, len(project.contributors) - visible_limit)


def file_summary(project: StudioProject) -> FileSummary:
    """Count files, playable audio files and comments across files."""
    total = audio = comments = 0
    for f in project.files:
        total += 1
        if f.is_audio:
            audio += 1
        comments += f.comments
    return FileSummary(total=total, audio=audio, comments=comments)


def message_count(project: StudioProject) -> int:
    """Number of chat messages (the chat tab badge)."""
    return len(project.messages)


def project_stats(projects: Iterable[StudioProject]) -> ProjectStats:
    """Total / in-progress / completed counters for the dashboard."""
    total = completed = 0
    for project in projects:
        total += 1
        if project.is_completed:
            completed += 1
    return ProjectStats(total=total, in_progress=total - completed, completed=completed)


def status_breakdown(projects: Iterable[StudioProject]) -> dict[ProjectStatus, int]:
    """Project count per pipeline stage, zero-filled, in pipeline order."""
    counts = {status: 0 for status in PIPELINE_ORDER}
    for project in projects:
        counts[project.status] += 1
    return counts


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise InvalidArgument(f"limit must be >= 0, got {limit}")


def recent_files(project: StudioProject, limit: int = DEFAULT_VISIBLE_LIMIT) -> list[ProjectFile]:
    """First files in upload-list order, as the overview shows them."""
    _check_limit(limit)
    return list(project.files[:limit])


def open_tasks(project: StudioProject, limit: int = DEFAULT_VISIBLE_LIMIT) -> list[Task]:
    """First tasks that are not completed yet, in list order."""
    _check_limit(limit)
    result: list[Task] = []
    for task in project.tasks:
        if len(result) >= limit:
            break
        if not task.is_completed:
            result.append(task)
    return result


def recent_messages(project: StudioProject, limit: int = DEFAULT_VISIBLE_LIMIT) -> list[Message]:
    """Leading messages of the conversation for the activity panel."""
    _check_limit(limit)
    return list(project.messages[:limit])


def project_summary(project: StudioProject, visible_limit: int = DEFAULT_VISIBLE_LIMIT) -> ProjectSummary:
    """Bundle the card values for a project."""
    return ProjectSummary(
        project_id=project.id,
        title=project.title,
        status=project.status,
        progress=project.progress,
        tasks=task_completion(project),
        files=file_summary(project),
        messages=message_count(project),
        contributors=len(project.contributors),
        contributor_overflow=contributor_overflow(project, visible_limit),
    )


def summarize_all(projects: Sequence[StudioProject], visible_limit: int = DEFAULT_VISIBLE_LIMIT) -> list[ProjectSummary]:
    return [project_summary(p, visible_limit) for p in projects]
