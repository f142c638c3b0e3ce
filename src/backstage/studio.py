"""Studio facade: every engine operation bound to an injected snapshot.

Surfaces (CLI, API, TUI) hold a ``Studio`` instead of reaching for global
data, so tests can hand them any fixture.
"""

import logging
from typing import Optional, Sequence, Union

from backstage import aggregation, chat, pipeline, ranking
from backstage.errors import NotFound
from backstage.models import Message, Post, StudioProject, Task, User
from backstage.snapshot import Snapshot

logger = logging.getLogger(__name__)


DEFAULT_USER_ID = "user1"


def find_project(projects: Sequence[StudioProject], project_id: str) -> Optional[StudioProject]:
    """Get a project by id from a collection, or None."""
    for project in projects:
        if project.id == project_id:
            return project
    return None


def toggle_task(projects: Sequence[StudioProject], project_id: str, task_id: str) -> Optional[Task]:
    """Flip a task between pending and completed.

    Unknown project or task ids are a silent no-op and return None. Only the
    task's status changes; the project's progress and status stay as they
    are.
    """
    project = find_project(projects, project_id)
    if project is None:
        logger.debug("toggle_task: unknown project %s", project_id)
        return None
    task = project.toggle_task(task_id)
    if task is None:
        logger.debug("toggle_task: unknown task %s in project %s", task_id, project_id)
        return None
    logger.info("Task %s in project %s is now %s", task_id, project_id, task.status.value)
    return task


class Studio:
    """Read and append operations over one in-memory snapshot."""

    def __init__(self, snapshot: Snapshot, current_user_id: str = DEFAULT_USER_ID) -> None:
        self.snapshot = snapshot
        self.current_user_id = current_user_id

    @property
    def projects(self) -> list[StudioProject]:
        return self.snapshot.projects

    @property
    def posts(self) -> list[Post]:
        return self.snapshot.posts

    @property
    def current_user(self) -> User:
        return self.snapshot.get_user(self.current_user_id)

    def get_user(self, user_id: str) -> User:
        return self.snapshot.get_user(user_id)

    def get_project(self, project_id: str) -> StudioProject:
        """Get a project by id.

        Raises:
            NotFound: if no project has that id
        """
        project = find_project(self.projects, project_id)
        if project is None:
            raise NotFound(f"Project '{project_id}' not found")
        return project

    # Entity model

    def toggle_task(self, project_id: str, task_id: str) -> Optional[Task]:
        return toggle_task(self.projects, project_id, task_id)

    # Status pipeline

    def timeline(self, project_id: str) -> list[pipeline.TimelineEntry]:
        return pipeline.project_timeline(self.get_project(project_id))

    # Aggregation

    def stats(self) -> aggregation.ProjectStats:
        return aggregation.project_stats(self.projects)

    def status_breakdown(self):
        return aggregation.status_breakdown(self.projects)

    def summary(self, project_id: str, visible_limit: int = aggregation.DEFAULT_VISIBLE_LIMIT) -> aggregation.ProjectSummary:
        return aggregation.project_summary(self.get_project(project_id), visible_limit)

    # Ranking

    def recent_projects(self, limit: int = ranking.DEFAULT_RECENT_LIMIT) -> list[StudioProject]:
        return ranking.rank_recent_projects(self.projects, limit)

    def feed(self, tab: Union[ranking.FeedTab, str], user_id: Optional[str] = None) -> list[Post]:
        user = self.get_user(user_id) if user_id else self.current_user
        return ranking.filter_posts(self.posts, user, tab)

    def following_users(self, user_id: Optional[str] = None) -> list[User]:
        user = self.get_user(user_id) if user_id else self.current_user
        return ranking.following_users(user, self.snapshot.users)

    # Chat

    def append_message(self, project_id: str, text: str, sender_id: Optional[str] = None) -> Message:
        """Append a chat message as ``sender_id`` (default: the current user).

        Raises:
            NotFound: if the project or sender does not exist
        """
        project = self.get_project(project_id)
        sender = self.get_user(sender_id) if sender_id else self.current_user
        return chat.append_message(project, sender, text)
