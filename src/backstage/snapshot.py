"""Seed data loading.

A snapshot is the whole in-memory dataset the engine reads from: the user
directory, the Studio projects, and the Stage posts. It is loaded from a
YAML seed file in which every user reference is a user id:

```yaml
users:
  - id: user1
    name: "Mina"
    avatar_url: "https://example.com/a/user1.png"
    following_ids: [user2, user3]

projects:
  - id: proj1
    title: "Midnight City"
    genre: "Synthwave"
    bpm: 118
    key: "A minor"
    status: mixing
    progress: 65
    last_updated_at: 2025-11-21T09:30:00Z
    contributors:
      - user: user2
        role: Producer
    tasks:
      - id: task1
        title: "Vocal comping"
        priority: high
        assignee: user3
    files:
      - id: file1
        name: "lead_vox_v3.wav"
        type: audio
        uploaded_by: user3
    messages:
      - id: m1
        sender: user2
        text: "Mix v2 is up"

posts:
  - id: post1
    author: user2
    likes: 120
```
"""

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from backstage.errors import NotFound, SnapshotError
from backstage.models import Post, StudioProject, User

logger = logging.getLogger(__name__)


SAMPLE_DATA = "sample.yaml"


@dataclass
class Snapshot:
    """The in-memory dataset for one session."""

    users: dict[str, User] = field(default_factory=dict)
    projects: list[StudioProject] = field(default_factory=list)
    posts: list[Post] = field(default_factory=list)

    def get_user(self, user_id: str) -> User:
        """Get a user by id.

        Raises:
            NotFound: if the id is not in the directory
        """
        try:
            return self.users[user_id]
        except KeyError:
            raise NotFound(f"User '{user_id}' not found") from None


def _records(value: Any, where: str) -> list[dict]:
    """A list of mapping records, or SnapshotError."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"{where}: expected a list of records, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, dict):
            raise SnapshotError(f"{where}: expected a mapping, got {item!r}")
    return value


class _Resolver:
    """Turns user-id references in raw seed records into User objects."""

    def __init__(self, users: dict[str, User]) -> None:
        self.users = users

    def user(self, ref: Any, where: str) -> User:
        if isinstance(ref, User):
            return ref
        user_id = ref.get("id") if isinstance(ref, dict) else ref
        if not isinstance(user_id, str) or user_id not in self.users:
            raise SnapshotError(f"{where}: unknown user '{user_id}'")
        return self.users[user_id]

    def project(self, raw: dict) -> StudioProject:
        where = f"project {raw.get('id', '?')}"
        data = dict(raw)
        data["contributors"] = [
            {**c, "user": self.user(c.get("user"), f"{where} contributor")}
            for c in _records(raw.get("contributors"), f"{where} contributors")
        ]
        data["tasks"] = [
            {**t, "assignee": self.user(t["assignee"], f"{where} task {t.get('id')}") if t.get("assignee") else None}
            for t in _records(raw.get("tasks"), f"{where} tasks")
        ]
        data["files"] = [
            {**f, "uploaded_by": self.user(f.get("uploaded_by"), f"{where} file {f.get('id')}")}
            for f in _records(raw.get("files"), f"{where} files")
        ]
        data["messages"] = [
            {**m, "sender": self.user(m.get("sender"), f"{where} message {m.get('id')}")}
            for m in _records(raw.get("messages"), f"{where} messages")
        ]
        return StudioProject.model_validate(data)

    def post(self, raw: dict) -> Post:
        data = dict(raw)
        data["author"] = self.user(raw.get("author"), f"post {raw.get('id', '?')}")
        return Post.model_validate(data)


def build_snapshot(data: Optional[dict]) -> Snapshot:
    """Build a snapshot from a parsed seed document.

    Raises:
        SnapshotError: on invalid records, duplicate ids or unknown user references
    """
    data = data or {}
    if not isinstance(data, dict):
        raise SnapshotError("Seed data must be a mapping with users/projects/posts")

    try:
        users: dict[str, User] = {}
        for raw in _records(data.get("users"), "users"):
            user = User.model_validate(raw)
            if user.id in users:
                raise SnapshotError(f"duplicate user id '{user.id}'")
            users[user.id] = user

        resolver = _Resolver(users)
        projects = [resolver.project(raw) for raw in _records(data.get("projects"), "projects")]
        posts = [resolver.post(raw) for raw in _records(data.get("posts"), "posts")]
    except ValidationError as e:
        raise SnapshotError(f"Invalid seed data: {e}") from e

    seen: set[str] = set()
    for project in projects:
        if project.id in seen:
            raise SnapshotError(f"duplicate project id '{project.id}'")
        seen.add(project.id)

    return Snapshot(users=users, projects=projects, posts=posts)


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load a snapshot from a YAML seed file.

    Raises:
        SnapshotError: if the file is missing, unparsable or invalid
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read seed file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SnapshotError(f"Cannot parse seed file {path}: {e}") from e

    snapshot = build_snapshot(data)
    logger.info(
        "Loaded snapshot from %s: %d users, %d projects, %d posts",
        path, len(snapshot.users), len(snapshot.projects), len(snapshot.posts),
    )
    return snapshot


def sample_snapshot() -> Snapshot:
    """Load the sample dataset bundled with the package."""
    content = resources.files("backstage.data").joinpath(SAMPLE_DATA).read_text(encoding="utf-8")
    return build_snapshot(yaml.safe_load(content))
