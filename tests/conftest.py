"""Shared fixtures for Backstage tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from backstage.config import BackstageConfig
from backstage.models import (
    Contributor,
    ContributorRole,
    Message,
    Post,
    ProjectStatus,
    StudioProject,
    Task,
    TaskStatus,
    User,
)
from backstage.snapshot import Snapshot
from backstage.studio import Studio

BASE_TIME = datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc)


def at(hours: int) -> datetime:
    """A timestamp ``hours`` after the fixture base time."""
    return BASE_TIME + timedelta(hours=hours)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config reads and writes out of the real home directory."""
    config_path = tmp_path / "config" / "config.json"
    monkeypatch.setattr(BackstageConfig, "get_config_path", classmethod(lambda cls: config_path))
    monkeypatch.delenv("BACKSTAGE_DATA", raising=False)
    return config_path


@pytest.fixture
def users() -> dict[str, User]:
    return {
        "u1": User(id="u1", name="Mina", following_ids=["u2", "u3"]),
        "u2": User(id="u2", name="Nova", following_ids=["u1"]),
        "u3": User(id="u3", name="Seo"),
        "u4": User(id="u4", name="Marco"),
        "u5": User(id="u5", name="Lumi"),
    }


def make_project(project_id: str, status: ProjectStatus = ProjectStatus.PLANNING, hours: int = 0, **kwargs) -> StudioProject:
    """Build a minimal project for ranking and stats tests."""
    kwargs.setdefault("title", project_id.title())
    return StudioProject(
        id=project_id,
        status=status,
        last_updated_at=at(hours),
        **kwargs,
    )


@pytest.fixture
def project_factory():
    """Factory fixture for minimal projects."""
    return make_project


@pytest.fixture
def project(users: dict[str, User]) -> StudioProject:
    """A mixing-stage project with tasks, contributors and chat."""
    return StudioProject(
        id="p1",
        title="Midnight City",
        genre="Synthwave",
        bpm=118,
        key="A minor",
        status=ProjectStatus.MIXING,
        progress=65,
        last_updated_at=at(5),
        tasks=[
            Task(id="t1", title="Comp vocals", status=TaskStatus.COMPLETED, assignee=users["u3"]),
            Task(id="t2", title="Balance drums"),
            Task(id="t3", title="Automate reverb", priority="high"),
        ],
        contributors=[
            Contributor(user=users["u1"], role=ContributorRole.PRODUCER),
            Contributor(user=users["u2"], role=ContributorRole.MIXING_ENGINEER),
        ],
        messages=[
            Message(id="m1", sender=users["u2"], text="Mix v2 is up", created_at=at(1)),
            Message(id="m2", sender=users["u1"], text="Sounds great", created_at=at(2)),
        ],
    )


@pytest.fixture
def posts(users: dict[str, User]) -> list[Post]:
    return [
        Post(id="P1", author=users["u1"], likes=10),
        Post(id="P2", author=users["u2"], likes=30),
        Post(id="P3", author=users["u3"], likes=30),
        Post(id="P4", author=users["u1"], likes=5),
    ]


@pytest.fixture
def snapshot(users: dict[str, User], project: StudioProject, posts: list[Post]) -> Snapshot:
    return Snapshot(
        users=users,
        projects=[
            project,
            make_project("p2", ProjectStatus.COMPLETED, hours=9),
            make_project("p3", ProjectStatus.RECORDING, hours=2),
        ],
        posts=posts,
    )


@pytest.fixture
def studio(snapshot: Snapshot) -> Studio:
    return Studio(snapshot, current_user_id="u1")
