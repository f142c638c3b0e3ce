"""Tests for Backstage data models."""

import pytest
from pydantic import ValidationError

from backstage.models import (
    Contributor,
    ContributorRole,
    FileType,
    ProjectFile,
    ProjectStatus,
    StudioProject,
    Task,
    TaskPriority,
    TaskStatus,
    User,
)


class TestEnums:
    """Tests for the closed enumerations."""

    def test_status_values(self) -> None:
        """Test that all pipeline stages are defined."""
        assert [s.value for s in ProjectStatus] == [
            "planning", "recording", "mixing", "mastering", "completed",
        ]

    def test_task_enums(self) -> None:
        """Test task status and priority values."""
        assert TaskStatus.PENDING == "pending"
        assert TaskStatus.COMPLETED == "completed"
        assert [p.value for p in TaskPriority] == ["low", "medium", "high"]


class TestStudioProject:
    """Tests for StudioProject model."""

    def test_project_defaults(self) -> None:
        """Test project has appropriate defaults."""
        project = StudioProject(id="p", title="Sketch")
        assert project.status == ProjectStatus.PLANNING
        assert project.progress == 0
        assert project.is_public is False
        assert project.tasks == []
        assert project.messages == []
        assert project.last_updated_at.tzinfo is not None

    def test_bpm_must_be_positive(self) -> None:
        """Test a zero BPM is rejected."""
        with pytest.raises(ValidationError):
            StudioProject(id="p", title="Sketch", bpm=0)

    @pytest.mark.parametrize("progress", [-1, 101])
    def test_progress_range(self, progress: int) -> None:
        """Test progress outside 0..100 is rejected."""
        with pytest.raises(ValidationError):
            StudioProject(id="p", title="Sketch", progress=progress)

    def test_status_and_progress_independent(self) -> None:
        """A completed project may still report partial progress."""
        project = StudioProject(id="p", title="Sketch", status="completed", progress=40)
        assert project.is_completed
        assert project.progress == 40

    def test_naive_timestamp_treated_as_utc(self) -> None:
        """Test naive timestamps are read as UTC."""
        project = StudioProject(id="p", title="Sketch", last_updated_at="2025-11-01T10:00:00")
        assert project.last_updated_at.utcoffset().total_seconds() == 0

    def test_duplicate_contributors_rejected(self) -> None:
        """Test the same user cannot contribute twice."""
        user = User(id="u1", name="Mina")
        with pytest.raises(ValidationError):
            StudioProject(
                id="p",
                title="Sketch",
                contributors=[
                    Contributor(user=user, role="Producer"),
                    Contributor(user=user, role="Vocalist"),
                ],
            )


class TestTaskToggle:
    """Tests for toggling tasks on a project."""

    def test_toggle_flips_status(self, project: StudioProject) -> None:
        """Test toggling a pending task completes it."""
        task = project.toggle_task("t2")
        assert task is not None
        assert task.status == TaskStatus.COMPLETED

    def test_toggle_twice_restores(self, project: StudioProject) -> None:
        """Test toggling twice restores the original status."""
        original = project.find_task("t1").status
        project.toggle_task("t1")
        assert project.find_task("t1").status != original
        project.toggle_task("t1")
        assert project.find_task("t1").status == original

    def test_toggle_unknown_task_is_noop(self, project: StudioProject) -> None:
        """Test toggling a missing task changes nothing."""
        before = [t.status for t in project.tasks]
        assert project.toggle_task("missing") is None
        assert [t.status for t in project.tasks] == before

    def test_toggle_leaves_other_fields(self, project: StudioProject) -> None:
        """Test toggling changes only the task status."""
        task = project.find_task("t3")
        snapshot = task.model_dump(exclude={"status"})
        project.toggle_task("t3")
        assert task.model_dump(exclude={"status"}) == snapshot
        assert project.progress == 65
        assert project.status == ProjectStatus.MIXING

    def test_task_defaults(self) -> None:
        """Test task defaults."""
        task = Task(id="t", title="Write hook")
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.assignee is None
        assert task.due_date is None


class TestCoercion:
    """Tests for closed-enum coercion of free-form labels."""

    def test_non_audio_file_is_other(self) -> None:
        """Test non-audio file types become other."""
        uploader = User(id="u1", name="Mina")
        f = ProjectFile(id="f", name="lyrics.pdf", type="document", uploaded_by=uploader)
        assert f.type == FileType.OTHER
        assert not f.is_audio

    def test_audio_file(self) -> None:
        """Test audio files are recognised."""
        uploader = User(id="u1", name="Mina")
        f = ProjectFile(id="f", name="mix.wav", type="audio", uploaded_by=uploader)
        assert f.is_audio

    def test_negative_comments_rejected(self) -> None:
        """Test negative comment counts are rejected."""
        uploader = User(id="u1", name="Mina")
        with pytest.raises(ValidationError):
            ProjectFile(id="f", name="mix.wav", uploaded_by=uploader, comments=-1)

    def test_unknown_role_is_other(self) -> None:
        """Test unknown roles become Other."""
        c = Contributor(user=User(id="u1", name="Mina"), role="Session Drummer")
        assert c.role == ContributorRole.OTHER

    def test_known_role(self) -> None:
        """Test known roles are kept."""
        c = Contributor(user=User(id="u1", name="Mina"), role="Mixing Engineer")
        assert c.role == ContributorRole.MIXING_ENGINEER
