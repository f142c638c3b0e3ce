"""Status pipeline for Studio projects.

The engine never moves a project between stages; status is assigned from
outside. This module interprets it:

- ``STATUS_DISPLAY`` is the one table every surface reads labels and colors
  from.
- ``timeline`` projects a status onto the five release milestones.

Pipeline order: planning -> recording -> mixing -> mastering -> completed.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Mapping, Optional

from backstage.models import ProjectStatus, StudioProject


PIPELINE_ORDER: list[ProjectStatus] = [
    ProjectStatus.PLANNING,
    ProjectStatus.RECORDING,
    ProjectStatus.MIXING,
    ProjectStatus.MASTERING,
    ProjectStatus.COMPLETED,
]


@dataclass(frozen=True)
class StatusDisplay:
    """Display metadata for a pipeline stage."""

    label: str
    color: str  # Primary color token (badges, progress bars)
    light_bg: str  # Light background token (mini cards)
    text_color: str


STATUS_DISPLAY: dict[ProjectStatus, StatusDisplay] = {
    ProjectStatus.PLANNING: StatusDisplay("기획", "blue-500", "blue-100", "blue-700"),
    ProjectStatus.RECORDING: StatusDisplay("녹음", "red-500", "red-100", "red-700"),
    ProjectStatus.MIXING: StatusDisplay("믹싱", "yellow-500", "yellow-100", "yellow-700"),
    ProjectStatus.MASTERING: StatusDisplay("마스터링", "purple-500", "purple-100", "purple-700"),
    ProjectStatus.COMPLETED: StatusDisplay("완료", "green-500", "green-100", "green-700"),
}


def status_display(status: ProjectStatus) -> StatusDisplay:
    """Get the display metadata for a status."""
    return STATUS_DISPLAY[ProjectStatus(status)]


def stage_index(status: ProjectStatus) -> int:
    """Position of a status in the pipeline (planning is 0)."""
    return PIPELINE_ORDER.index(ProjectStatus(status))


def next_status(status: ProjectStatus) -> Optional[ProjectStatus]:
    """The stage after ``status``, or None once completed."""
    idx = stage_index(status)
    if idx < len(PIPELINE_ORDER) - 1:
        return PIPELINE_ORDER[idx + 1]
    return None


class Milestone(str, Enum):
    """Milestones shown on a project's timeline."""

    PLAN = "plan"
    RECORD = "record"
    MIX = "mix"
    MASTER = "master"
    RELEASE = "release"


class MilestoneState(str, Enum):
    """Marker for a milestone relative to the project's status."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


MILESTONE_ORDER: list[Milestone] = [
    Milestone.PLAN,
    Milestone.RECORD,
    Milestone.MIX,
    Milestone.MASTER,
    Milestone.RELEASE,
]

# Stage each milestone belongs to. Release is reached only by completion.
MILESTONE_STAGES: dict[Milestone, ProjectStatus] = {
    Milestone.PLAN: ProjectStatus.PLANNING,
    Milestone.RECORD: ProjectStatus.RECORDING,
    Milestone.MIX: ProjectStatus.MIXING,
    Milestone.MASTER: ProjectStatus.MASTERING,
    Milestone.RELEASE: ProjectStatus.COMPLETED,
}

MILESTONE_TITLES: dict[Milestone, str] = {
    Milestone.PLAN: "기획 완료",
    Milestone.RECORD: "녹음 진행",
    Milestone.MIX: "믹싱",
    Milestone.MASTER: "마스터링",
    Milestone.RELEASE: "발매",
}


@dataclass(frozen=True)
class TimelineEntry:
    """One row of a project timeline."""

    milestone: Milestone
    title: str
    state: MilestoneState
    scheduled: Optional[date] = None

    @property
    def is_completed(self) -> bool:
        return self.state == MilestoneState.COMPLETED

    @property
    def is_current(self) -> bool:
        return self.state == MilestoneState.CURRENT


def milestone_state(milestone: Milestone, status: ProjectStatus) -> MilestoneState:
    """Marker for a single milestone given the project's current status."""
    status = ProjectStatus(status)
    if milestone == Milestone.RELEASE:
        # Release has no "current" state
        if status == ProjectStatus.COMPLETED:
            return MilestoneState.COMPLETED
        return MilestoneState.PENDING

    stage = MILESTONE_STAGES[milestone]
    if stage_index(stage) < stage_index(status):
        return MilestoneState.COMPLETED
    if stage == status:
        return MilestoneState.CURRENT
    return MilestoneState.PENDING


def timeline(
    status: ProjectStatus,
    dates: Optional[Mapping[str, date]] = None,
) -> list[TimelineEntry]:
    """Project a status onto the milestone timeline.

    Args:
        status: The project's current status
        dates: Optional scheduled date per milestone value ("plan", "mix", ...)

    Returns:
        One entry per milestone, in release order
    """
    dates = dates or {}
    return [
        TimelineEntry(
            milestone=milestone,
            title=MILESTONE_TITLES[milestone],
            state=milestone_state(milestone, status),
            scheduled=dates.get(milestone.value),
        )
        for milestone in MILESTONE_ORDER
    ]


def project_timeline(project: StudioProject) -> list[TimelineEntry]:
    """Timeline for a project, including its scheduled milestone dates."""
    return timeline(project.status, project.milestone_dates)
