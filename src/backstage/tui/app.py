"""BackStage TUI dashboard."""

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Label,
    Static,
    TabbedContent,
    TabPane,
)

from backstage.aggregation import (
    contributor_overflow,
    file_summary,
    open_tasks,
    project_stats,
    recent_messages,
    task_completion,
)
from backstage.config import BackstageConfig
from backstage.display import priority_badge, role_badge
from backstage.models import StudioProject
from backstage.pipeline import MilestoneState, project_timeline, status_display
from backstage.ranking import FeedTab, empty_state, parse_tab
from backstage.studio import Studio


TIMELINE_MARKERS = {
    MilestoneState.COMPLETED: "[green]●[/]",
    MilestoneState.CURRENT: "[magenta]◉[/]",
    MilestoneState.PENDING: "[dim]○[/]",
}


def render_overview(project: StudioProject, avatar_limit: int) -> str:
    """Rich markup for the project overview pane."""
    display = status_display(project.status)
    tasks = task_completion(project)
    files = file_summary(project)
    overflow = contributor_overflow(project, avatar_limit)

    lines = [
        f"[b]{project.title}[/b]  ({display.label})  {project.progress}%",
    ]
    if project.description:
        lines.append(project.description)
    lines.append(f"{project.genre or '-'} · {project.bpm} BPM · Key: {project.key or '-'}")
    lines.append("")

    team = ", ".join(c.user.name for c in project.contributors[:avatar_limit])
    if overflow:
        team += f" +{overflow}"
    lines.append(f"👥 {team or '-'}")
    lines.append(f"✅ Tasks {tasks} completed")
    for task in open_tasks(project):
        lines.append(f"   ☐ {task.title} ({priority_badge(task.priority).label})")
    lines.append(f"📁 Files {files.total} ({files.audio} audio, {files.comments} comments)")
    lines.append(f"💬 Messages {len(project.messages)}")
    for message in recent_messages(project):
        lines.append(f"   {message.sender.name}: {message.text}")
    return "\n".join(lines)


def render_timeline(project: StudioProject) -> str:
    lines = []
    for entry in project_timeline(project):
        when = f"  [dim]{entry.scheduled.isoformat()}[/]" if entry.scheduled else ""
        lines.append(f"{TIMELINE_MARKERS[entry.state]} {entry.title}{when}")
    return "\n".join(lines)


class StatsWidget(Static):
    """Dashboard counters: total / in progress / completed."""

    def refresh_stats(self, studio: Studio) -> None:
        stats = project_stats(studio.projects)
        self.update(
            f"📊 전체 프로젝트 {stats.total} | "
            f"진행 중 {stats.in_progress} | "
            f"완료 {stats.completed}"
        )


class BackstageApp(App):
    """BackStage dashboard: projects, tasks, timeline and the Stage feed."""

    TITLE = "BackStage"
    SUB_TITLE = "음악 제작 공간"

    CSS = """
    Screen {
        layout: vertical;
    }

    #stats-bar {
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }

    #main-layout {
        height: 1fr;
    }

    #sidebar {
        width: 40%;
        min-width: 30;
        border-right: solid $primary;
    }

    #main-content {
        width: 1fr;
        padding: 0 1;
    }

    #feed-empty {
        padding: 1 2;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        Binding("t", "toggle_task", "Toggle Task", show=True),
        Binding("1", "feed_tab('for_you')", "For You", show=True),
        Binding("2", "feed_tab('following')", "Following", show=True),
        Binding("3", "feed_tab('trending')", "Trending", show=True),
    ]

    selected_project_id: reactive[Optional[str]] = reactive(None)
    feed_tab: reactive[FeedTab] = reactive(FeedTab.FOR_YOU)

    def __init__(self, studio: Studio, config: Optional[BackstageConfig] = None) -> None:
        super().__init__()
        self.studio = studio
        self._config = config or BackstageConfig.load()
        self.theme = self._config.theme
        self.set_reactive(BackstageApp.feed_tab, parse_tab(self._config.default_tab))
        self._project_ids: list[str] = []
        self._task_ids: list[str] = []
        self._mounted_once = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield StatsWidget(id="stats-bar")
        with Horizontal(id="main-layout"):
            with Vertical(id="sidebar"):
                yield Label("최근 프로젝트")
                yield DataTable(id="projects-table", cursor_type="row")
            with Vertical(id="main-content"):
                with TabbedContent(id="project-tabs"):
                    with TabPane("Overview", id="tab-overview"):
                        yield VerticalScroll(Static("", id="overview", markup=True))
                    with TabPane("Tasks", id="tab-tasks"):
                        yield DataTable(id="tasks-table", cursor_type="row")
                    with TabPane("Team", id="tab-team"):
                        yield DataTable(id="team-table", cursor_type="row")
                    with TabPane("Timeline", id="tab-timeline"):
                        yield Static("", id="timeline", markup=True)
                    with TabPane("Stage", id="tab-feed"):
                        yield Label("", id="feed-title")
                        yield DataTable(id="feed-table", cursor_type="row")
                        yield Static("", id="feed-empty")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#projects-table", DataTable).add_columns("Project", "Status", "%", "Tasks")
        self.query_one("#tasks-table", DataTable).add_columns("", "Task", "Priority", "Assignee", "Due")
        self.query_one("#team-table", DataTable).add_columns("Member", "Role")
        self.query_one("#feed-table", DataTable).add_columns("Likes", "Author", "Caption")
        self.action_refresh()
        self._mounted_once = True

    # Refresh

    def action_refresh(self) -> None:
        self.query_one(StatsWidget).refresh_stats(self.studio)
        self.refresh_projects()
        self.refresh_project_detail()
        self.refresh_feed()

    def refresh_projects(self) -> None:
        table = self.query_one("#projects-table", DataTable)
        table.clear()
        ranked = self.studio.recent_projects(self._config.recent_limit)
        self._project_ids = [p.id for p in ranked]
        for project in ranked:
            table.add_row(
                project.title,
                status_display(project.status).label,
                str(project.progress),
                str(task_completion(project)),
                key=project.id,
            )
        if self.selected_project_id not in self._project_ids:
            self.selected_project_id = self._project_ids[0] if self._project_ids else None
        if self.selected_project_id is not None:
            table.move_cursor(row=self._project_ids.index(self.selected_project_id))

    def refresh_project_detail(self) -> None:
        overview = self.query_one("#overview", Static)
        timeline = self.query_one("#timeline", Static)
        tasks_table = self.query_one("#tasks-table", DataTable)
        team_table = self.query_one("#team-table", DataTable)
        tasks_table.clear()
        team_table.clear()
        self._task_ids = []

        if self.selected_project_id is None:
            overview.update("Select a project")
            timeline.update("")
            return

        project = self.studio.get_project(self.selected_project_id)
        overview.update(render_overview(project, self._config.avatar_limit))
        timeline.update(render_timeline(project))
        for task in project.tasks:
            self._task_ids.append(task.id)
            tasks_table.add_row(
                "☑" if task.is_completed else "☐",
                task.title,
                priority_badge(task.priority).label,
                task.assignee.name if task.assignee else "",
                task.due_date.isoformat() if task.due_date else "",
                key=task.id,
            )
        for contributor in project.contributors:
            team_table.add_row(contributor.user.name, role_badge(contributor.role).label)

    def refresh_feed(self) -> None:
        table = self.query_one("#feed-table", DataTable)
        empty = self.query_one("#feed-empty", Static)
        self.query_one("#feed-title", Label).update(f"Stage · {self.feed_tab.value}")
        table.clear()
        posts = self.studio.feed(self.feed_tab)
        for post in posts:
            table.add_row(f"{post.likes:,}", post.author.name, post.caption or "", key=post.id)
        if posts:
            empty.update("")
        else:
            state = empty_state(self.feed_tab)
            empty.update(f"🎵 {state.title}\n{state.message}")

    # Watchers

    def watch_selected_project_id(self, project_id: Optional[str]) -> None:
        if self._mounted_once:
            self.refresh_project_detail()

    def watch_feed_tab(self, tab: FeedTab) -> None:
        if self._mounted_once:
            self.refresh_feed()

    # Events and actions

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.data_table.id == "projects-table" and event.row_key.value:
            self.selected_project_id = event.row_key.value

    def action_feed_tab(self, tab: str) -> None:
        self.feed_tab = parse_tab(tab)
        self.query_one("#project-tabs", TabbedContent).active = "tab-feed"

    def action_toggle_task(self) -> None:
        """Toggle the highlighted task of the selected project."""
        if self.selected_project_id is None or not self._task_ids:
            return
        table = self.query_one("#tasks-table", DataTable)
        row = min(table.cursor_row, len(self._task_ids) - 1)
        task = self.studio.toggle_task(self.selected_project_id, self._task_ids[row])
        if task is None:
            return
        self.refresh_project_detail()
        self.refresh_projects()
        table.move_cursor(row=row)
        self.notify(f"{task.title}: {task.status.value}")
