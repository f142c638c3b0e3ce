"""Click CLI for Backstage."""

import logging
from dataclasses import asdict
from typing import Optional

import click
from trogon import tui

from backstage import __version__
from backstage.aggregation import (
    contributor_overflow,
    file_summary,
    open_tasks,
    recent_files,
    summarize_all,
    task_completion,
)
from backstage.config import FEED_TAB_OPTIONS, BackstageConfig
from backstage.display import file_kind, priority_badge, role_badge
from backstage.errors import BackstageError
from backstage.pipeline import MilestoneState, next_status, status_display
from backstage.ranking import empty_state
from backstage.snapshot import load_snapshot, sample_snapshot
from backstage.studio import Studio

logger = logging.getLogger(__name__)


MILESTONE_MARKERS = {
    MilestoneState.COMPLETED: "●",
    MilestoneState.CURRENT: "◉",
    MilestoneState.PENDING: "○",
}


class AppContext:
    """Per-invocation state: config plus a lazily loaded studio."""

    def __init__(self, config: BackstageConfig, data_path: Optional[str], user_id: str) -> None:
        self.config = config
        self.data_path = data_path
        self.user_id = user_id
        self._studio: Optional[Studio] = None

    @property
    def studio(self) -> Studio:
        if self._studio is None:
            try:
                snapshot = load_snapshot(self.data_path) if self.data_path else sample_snapshot()
            except BackstageError as e:
                fail(str(e))
            self._studio = Studio(snapshot, current_user_id=self.user_id)
        return self._studio


pass_app = click.make_pass_decorator(AppContext)


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _get_project(app: AppContext, project_id: str):
    try:
        return app.studio.get_project(project_id)
    except BackstageError as e:
        fail(str(e))


@tui()
@click.group()
@click.version_option(version=__version__, prog_name="backstage")
@click.option("--data", "data_path", envvar="BACKSTAGE_DATA", help="Seed dataset (YAML). Defaults to bundled sample data.")
@click.option("--user", "user_id", help="Act as this user id")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, data_path: Optional[str], user_id: Optional[str], verbose: bool) -> None:
    """Backstage - Studio project workflow and feed tool.

    Track music production projects and browse the Stage feed.
    Changes made by commands (task toggles, chat messages) live for the
    current session only.

    Quick start:
        backstage stats              Dashboard counters
        backstage projects list      Recent projects first
        backstage feed -t trending   Most liked posts
        backstage dashboard          Interactive TUI dashboard
    """
    config = BackstageConfig.load()
    configure_logging(config.log_level, verbose)
    ctx.obj = AppContext(
        config=config,
        data_path=data_path or config.data_path,
        user_id=user_id or config.current_user_id,
    )


@cli.command()
@pass_app
def stats(app: AppContext) -> None:
    """Show project counters and the per-stage breakdown."""
    totals = app.studio.stats()
    click.echo("\n📊 BackStage")
    click.echo("=" * 50)
    click.echo(f"  Total projects: {totals.total}")
    click.echo(f"  In progress:    {totals.in_progress}")
    click.echo(f"  Completed:      {totals.completed}")
    click.echo("\n  By stage:")
    for status, count in app.studio.status_breakdown().items():
        click.echo(f"    {status_display(status).label} ({status.value}): {count}")
    click.echo()


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host: str, port: int, reload: bool) -> None:
    """Start the Backstage API server."""
    import uvicorn

    click.echo(f"Starting Backstage API server at http://{host}:{port}")
    click.echo("Press Ctrl+C to stop")
    uvicorn.run(
        "backstage.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@cli.command()
@pass_app
def dashboard(app: AppContext) -> None:
    """Launch the interactive TUI dashboard.

    Keyboard shortcuts:
        q - Quit
        r - Refresh
        1 - For you feed
        2 - Following feed
        3 - Trending feed
        t - Toggle highlighted task
    """
    from backstage.tui import BackstageApp
    BackstageApp(app.studio, config=app.config).run()


# =============================================================================
# Projects Commands
# =============================================================================


@cli.group()
def projects() -> None:
    """Browse Studio projects."""
    pass


@projects.command("list")
@click.option("--recent", "-r", type=int, default=None, help="Show only the N most relevant projects (default: recent_limit setting)")
@click.option("--all", "-a", "show_all", is_flag=True, help="Show every project")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information")
@pass_app
def projects_list(app: AppContext, recent: Optional[int], show_all: bool, verbose: bool) -> None:
    """List projects, unfinished and most recently updated first."""
    studio = app.studio
    if show_all:
        limit = len(studio.projects)
    else:
        limit = app.config.recent_limit if recent is None else recent
    try:
        ranked = studio.recent_projects(limit)
    except BackstageError as e:
        fail(str(e))

    if not ranked:
        click.echo("No projects.")
        return

    click.echo("\n🎛  Projects:")
    click.echo("=" * 50)
    for summary, project in zip(summarize_all(ranked, app.config.avatar_limit), ranked):
        display = status_display(project.status)
        overflow = f" +{summary.contributor_overflow}" if summary.contributor_overflow else ""
        click.echo(f"\n  {project.title} [{display.label}] {project.progress}%")
        click.echo(f"    id: {project.id} · tasks {summary.tasks} · 👥 {summary.contributors}{overflow}")
        if verbose:
            if project.description:
                click.echo(f"    {project.description}")
            click.echo(f"    {project.genre or '-'} · {project.bpm} BPM · Key: {project.key or '-'}")
            click.echo(f"    Updated: {project.last_updated_at.strftime('%Y-%m-%d %H:%M')}")
    click.echo(f"\nTotal: {len(ranked)} projects")


@projects.command("show")
@click.argument("project_id")
@pass_app
def projects_show(app: AppContext, project_id: str) -> None:
    """Show detailed information about a project.

    PROJECT_ID: Id of the project to inspect
    """
    project = _get_project(app, project_id)
    display = status_display(project.status)
    tasks = task_completion(project)
    files = file_summary(project)

    click.echo(f"\n{'=' * 50}")
    click.echo(f"  {project.title}")
    click.echo(f"{'=' * 50}")
    if project.description:
        click.echo(f"\n{project.description}")

    click.echo("\n📋 Details:")
    click.echo(f"  Status: {display.label} ({project.status.value})")
    upcoming = next_status(project.status)
    if upcoming:
        click.echo(f"  Next stage: {status_display(upcoming).label}")
    click.echo(f"  Progress: {project.progress}%")
    click.echo(f"  Visibility: {'public' if project.is_public else 'private'}")
    click.echo(f"  {project.genre or '-'} · {project.bpm} BPM · Key: {project.key or '-'}")
    click.echo(f"  Updated: {project.last_updated_at.strftime('%Y-%m-%d %H:%M')}")

    click.echo(f"\n✅ Tasks: {tasks} completed")
    for task in open_tasks(project):
        click.echo(f"  ☐ {task.title} [{priority_badge(task.priority).label}]")

    click.echo(f"\n📁 Files: {files.total} ({files.audio} audio, {files.comments} comments)")
    for f in recent_files(project):
        click.echo(f"  {file_kind(f.type).icon} {f.name} {f.version} · {f.uploaded_by.name}")

    overflow = contributor_overflow(project, app.config.avatar_limit)
    click.echo(f"\n👥 Team: {len(project.contributors)}" + (f" (+{overflow} hidden in cards)" if overflow else ""))
    for c in project.contributors:
        click.echo(f"  {c.user.name} - {role_badge(c.role).label}")

    click.echo(f"\n💬 Messages: {len(project.messages)}")
    click.echo()


@projects.command("timeline")
@click.argument("project_id")
@pass_app
def projects_timeline(app: AppContext, project_id: str) -> None:
    """Show a project's release timeline.

    PROJECT_ID: Id of the project
    """
    _get_project(app, project_id)
    click.echo()
    for entry in app.studio.timeline(project_id):
        when = entry.scheduled.isoformat() if entry.scheduled else ""
        click.echo(f"  {MILESTONE_MARKERS[entry.state]} {entry.title:<10} {entry.state.value:<10} {when}".rstrip())
    click.echo()


# =============================================================================
# Tasks Commands
# =============================================================================


@cli.group()
def tasks() -> None:
    """List and toggle project tasks."""
    pass


@tasks.command("list")
@click.argument("project_id")
@pass_app
def tasks_list(app: AppContext, project_id: str) -> None:
    """List all tasks of a project."""
    project = _get_project(app, project_id)
    if not project.tasks:
        click.echo("No tasks.")
        return
    for task in project.tasks:
        box = "☑" if task.is_completed else "☐"
        extras = [priority_badge(task.priority).label]
        if task.assignee:
            extras.append(task.assignee.name)
        if task.due_date:
            extras.append(task.due_date.isoformat())
        click.echo(f"  {box} {task.id}  {task.title} [{' · '.join(extras)}]")
    click.echo(f"\n{task_completion(project)} completed")


@tasks.command("toggle")
@click.argument("project_id")
@click.argument("task_id")
@pass_app
def tasks_toggle(app: AppContext, project_id: str, task_id: str) -> None:
    """Toggle a task between pending and completed.

    Unknown ids change nothing.
    """
    task = app.studio.toggle_task(project_id, task_id)
    if task is None:
        click.echo(f"No task '{task_id}' in project '{project_id}'; nothing changed.")
        return
    click.echo(f"✓ {task.title}: {task.status.value}")


# =============================================================================
# Chat Commands
# =============================================================================


@cli.group()
def chat() -> None:
    """Read and post project chat messages."""
    pass


@chat.command("show")
@click.argument("project_id")
@pass_app
def chat_show(app: AppContext, project_id: str) -> None:
    """Show a project's conversation."""
    project = _get_project(app, project_id)
    if not project.messages:
        click.echo("No messages yet.")
        return
    for message in project.messages:
        click.echo(f"  [{message.created_at.strftime('%Y-%m-%d %H:%M')}] {message.sender.name}: {message.text}")


@chat.command("send")
@click.argument("project_id")
@click.argument("text")
@click.option("--as", "sender_id", help="Sender user id (default: current user)")
@pass_app
def chat_send(app: AppContext, project_id: str, text: str, sender_id: Optional[str]) -> None:
    """Append a message to a project's conversation."""
    try:
        message = app.studio.append_message(project_id, text, sender_id=sender_id)
    except BackstageError as e:
        fail(str(e))
    click.echo(f"✓ {message.id} from {message.sender.name} ({len(app.studio.get_project(project_id).messages)} messages)")


# =============================================================================
# Feed Command
# =============================================================================


@cli.command()
@click.option("--tab", "-t", default=None, help=f"Feed tab: {', '.join(FEED_TAB_OPTIONS)}")
@click.option("--limit", "-l", type=click.IntRange(min=0), default=0, help="Max posts to show (0 = all)")
@pass_app
def feed(app: AppContext, tab: Optional[str], limit: int) -> None:
    """Show the Stage feed for the current user."""
    tab = tab or app.config.default_tab
    try:
        posts = app.studio.feed(tab)
    except BackstageError as e:
        fail(str(e))

    if not posts:
        state = empty_state(tab)
        click.echo(f"\n🎵 {state.title}")
        click.echo(f"   {state.message}\n")
        return

    if limit:
        posts = posts[:limit]
    for post in posts:
        caption = f" - {post.caption}" if post.caption else ""
        click.echo(f"  ❤ {post.likes:>6,}  {post.author.name}{caption}")


# =============================================================================
# Config Commands
# =============================================================================


@cli.group()
def config() -> None:
    """View and change persistent settings."""
    pass


@config.command("show")
@pass_app
def config_show(app: AppContext) -> None:
    """Show current settings."""
    click.echo(f"Config file: {BackstageConfig.get_config_path()}")
    for key, value in asdict(app.config).items():
        click.echo(f"  {key}: {value}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@pass_app
def config_set(app: AppContext, key: str, value: str) -> None:
    """Set a setting. KEY is a field name shown by `config show`."""
    try:
        app.config.set_value(key, value)
    except KeyError:
        fail(f"Unknown setting '{key}'")
    except ValueError as e:
        fail(str(e))
    app.config.save()
    click.echo(f"✓ {key} = {getattr(app.config, key)}")


@config.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@pass_app
def config_reset(app: AppContext, yes: bool) -> None:
    """Reset all settings to defaults."""
    if not yes:
        click.confirm("Reset all settings to defaults?", abort=True)
    app.config.reset()
    app.config.save()
    click.echo(click.style("✓ Settings reset", fg="green"))


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
