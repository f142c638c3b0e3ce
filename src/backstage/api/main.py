"""FastAPI application for the Backstage engine."""

import logging
import os
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from backstage import __version__
from backstage.aggregation import DEFAULT_VISIBLE_LIMIT
from backstage.errors import InvalidArgument, NotFound
from backstage.models import Message, Post, StudioProject
from backstage.pipeline import status_display
from backstage.ranking import DEFAULT_RECENT_LIMIT, empty_state, parse_tab
from backstage.snapshot import load_snapshot, sample_snapshot
from backstage.studio import Studio

logger = logging.getLogger(__name__)


# Snapshot setup: BACKSTAGE_DATA points at a seed file, else bundled sample data
DATA_PATH = os.environ.get("BACKSTAGE_DATA")
_studio: Optional[Studio] = None


def get_studio() -> Studio:
    """Get the studio for this process, loading the snapshot on first use."""
    global _studio
    if _studio is None:
        snapshot = load_snapshot(DATA_PATH) if DATA_PATH else sample_snapshot()
        _studio = Studio(snapshot)
    return _studio


def _project_or_404(studio: Studio, project_id: str) -> StudioProject:
    try:
        return studio.get_project(project_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Project not found")


app = FastAPI(
    title="Backstage API",
    description="Studio project workflow and Stage feed API",
    version=__version__,
)


class MessageCreate(BaseModel):
    """Request body for posting a chat message."""

    text: str
    sender_id: Optional[str] = None


class ToggleResponse(BaseModel):
    """Result of a task toggle. ``toggled`` is False for unknown ids."""

    toggled: bool
    task_id: str
    status: Optional[str] = None


class FeedResponse(BaseModel):
    """Posts for a feed tab, with the empty-state copy when there are none."""

    tab: str
    posts: list[Post]
    total: int
    empty_title: Optional[str] = None
    empty_message: Optional[str] = None


@app.get("/")
def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "Backstage API",
        "version": __version__,
        "description": "Studio project workflow and Stage feed API",
        "docs_url": "/docs",
    }


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/projects", response_model=list[StudioProject])
def list_projects() -> list[StudioProject]:
    """List all projects in snapshot order."""
    return get_studio().projects


@app.get("/projects/recent", response_model=list[StudioProject])
def recent_projects(
    limit: int = Query(default=DEFAULT_RECENT_LIMIT, ge=0, description="Number of projects to return"),
) -> list[StudioProject]:
    """Unfinished projects first, most recently updated first."""
    return get_studio().recent_projects(limit)


@app.get("/projects/{project_id}", response_model=StudioProject)
def get_project(project_id: str) -> StudioProject:
    """Get a project by id."""
    return _project_or_404(get_studio(), project_id)


@app.get("/projects/{project_id}/summary")
def project_summary(
    project_id: str,
    visible_limit: int = Query(default=DEFAULT_VISIBLE_LIMIT, ge=0, description="Avatars shown before '+N'"),
) -> dict:
    """Card statistics for a project."""
    studio = get_studio()
    _project_or_404(studio, project_id)
    return asdict(studio.summary(project_id, visible_limit))


@app.get("/projects/{project_id}/timeline")
def project_timeline(project_id: str) -> dict:
    """Status display and milestone markers for a project."""
    studio = get_studio()
    project = _project_or_404(studio, project_id)
    return {
        "project_id": project.id,
        "status": project.status.value,
        "display": asdict(status_display(project.status)),
        "milestones": [
            {
                "milestone": entry.milestone.value,
                "title": entry.title,
                "state": entry.state.value,
                "scheduled": entry.scheduled.isoformat() if entry.scheduled else None,
            }
            for entry in studio.timeline(project_id)
        ],
    }


@app.post("/projects/{project_id}/tasks/{task_id}/toggle", response_model=ToggleResponse)
def toggle_task(project_id: str, task_id: str) -> ToggleResponse:
    """Toggle a task. Unknown ids are a no-op, not an error."""
    task = get_studio().toggle_task(project_id, task_id)
    if task is None:
        return ToggleResponse(toggled=False, task_id=task_id)
    return ToggleResponse(toggled=True, task_id=task_id, status=task.status.value)


@app.get("/projects/{project_id}/messages", response_model=list[Message])
def list_messages(project_id: str) -> list[Message]:
    """A project's conversation in arrival order."""
    return _project_or_404(get_studio(), project_id).messages


@app.post("/projects/{project_id}/messages", response_model=Message)
def send_message(project_id: str, body: MessageCreate) -> Message:
    """Append a message to a project's conversation."""
    studio = get_studio()
    _project_or_404(studio, project_id)
    try:
        return studio.append_message(project_id, body.text, sender_id=body.sender_id)
    except NotFound as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/stats")
def stats() -> dict:
    """Dashboard counters plus per-stage counts."""
    studio = get_studio()
    return {
        **asdict(studio.stats()),
        "by_status": {status.value: count for status, count in studio.status_breakdown().items()},
    }


@app.get("/feed", response_model=FeedResponse)
def feed(
    tab: str = Query(default="for_you", description="for_you, following or trending"),
    user_id: Optional[str] = Query(default=None, description="Viewer (default: current user)"),
) -> FeedResponse:
    """Posts for a Stage feed tab."""
    studio = get_studio()
    try:
        selected = parse_tab(tab)
        posts = studio.feed(selected, user_id=user_id)
    except InvalidArgument as e:
        logger.warning("Rejected feed request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    response = FeedResponse(tab=selected.value, posts=posts, total=len(posts))
    if not posts:
        state = empty_state(selected)
        response.empty_title = state.title
        response.empty_message = state.message
    return response
