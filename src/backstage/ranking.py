"""Feed ranking: Stage post tabs and the BackStage recent-projects list."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence, Union

from backstage.errors import InvalidArgument
from backstage.models import Post, StudioProject, User

logger = logging.getLogger(__name__)


DEFAULT_RECENT_LIMIT = 4


class FeedTab(str, Enum):
    """Stage feed tabs."""

    FOR_YOU = "for_you"  # Corpus order, untouched
    FOLLOWING = "following"  # Posts by followed users only
    TRENDING = "trending"  # Most liked first


def parse_tab(value: Union[FeedTab, str]) -> FeedTab:
    """Validate a tab selector.

    Raises:
        InvalidArgument: if ``value`` is not one of the known tabs
    """
    if isinstance(value, FeedTab):
        return value
    try:
        return FeedTab(value)
    except ValueError:
        valid = ", ".join(t.value for t in FeedTab)
        raise InvalidArgument(f"Unknown feed tab {value!r} (expected one of: {valid})") from None


def filter_posts(
    posts: Sequence[Post],
    current_user: User,
    tab: Union[FeedTab, str],
) -> list[Post]:
    """Select and order posts for a feed tab.

    Returns a new list; an empty list means the caller should render the
    empty state (see ``empty_state``).
    """
    tab = parse_tab(tab)

    if tab == FeedTab.FOLLOWING:
        following = set(current_user.following_ids)
        result = [post for post in posts if post.author.id in following]
    elif tab == FeedTab.TRENDING:
        # sorted() is stable, so equal like counts keep corpus order
        result = sorted(posts, key=lambda post: post.likes, reverse=True)
    else:
        result = list(posts)

    logger.debug("feed tab=%s user=%s -> %d/%d posts", tab.value, current_user.id, len(result), len(posts))
    return result


@dataclass(frozen=True)
class EmptyState:
    """What to show when a feed tab has nothing in it."""

    title: str
    message: str


_EMPTY_TITLE = "아직 콘텐츠가 없어요"

EMPTY_STATES: dict[FeedTab, EmptyState] = {
    FeedTab.FOR_YOU: EmptyState(_EMPTY_TITLE, "새로운 음악을 발견해보세요!"),
    FeedTab.FOLLOWING: EmptyState(_EMPTY_TITLE, "팔로우한 아티스트의 새로운 음악이 여기에 표시됩니다."),
    FeedTab.TRENDING: EmptyState(_EMPTY_TITLE, "새로운 음악을 발견해보세요!"),
}


def empty_state(tab: Union[FeedTab, str]) -> EmptyState:
    """Empty-state copy for a tab. The following tab has its own message."""
    return EMPTY_STATES[parse_tab(tab)]


def following_users(current_user: User, users: Mapping[str, User]) -> list[User]:
    """Resolve followed ids to users, skipping ids missing from the directory."""
    return [users[uid] for uid in current_user.following_ids if uid in users]


def rank_recent_projects(
    projects: Sequence[StudioProject],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[StudioProject]:
    """Order projects for the "recent projects" section.

    Unfinished projects come first, then completed ones; within each group
    the most recently updated first. The full collection is sorted before
    being cut down to ``limit``.
    """
    if limit < 0:
        raise InvalidArgument(f"limit must be >= 0, got {limit}")

    # Two stable passes: recency first, then the completed bucket
    by_recency = sorted(projects, key=lambda p: p.last_updated_at, reverse=True)
    ranked = sorted(by_recency, key=lambda p: p.is_completed)
    return ranked[:limit]
