"""Project chat: append-only message history."""

import logging
import re
from datetime import datetime
from typing import Optional

from backstage.models import Message, StudioProject, User, utcnow
from backstage.models.schemas import as_utc

logger = logging.getLogger(__name__)


MESSAGE_ID_PREFIX = "msg-"
_MESSAGE_ID_RE = re.compile(rf"^{re.escape(MESSAGE_ID_PREFIX)}(\d+)$")


def next_message_id(project: StudioProject) -> str:
    """Generate an id that no message in the conversation uses yet.

    Ids are ``msg-<n>`` with ``n`` one past the highest number already
    issued, so they increase monotonically within a session. Seed messages
    with other id formats cannot collide with this scheme.
    """
    highest = 0
    for message in project.messages:
        match = _MESSAGE_ID_RE.match(message.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{MESSAGE_ID_PREFIX}{highest + 1}"


def append_message(
    project: StudioProject,
    sender: User,
    text: str,
    now: Optional[datetime] = None,
) -> Message:
    """Append a new message to the end of a project's conversation.

    Existing messages are never reordered or modified. Text is not
    validated; an empty string is a valid message.

    Args:
        project: Project whose conversation grows
        sender: Author of the message
        text: Message body
        now: Creation time (defaults to the current UTC time)

    Returns:
        The message that was appended
    """
    message = Message(
        id=next_message_id(project),
        sender=sender,
        text=text,
        created_at=as_utc(now) if now is not None else utcnow(),
    )
    project.messages.append(message)
    logger.info("Appended message %s to project %s (from %s)", message.id, project.id, sender.id)
    return message
