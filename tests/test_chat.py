"""Tests for the project chat."""

from datetime import datetime, timezone

from backstage.chat import append_message, next_message_id
from backstage.models import Message, StudioProject, User

from conftest import at


class TestNextMessageId:
    """Tests for message id generation."""

    def test_seed_ids_ignored(self, project: StudioProject) -> None:
        """Test seed ids in other formats start the sequence at one."""
        assert next_message_id(project) == "msg-1"

    def test_continues_after_highest(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test ids continue after the highest issued number."""
        project.messages.append(Message(id="msg-7", sender=users["u1"], text="hi", created_at=at(3)))
        assert next_message_id(project) == "msg-8"

    def test_empty_conversation(self) -> None:
        """Test the first id of an empty conversation."""
        assert next_message_id(StudioProject(id="p", title="Quiet")) == "msg-1"


class TestAppendMessage:
    """Tests for appending to a conversation."""

    def test_appends_to_end(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test a message is appended at the end."""
        message = append_message(project, users["u3"], "Ad-libs lifted")
        assert len(project.messages) == 3
        assert project.messages[-1] is message
        assert message.sender.id == "u3"
        assert message.text == "Ad-libs lifted"

    def test_prefix_unchanged(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test earlier messages are never modified."""
        before = [m.model_dump() for m in project.messages]
        append_message(project, users["u1"], "One")
        append_message(project, users["u2"], "Two")
        assert [m.model_dump() for m in project.messages[:2]] == before
        assert [m.text for m in project.messages[2:]] == ["One", "Two"]

    def test_ids_unique(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test every appended message gets a unique id."""
        for i in range(5):
            append_message(project, users["u1"], f"take {i}")
        message_ids = [m.id for m in project.messages]
        assert len(set(message_ids)) == len(message_ids)

    def test_empty_text_allowed(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test empty text is accepted."""
        message = append_message(project, users["u1"], "")
        assert message.text == ""

    def test_uses_given_time(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test an explicit creation time is used."""
        message = append_message(project, users["u1"], "hi", now=at(6))
        assert message.created_at == at(6)

    def test_naive_time_is_utc(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test a naive creation time is read as UTC."""
        message = append_message(project, users["u1"], "hi", now=datetime(2025, 11, 1, 18, 0))
        assert message.created_at == datetime(2025, 11, 1, 18, 0, tzinfo=timezone.utc)

    def test_defaults_to_now(self, project: StudioProject, users: dict[str, User]) -> None:
        """Test the creation time defaults to now."""
        before = datetime.now(timezone.utc)
        message = append_message(project, users["u1"], "hi")
        assert before <= message.created_at <= datetime.now(timezone.utc)
