"""Tests for Mailbox loading, message actions and attachments."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mailpane.mailbox import Mailbox
from mailpane.models import Message, Recipient
from mailpane.provider import AuthenticationMissingError, ProviderError


class TestRefresh:
    """Tests for loading the conversation index."""

    def test_refresh_selects_default(self, mailbox: Mailbox):
        assert mailbox.refresh() is True

        assert mailbox.selection.folder == "Inbox"
        assert mailbox.selection.conversation_id == "c1"
        assert [m.id for m in mailbox.selected_thread()] == ["m1", "m2"]
        assert mailbox.loading is False

    def test_refresh_failure_keeps_error(self, mailbox: Mailbox, client: MagicMock):
        client.list_conversations.side_effect = AuthenticationMissingError()

        assert mailbox.refresh() is False

        assert "No authentication token found" in mailbox.error
        assert len(mailbox.index) == 0
        assert mailbox.loading is False

    def test_refresh_clears_previous_error(self, mailbox: Mailbox):
        mailbox.report_error("stale")

        mailbox.refresh()

        assert mailbox.error is None

    def test_last_error_wins(self, mailbox: Mailbox):
        mailbox.report_error("first")
        mailbox.report_error(ProviderError("second"))

        assert mailbox.error == "second"

    def test_default_folder(self, client: MagicMock):
        mailbox = Mailbox(client, default_folder="Sent Items")

        mailbox.refresh()

        assert mailbox.selection.conversation_id == "c3"

    def test_summaries_follow_selected_folder(self, loaded_mailbox: Mailbox):
        loaded_mailbox.set_folder("Sent Items")

        assert [r.conversation_id for r in loaded_mailbox.summaries()] == ["c3"]
        assert [r.conversation_id for r in loaded_mailbox.summaries("Inbox")] == ["c1", "c2"]

    def test_clear_search(self, loaded_mailbox: Mailbox):
        loaded_mailbox.search.active = True

        loaded_mailbox.clear_search()

        assert loaded_mailbox.search.active is False
        assert loaded_mailbox.selection.conversation_id is None

    def test_merge_keeps_selection(self, loaded_mailbox: Mailbox, make_message):
        loaded_mailbox.select_conversation("c2")

        loaded_mailbox.merge_conversation("Archive", "c9", [make_message("m9", "c9")])

        assert loaded_mailbox.selection.conversation_id == "c2"
        assert loaded_mailbox.index.contains("Archive", "c9")


class TestMessageActions:
    """Tests for reply, forward, move and delete."""

    @pytest.fixture
    def message(self) -> Message:
        return Message(id="m3", conversation_id="c2")

    def test_reply(self, loaded_mailbox: Mailbox, client: MagicMock, message: Message):
        assert loaded_mailbox.actions.reply(message, "Thanks!") is True

        client.reply.assert_called_once_with("m3", "Thanks!")
        client.list_conversations.assert_called_once()

    def test_reply_requires_comment(
        self, loaded_mailbox: Mailbox, client: MagicMock, message: Message
    ):
        assert loaded_mailbox.actions.reply(message, "   ") is False
        client.reply.assert_not_called()

    def test_forward_parses_recipients(
        self, loaded_mailbox: Mailbox, client: MagicMock, message: Message
    ):
        assert loaded_mailbox.actions.forward(message, "Bob <bob@example.com>; c@example.com")

        client.forward.assert_called_once_with(
            "m3",
            [
                Recipient("Bob", "bob@example.com").to_dict(),
                Recipient("", "c@example.com").to_dict(),
            ],
            "",
        )

    def test_forward_without_recipients(
        self, loaded_mailbox: Mailbox, client: MagicMock, message: Message
    ):
        assert loaded_mailbox.actions.forward(message, " , ") is False
        client.forward.assert_not_called()

    def test_move(self, loaded_mailbox: Mailbox, client: MagicMock, message: Message):
        assert loaded_mailbox.actions.move(message, "archive") is True

        client.move.assert_called_once_with("m3", "archive")

    def test_move_unknown_destination(
        self, loaded_mailbox: Mailbox, client: MagicMock, message: Message
    ):
        assert loaded_mailbox.actions.move(message, "Projects") is False

        client.move.assert_not_called()
        assert loaded_mailbox.error == "Unknown destination folder: Projects"

    def test_delete_failure(self, loaded_mailbox: Mailbox, client: MagicMock, message: Message):
        client.delete_message.side_effect = ProviderError("Failed to delete email", 500)

        assert loaded_mailbox.actions.delete(message) is False

        assert loaded_mailbox.error == "Failed to delete email"
        assert loaded_mailbox.actions.busy is False
        client.list_conversations.assert_not_called()

    def test_actions_blocked_while_compose_busy(
        self, loaded_mailbox: Mailbox, client: MagicMock, message: Message
    ):
        """Only one compose operation or action runs at a time."""
        loaded_mailbox.compose.sending = True

        assert loaded_mailbox.busy
        assert loaded_mailbox.actions.delete(message) is False
        assert loaded_mailbox.compose.send_draft("d1") is False
        client.delete_message.assert_not_called()
        client.send_draft.assert_not_called()


class TestAttachments:
    """Tests for AttachmentManager."""

    def test_download_saves_file(
        self, loaded_mailbox: Mailbox, client: MagicMock, tmp_path: Path
    ):
        client.download_attachment.return_value = b"%PDF-1.7"

        saved = loaded_mailbox.attachments.download("m1", "a1", "report.pdf", tmp_path / "out")

        assert saved == tmp_path / "out" / "report.pdf"
        assert saved.read_bytes() == b"%PDF-1.7"

    def test_download_strips_directories_from_name(
        self, loaded_mailbox: Mailbox, client: MagicMock, tmp_path: Path
    ):
        client.download_attachment.return_value = b"data"

        saved = loaded_mailbox.attachments.download("m1", "a1", "../../evil.txt", tmp_path)

        assert saved == tmp_path / "evil.txt"

    def test_download_rejects_empty_ids(
        self, loaded_mailbox: Mailbox, client: MagicMock, tmp_path: Path
    ):
        assert loaded_mailbox.attachments.download("", "a1", "x.txt", tmp_path) is None

        client.download_attachment.assert_not_called()
        assert loaded_mailbox.error == "Invalid message ID or attachment ID"

    def test_download_error_reported(
        self, loaded_mailbox: Mailbox, client: MagicMock, tmp_path: Path
    ):
        client.download_attachment.side_effect = ProviderError("HTTP 404: Not Found", 404)

        assert loaded_mailbox.attachments.download("m1", "a1", "x.txt", tmp_path) is None
        assert "404" in loaded_mailbox.error
        assert not (tmp_path / "x.txt").exists()

    def test_list_attachments_failure(self, loaded_mailbox: Mailbox, client: MagicMock):
        client.list_attachments.side_effect = ProviderError("Failed to fetch attachments")

        assert loaded_mailbox.attachments.list_attachments("m1") is None
        assert loaded_mailbox.attachments.loading is False

    def test_upload_refreshes_list(self, loaded_mailbox: Mailbox, client: MagicMock):
        assert loaded_mailbox.attachments.upload("d1", Path("a.pdf")) is True

        client.list_attachments.assert_called_once_with("d1")
        assert loaded_mailbox.attachments.message_id == "d1"
