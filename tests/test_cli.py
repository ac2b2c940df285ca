"""Tests for CLI commands.

Uses typer.testing.CliRunner with the provider client mocked out.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from mailpane.cli.main import app
from mailpane.provider import MailProviderClient, ProviderError


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def cli_client(client: MagicMock):
    """Authenticated session whose mailbox uses the mocked client."""
    with (
        patch("mailpane.cli.session.is_authenticated", return_value=True),
        patch("mailpane.cli.session.load_config", return_value={}),
        patch.object(MailProviderClient, "from_config", return_value=client),
    ):
        yield client


class TestSession:
    """Tests for shared CLI behaviour."""

    def test_requires_authentication(self, runner: CliRunner):
        with patch("mailpane.cli.session.is_authenticated", return_value=False):
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Not authenticated" in result.output

    def test_load_failure_exits(self, runner: CliRunner, cli_client: MagicMock):
        cli_client.list_conversations.side_effect = ProviderError("HTTP 502: Bad Gateway", 502)

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Error: HTTP 502: Bad Gateway" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "mailpane version" in result.output


class TestListCommand:
    """Tests for list command."""

    def test_lists_inbox(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "2 conversations in Inbox" in result.output
        assert "Re: Kickoff" in result.output
        assert "id: c2" in result.output

    def test_unread_filter(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["list", "--unread"])

        assert "1 conversation in Inbox" in result.output
        assert "id: c2" not in result.output

    def test_empty_folder(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["list", "--folder", "Archive"])

        assert result.exit_code == 0
        assert "0 conversations in Archive" in result.output


class TestReadAndSearch:
    """Tests for read and search commands."""

    def test_read_loaded_conversation(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["read", "c1"])

        assert result.exit_code == 0
        assert "[Inbox] 2 message(s)" in result.output
        assert result.output.index("Subject: Kickoff") < result.output.index(
            "Subject: Re: Kickoff"
        )
        cli_client.get_conversation.assert_not_called()

    def test_read_unknown_conversation(self, runner: CliRunner, cli_client: MagicMock):
        cli_client.get_conversation.side_effect = ProviderError("Failed to fetch conversation")

        result = runner.invoke(app, ["read", "c9"])

        assert result.exit_code == 1
        assert "Error: Failed to fetch conversation" in result.output

    def test_search_lists_results(self, runner: CliRunner, cli_client: MagicMock, make_message):
        cli_client.search.return_value = [make_message("m4", "c3", folder="Sent Items")]

        result = runner.invoke(app, ["search", "proposal"])

        assert result.exit_code == 0
        assert '1 search result for "proposal"' in result.output
        assert "[Sent Items]" in result.output
        cli_client.list_conversations.assert_not_called()

    def test_search_open_result(self, runner: CliRunner, cli_client: MagicMock, make_message):
        cli_client.search.return_value = [
            make_message("m4", "c3", folder="Sent Items", subject="Proposal")
        ]

        result = runner.invoke(app, ["search", "proposal", "--open", "1"])

        assert result.exit_code == 0
        assert "[Sent Items] 1 message(s)" in result.output
        cli_client.get_conversation.assert_not_called()

    def test_search_top(self, runner: CliRunner, cli_client: MagicMock):
        cli_client.search.return_value = []

        result = runner.invoke(app, ["search", "invoice", "--top", "5"])

        assert result.exit_code == 0
        cli_client.search.assert_called_once_with("invoice", top=5)

    def test_search_options_before_query(self, runner: CliRunner, cli_client: MagicMock):
        cli_client.search.return_value = []

        result = runner.invoke(app, ["search", "--top", "7", "invoice"])

        assert result.exit_code == 0
        cli_client.search.assert_called_once_with("invoice", top=7)

    def test_search_open_out_of_range(
        self, runner: CliRunner, cli_client: MagicMock
    ):
        cli_client.search.return_value = []

        result = runner.invoke(app, ["search", "nothing", "--open", "3"])

        assert result.exit_code == 1
        assert "No result number 3" in result.output


class TestSendAndDraft:
    """Tests for send and draft commands."""

    def test_send(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(
            app, ["send", "--to", "Alice <alice@example.com>", "--subject", "Hi", "-b", "Hello"]
        )

        assert result.exit_code == 0
        assert "Email sent." in result.output
        payload = cli_client.send_mail.call_args.args[0]
        assert payload["body"] == {"contentType": "HTML", "content": "Hello"}

    def test_send_with_attachment(
        self, runner: CliRunner, cli_client: MagicMock, tmp_path: Path
    ):
        report = tmp_path / "report.pdf"
        report.write_bytes(b"%PDF")

        result = runner.invoke(
            app, ["send", "--to", "a@example.com", "-s", "Report", "-a", str(report)]
        )

        assert result.exit_code == 0
        cli_client.create_draft.assert_called_once()
        cli_client.upload_attachment.assert_called_once_with("draft-1", report)
        cli_client.send_draft.assert_called_once_with("draft-1")

    def test_send_failure(self, runner: CliRunner, cli_client: MagicMock):
        cli_client.send_mail.side_effect = ProviderError("Invalid recipient", 400)

        result = runner.invoke(app, ["send", "--to", "nobody", "--subject", "Hi"])

        assert result.exit_code == 1
        assert "Error: Invalid recipient" in result.output

    def test_send_requires_subject(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["send", "--to", "a@example.com", "--subject", " "])

        assert result.exit_code == 1
        assert "A recipient and a subject are required." in result.output
        cli_client.send_mail.assert_not_called()

    def test_draft_save_with_failed_attachment(
        self, runner: CliRunner, cli_client: MagicMock, tmp_path: Path
    ):
        notes = tmp_path / "notes.txt"
        notes.write_text("notes")
        cli_client.upload_attachment.side_effect = ProviderError("Failed to add attachment")

        result = runner.invoke(app, ["draft", "save", "-s", "Later", "-a", str(notes)])

        assert result.exit_code == 0
        assert "Draft saved." in result.output
        assert "failed to add attachment(s): notes.txt" in result.output

    def test_draft_update_not_found(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["draft", "update", "m1", "-s", "New"])

        assert result.exit_code == 1
        assert "Draft m1 not found in Drafts." in result.output

    def test_draft_send(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["draft", "send", "d1"])

        assert result.exit_code == 0
        cli_client.send_draft.assert_called_once_with("d1")


class TestMessageAndAttachments:
    """Tests for message actions and attachment commands."""

    def test_move_unknown_destination(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["message", "move", "m1", "Projects"])

        assert result.exit_code == 1
        assert "Unknown destination folder: Projects" in result.output

    def test_delete_with_confirmation_flag(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["message", "delete", "m1", "--yes"])

        assert result.exit_code == 0
        cli_client.delete_message.assert_called_once_with("m1")

    def test_reply(self, runner: CliRunner, cli_client: MagicMock):
        result = runner.invoke(app, ["message", "reply", "m1", "--comment", "Thanks"])

        assert result.exit_code == 0
        cli_client.reply.assert_called_once_with("m1", "Thanks")

    def test_download_404(self, runner: CliRunner, cli_client: MagicMock, tmp_path: Path):
        cli_client.download_attachment.side_effect = ProviderError("HTTP 404: Not Found", 404)

        result = runner.invoke(
            app,
            ["attachments", "download", "m1", "a1", "--name", "x.pdf", "--dir", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert "HTTP 404: Not Found" in result.output

    def test_download(self, runner: CliRunner, cli_client: MagicMock, tmp_path: Path):
        cli_client.download_attachment.return_value = b"%PDF"

        result = runner.invoke(
            app,
            ["attachments", "download", "m1", "a1", "--name", "x.pdf", "--dir", str(tmp_path)],
        )

        assert result.exit_code == 0
        assert (tmp_path / "x.pdf").read_bytes() == b"%PDF"


class TestAuthCommand:
    """Tests for auth commands."""

    def test_login_saves_token(self, runner: CliRunner):
        with patch("mailpane.cli.commands.auth.save_session_token") as save:
            result = runner.invoke(app, ["auth", "login", "--token", "tok-123"])

        assert result.exit_code == 0
        save.assert_called_once_with("tok-123")

    def test_status_unauthenticated(self, runner: CliRunner):
        with patch("mailpane.cli.commands.auth.is_authenticated", return_value=False):
            result = runner.invoke(app, ["auth", "status"])

        assert result.exit_code == 1
        assert "MAILPANE_SESSION_TOKEN" in result.output
