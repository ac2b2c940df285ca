"""Shared fixtures: a mocked provider client and a mailbox built on it."""

from unittest.mock import MagicMock

import pytest

from mailpane.mailbox import Mailbox
from mailpane.models import Message, Recipient
from mailpane.provider import MailProviderClient


def _message(
    id: str,
    conversation_id: str,
    received: str = "2024-03-01T10:00:00Z",
    *,
    folder: str | None = "Inbox",
    subject: str = "Subject",
    sender: str | None = "Alice",
    is_read: bool = True,
    has_attachments: bool = False,
) -> Message:
    return Message(
        id=id,
        conversation_id=conversation_id,
        subject=subject,
        sender=Recipient(sender, f"{sender.lower()}@example.com") if sender else None,
        body_preview=f"Preview of {id}",
        received_date_time=received,
        is_read=is_read,
        has_attachments=has_attachments,
        original_folder=folder,
    )


@pytest.fixture
def make_message():
    """Factory for Message records with sensible defaults."""
    return _message


@pytest.fixture
def conversations() -> dict[str, dict[str, list[Message]]]:
    """Two Inbox conversations and one in Sent Items, in provider order."""
    return {
        "Inbox": {
            "c1": [
                _message("m1", "c1", "2024-03-01T09:00:00Z", subject="Kickoff"),
                _message("m2", "c1", "2024-03-01T11:00:00Z", subject="Re: Kickoff", is_read=False),
            ],
            "c2": [_message("m3", "c2", "2024-03-02T08:00:00Z", subject="Invoice")],
        },
        "Sent Items": {
            "c3": [
                _message("m4", "c3", "2024-03-03T12:00:00Z", folder="Sent Items", subject="Proposal")
            ],
        },
    }


@pytest.fixture
def client(conversations) -> MagicMock:
    """Provider client mock returning the sample conversations."""
    client = MagicMock(spec=MailProviderClient)
    client.list_conversations.return_value = conversations
    client.create_draft.return_value = "draft-1"
    client.upload_attachment.return_value = {}
    client.list_attachments.return_value = []
    return client


@pytest.fixture
def mailbox(client: MagicMock) -> Mailbox:
    """Mailbox wired to the mocked client, not yet loaded."""
    return Mailbox(client)


@pytest.fixture
def loaded_mailbox(mailbox: Mailbox, client: MagicMock) -> Mailbox:
    """Mailbox after a successful refresh, with the client's call log cleared."""
    assert mailbox.refresh()
    client.reset_mock()
    return mailbox
