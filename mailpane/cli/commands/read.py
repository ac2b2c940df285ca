"""Read command implementation."""

import typer
from typing_extensions import Annotated

from mailpane.cli.session import echo_thread, fail, open_mailbox
from mailpane.models import Message


def read(
    conversation_id: Annotated[str, typer.Argument(help="Conversation ID to read")],
):
    """Display every message of a conversation, oldest first.

    Conversations that are not in the loaded folders are fetched directly.
    """
    mailbox = open_mailbox(load=True)

    mailbox.search.navigate_to_result(Message(id="", conversation_id=conversation_id))

    thread = mailbox.selected_thread()
    if not thread:
        fail(mailbox, f"Conversation {conversation_id} not found")

    typer.echo(f"[{mailbox.selection.folder}] {len(thread)} message(s)")
    echo_thread(thread)
