"""Message command implementation: reply, forward, move, delete."""

import typer
from typing_extensions import Annotated

from mailpane.actions import MOVE_DESTINATIONS
from mailpane.cli.session import fail, open_mailbox
from mailpane.models import Message

app = typer.Typer(help="Reply to, forward, move or delete a message")


def _target(message_id: str) -> Message:
    # The provider only needs the id; no conversation lookup required
    return Message(id=message_id, conversation_id="")


@app.command()
def reply(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
    comment: Annotated[str, typer.Option("--comment", "-c", help="Reply text")],
):
    """Reply to the sender of a message."""
    mailbox = open_mailbox()

    if not comment.strip():
        typer.echo("Reply text must not be empty.", err=True)
        raise typer.Exit(1)

    if not mailbox.actions.reply(_target(message_id), comment):
        fail(mailbox, "Failed to reply to email")

    typer.echo("Reply sent.")


@app.command()
def forward(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
    to: Annotated[str, typer.Option("--to", help="Recipient(s)")],
    comment: Annotated[str, typer.Option("--comment", "-c", help="Forward note")] = "",
):
    """Forward a message."""
    mailbox = open_mailbox()

    if not mailbox.actions.forward(_target(message_id), to, comment):
        fail(mailbox, "At least one recipient is required")

    typer.echo("Message forwarded.")


@app.command()
def move(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
    destination: Annotated[
        str, typer.Argument(help=f"One of: {', '.join(MOVE_DESTINATIONS)}")
    ],
):
    """Move a message to another folder."""
    mailbox = open_mailbox()

    if not mailbox.actions.move(_target(message_id), destination):
        fail(mailbox, "Failed to move email")

    typer.echo(f"Moved to {MOVE_DESTINATIONS[destination]}.")


@app.command()
def delete(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
):
    """Delete a message."""
    if not yes:
        typer.confirm(f"Delete message {message_id}?", abort=True)

    mailbox = open_mailbox()

    if not mailbox.actions.delete(_target(message_id)):
        fail(mailbox, "Failed to delete email")

    typer.echo("Message deleted.")
