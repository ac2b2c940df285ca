"""Helpers shared by CLI commands: opening the mailbox and reporting errors."""

from datetime import datetime, timezone

import typer

from mailpane.auth import is_authenticated
from mailpane.config import load_config
from mailpane.mailbox import Mailbox
from mailpane.models import Message


def open_mailbox(*, load: bool = False) -> Mailbox:
    """Build a Mailbox from the config file, optionally loading conversations.

    Exits with status 1 when no session token is stored or the initial
    load fails.
    """
    if not is_authenticated():
        typer.echo("Not authenticated.", err=True)
        typer.echo("Run 'mailpane auth login --token <session-token>' first.", err=True)
        raise typer.Exit(1)

    mailbox = Mailbox.from_config(load_config())

    if load and not mailbox.refresh():
        fail(mailbox)

    return mailbox


def fail(mailbox: Mailbox, fallback: str = "Operation failed") -> None:
    """Print the mailbox's current error and exit with status 1."""
    typer.echo(f"Error: {mailbox.error or fallback}", err=True)
    raise typer.Exit(1)


def format_received(message: Message, now: datetime | None = None) -> str:
    """Short timestamp for list rows: time today, 'Yesterday', else the date."""
    received = message.received_at
    now = now or datetime.now(timezone.utc)
    hours = (now - received).total_seconds() / 3600
    if hours < 24:
        return received.astimezone().strftime("%H:%M")
    if hours < 48:
        return "Yesterday"
    return received.astimezone().strftime("%Y-%m-%d")


def echo_thread(messages: list[Message]) -> None:
    """Print a conversation oldest-first."""
    for message in messages:
        to = ", ".join(r.name or r.address for r in message.to_recipients) or "Me"
        typer.echo("-" * 60)
        typer.echo(f"From:    {message.sender_name}")
        typer.echo(f"To:      {to}")
        typer.echo(f"Date:    {message.received_date_time}")
        typer.echo(f"Subject: {message.subject or '(No Subject)'}")
        typer.echo(f"Id:      {message.id}")
        if message.has_attachments:
            typer.echo("         [has attachments]")
        typer.echo()
        typer.echo(message.body.content or message.body_preview)
