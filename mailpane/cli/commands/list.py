"""List command implementation."""

import typer
from typing_extensions import Annotated

from mailpane.cli.session import format_received, open_mailbox
from mailpane.conversations import FOLDERS

app = typer.Typer(help="List conversations in a folder")


@app.callback(invoke_without_command=True)
def list_cmd(
    ctx: typer.Context,
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help=f"Folder to list: {', '.join(FOLDERS)}")
    ] = None,
    unread: Annotated[bool, typer.Option("--unread", help="Only unread conversations")] = False,
):
    """List conversations with the latest message of each."""
    mailbox = open_mailbox(load=True)

    if folder:
        mailbox.set_folder(folder)

    rows = mailbox.summaries()
    if unread:
        rows = [row for row in rows if row.unread]

    current = mailbox.selection.folder
    typer.echo(
        f"{len(rows)} conversation{'' if len(rows) == 1 else 's'} in {current}"
    )
    if current not in mailbox.index:
        typer.echo(f"(no conversations loaded for folder '{current}')")

    for row in rows:
        marker = "*" if row.unread else " "
        count = f" ({row.message_count})" if row.message_count > 1 else ""
        typer.echo(
            f"{marker} {format_received(row.latest):>10}  {row.latest.sender_name}{count}"
        )
        typer.echo(f"    {row.latest.subject or '(No Subject)'}")
        typer.echo(f"    {row.preview}")
        typer.echo(f"    id: {row.conversation_id}")
