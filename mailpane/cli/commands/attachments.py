"""Attachments command implementation."""

from pathlib import Path

import typer
from typing_extensions import Annotated

from mailpane.cli.session import fail, open_mailbox
from mailpane.config import get_defaults, load_config
from mailpane.models import format_file_size

app = typer.Typer(help="List, download, upload and remove attachments")


@app.command("list")
def list_cmd(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
):
    """List the attachments of a message."""
    mailbox = open_mailbox()

    attachments = mailbox.attachments.list_attachments(message_id)
    if attachments is None:
        fail(mailbox)

    if not attachments:
        typer.echo("No attachments.")
        return

    for attachment in attachments:
        inline = " [inline]" if attachment.is_inline else ""
        typer.echo(
            f"{attachment.id}  {attachment.name} "
            f"({attachment.content_type}, {format_file_size(attachment.size)}){inline}"
        )


@app.command()
def download(
    message_id: Annotated[str, typer.Argument(help="Message ID")],
    attachment_id: Annotated[str, typer.Argument(help="Attachment ID")],
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Save as (default: attachment name)")
    ] = None,
    directory: Annotated[
        Path | None, typer.Option("--dir", "-d", file_okay=False, help="Target directory")
    ] = None,
):
    """Download an attachment into a directory."""
    mailbox = open_mailbox()

    if name is None:
        attachments = mailbox.attachments.list_attachments(message_id) or []
        name = next((a.name for a in attachments if a.id == attachment_id), attachment_id)

    if directory is None:
        directory = Path(get_defaults(load_config())["download_dir"]).expanduser()

    saved = mailbox.attachments.download(message_id, attachment_id, name, directory)
    if saved is None:
        fail(mailbox, "Failed to download attachment")

    typer.echo(f"Saved {saved}")


@app.command()
def upload(
    message_id: Annotated[str, typer.Argument(help="Draft message ID")],
    files: Annotated[
        list[Path], typer.Argument(exists=True, dir_okay=False, help="File(s) to attach")
    ],
):
    """Attach local files to a draft."""
    mailbox = open_mailbox()
    manager = mailbox.attachments

    failed = [
        path.name
        for path in files
        if not manager.upload(message_id, path, refresh_list=False)
    ]

    if failed:
        fail(mailbox, f"Failed to add attachment(s): {', '.join(failed)}")

    attachments = manager.list_attachments(message_id) or []
    typer.echo(f"Uploaded {len(files)} file(s); draft now has {len(attachments)} attachment(s).")


@app.command()
def remove(
    message_id: Annotated[str, typer.Argument(help="Draft message ID")],
    attachment_id: Annotated[str, typer.Argument(help="Attachment ID")],
):
    """Delete an attachment from a draft."""
    mailbox = open_mailbox()

    if not mailbox.attachments.remove(message_id, attachment_id):
        fail(mailbox, "Failed to remove attachment")

    typer.echo("Attachment removed.")
