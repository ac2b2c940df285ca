"""Draft command implementation."""

from pathlib import Path

import typer
from typing_extensions import Annotated

from mailpane.cli.commands.send import fill_compose
from mailpane.cli.session import fail, open_mailbox
from mailpane.models import format_file_size

app = typer.Typer(help="Create, edit and send drafts")


@app.command()
def save(
    to: Annotated[str, typer.Option("--to", help="Recipient(s)")] = "",
    cc: Annotated[str, typer.Option("--cc", help="CC recipient(s)")] = "",
    bcc: Annotated[str, typer.Option("--bcc", help="BCC recipient(s)")] = "",
    subject: Annotated[str, typer.Option("--subject", "-s", help="Email subject")] = "",
    body: Annotated[str, typer.Option("--body", "-b", help="Email body")] = "",
    text: Annotated[bool, typer.Option("--text", help="Plain-text body")] = False,
    attach: Annotated[
        list[Path] | None,
        typer.Option("--attach", "-a", exists=True, dir_okay=False, help="Attach file(s)"),
    ] = None,
):
    """Save a new draft. Attachments that fail to upload do not stop the save."""
    mailbox = open_mailbox()
    compose = mailbox.compose

    compose.open_compose()
    fill_compose(
        compose, to=to, cc=cc, bcc=bcc, subject=subject, body=body, text=text, attach=attach
    )

    if not compose.can_save_draft:
        typer.echo("A draft needs a subject or a body.", err=True)
        raise typer.Exit(1)

    if not compose.save_draft():
        fail(mailbox, "Failed to save draft")

    typer.echo("Draft saved.")
    if compose.attachment_failures:
        typer.echo(f"Warning: {mailbox.error}", err=True)


@app.command()
def update(
    draft_id: Annotated[str, typer.Argument(help="Draft message ID")],
    to: Annotated[str | None, typer.Option("--to", help="Replace recipient(s)")] = None,
    cc: Annotated[str | None, typer.Option("--cc", help="Replace CC recipient(s)")] = None,
    bcc: Annotated[str | None, typer.Option("--bcc", help="Replace BCC recipient(s)")] = None,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="New subject")] = None,
    body: Annotated[str | None, typer.Option("--body", "-b", help="New body")] = None,
    text: Annotated[bool, typer.Option("--text", help="Plain-text body")] = False,
    attach: Annotated[
        list[Path] | None,
        typer.Option("--attach", "-a", exists=True, dir_okay=False, help="Add file(s)"),
    ] = None,
    remove_attachment: Annotated[
        list[str] | None,
        typer.Option("--remove-attachment", help="Attachment ID to delete from the draft"),
    ] = None,
):
    """Edit an existing draft. Options not given keep the draft's values."""
    mailbox = open_mailbox(load=True)
    compose = mailbox.compose

    draft = mailbox.find_message(draft_id)
    if draft is None or not draft.is_draft:
        typer.echo(f"Draft {draft_id} not found in Drafts.", err=True)
        raise typer.Exit(1)

    compose.open_edit_draft(draft)
    for attachment_id in remove_attachment or []:
        if not compose.remove_draft_attachment(attachment_id):
            fail(mailbox, f"Failed to remove attachment {attachment_id}")

    fill_compose(
        compose, to=to, cc=cc, bcc=bcc, subject=subject, body=body, text=text, attach=attach
    )

    if not compose.can_update_draft:
        typer.echo("A draft needs a subject or a body.", err=True)
        raise typer.Exit(1)

    if not compose.update_draft():
        fail(mailbox, "Failed to update draft")

    typer.echo("Draft updated.")
    if compose.attachment_failures:
        typer.echo(f"Warning: {mailbox.error}", err=True)


@app.command()
def show(
    draft_id: Annotated[str, typer.Argument(help="Draft message ID")],
):
    """Show a draft's fields and uploaded attachments."""
    mailbox = open_mailbox(load=True)
    compose = mailbox.compose

    draft = mailbox.find_message(draft_id)
    if draft is None or not draft.is_draft:
        typer.echo(f"Draft {draft_id} not found in Drafts.", err=True)
        raise typer.Exit(1)

    compose.open_edit_draft(draft)
    typer.echo(f"To:      {compose.recipients_text('to')}")
    typer.echo(f"Subject: {compose.state.subject}")
    typer.echo()
    typer.echo(compose.state.body.content)
    if compose.draft_attachments:
        typer.echo()
        for attachment in compose.draft_attachments:
            typer.echo(
                f"  {attachment.id}  {attachment.name} ({format_file_size(attachment.size)})"
            )
    elif mailbox.error:
        typer.echo(f"Warning: {mailbox.error}", err=True)


@app.command("send")
def send_draft(
    draft_id: Annotated[str, typer.Argument(help="Draft message ID")],
):
    """Send an existing draft as it is."""
    mailbox = open_mailbox()

    if not mailbox.compose.send_draft(draft_id):
        fail(mailbox, "Failed to send draft")

    typer.echo("Draft sent.")
