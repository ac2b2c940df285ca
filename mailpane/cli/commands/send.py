"""Send command implementation."""

from pathlib import Path

import typer
from typing_extensions import Annotated

from mailpane.cli.session import fail, open_mailbox
from mailpane.compose import ComposeManager
from mailpane.models import HTML, TEXT

app = typer.Typer(help="Compose and send an email")


def fill_compose(
    compose: ComposeManager,
    *,
    to: str | None = None,
    cc: str | None = None,
    bcc: str | None = None,
    subject: str | None = None,
    body: str | None = None,
    text: bool = False,
    attach: list[Path] | None = None,
) -> None:
    """Copy command-line options into the compose buffer.

    Options left as None keep whatever the buffer already holds, so the
    same helper serves new messages and draft edits.
    """
    for field, value in (("to", to), ("cc", cc), ("bcc", bcc)):
        if value is not None:
            compose.set_recipients(field, value)
    if subject is not None:
        compose.state.subject = subject
    if body is not None:
        compose.state.body.content = body
        compose.state.body.content_type = TEXT if text else HTML
    if attach:
        compose.add_attachments(attach)


@app.callback(invoke_without_command=True)
def send(
    ctx: typer.Context,
    to: Annotated[str, typer.Option("--to", help="Recipient(s): 'Name <address>, ...'")],
    subject: Annotated[str, typer.Option("--subject", "-s", help="Email subject")],
    body: Annotated[str, typer.Option("--body", "-b", help="Email body")] = "",
    cc: Annotated[str | None, typer.Option("--cc", help="CC recipient(s)")] = None,
    bcc: Annotated[str | None, typer.Option("--bcc", help="BCC recipient(s)")] = None,
    text: Annotated[bool, typer.Option("--text", help="Send the body as plain text")] = False,
    attach: Annotated[
        list[Path] | None,
        typer.Option("--attach", "-a", exists=True, dir_okay=False, help="Attach file(s)"),
    ] = None,
    no_save_sent: Annotated[
        bool, typer.Option("--no-save-sent", help="Do not keep a copy in Sent Items")
    ] = False,
):
    """Send an email. Attachments are uploaded through a draft first."""
    mailbox = open_mailbox()
    compose = mailbox.compose

    compose.open_compose()
    fill_compose(
        compose, to=to, cc=cc, bcc=bcc, subject=subject, body=body, text=text, attach=attach
    )
    compose.state.save_to_sent_items = not no_save_sent

    if not compose.can_send:
        typer.echo("A recipient and a subject are required.", err=True)
        raise typer.Exit(1)

    if not compose.send():
        fail(mailbox, "Failed to send email")

    typer.echo("Email sent.")
