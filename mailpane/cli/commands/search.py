"""Search command implementation."""

import typer
from typing_extensions import Annotated

from mailpane.cli.session import echo_thread, fail, format_received, open_mailbox
from mailpane.conversations import preview_text


def search(
    query: Annotated[str, typer.Argument(help="Search query")],
    open_result: Annotated[
        int | None,
        typer.Option("--open", "-o", help="Show the conversation of result N (1-based)"),
    ] = None,
    top: Annotated[
        int | None, typer.Option("--top", "-n", min=1, help="Maximum number of results")
    ] = None,
):
    """Search the whole mailbox and optionally open one result's conversation."""
    mailbox = open_mailbox(load=open_result is not None)

    results = mailbox.search.search(query, top=top)
    if results is None:
        fail(mailbox)

    typer.echo(f"{len(results)} search result{'' if len(results) == 1 else 's'} for \"{query}\"")
    for position, message in enumerate(results, start=1):
        folder = f" [{message.original_folder}]" if message.original_folder else ""
        typer.echo(
            f"{position:>3}. {format_received(message):>10}  {message.sender_name}{folder}"
        )
        typer.echo(f"     {message.subject or '(No Subject)'}")
        typer.echo(f"     {preview_text(message.body_preview)}")

    if open_result is None:
        return

    if not 1 <= open_result <= len(results):
        typer.echo(f"No result number {open_result}.", err=True)
        raise typer.Exit(1)

    mailbox.search.navigate_to_result(results[open_result - 1])
    thread = mailbox.selected_thread()
    if not thread:
        fail(mailbox, "Conversation not found")

    typer.echo()
    typer.echo(f"[{mailbox.selection.folder}] {len(thread)} message(s)")
    echo_thread(thread)
