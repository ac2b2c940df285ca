"""Main CLI entry point for mailpane."""

import logging

import typer
from typing_extensions import Annotated

from mailpane import __version__
from mailpane.cli import commands

app = typer.Typer(
    name="mailpane",
    help="Outlook mailbox client for the CRM integration API",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(commands.list.app, name="list")
app.add_typer(commands.send.app, name="send")
app.add_typer(commands.draft.app, name="draft")
app.add_typer(commands.attachments.app, name="attachments")
app.add_typer(commands.message.app, name="message")
app.add_typer(commands.auth.app, name="auth")
app.add_typer(commands.config.app, name="config")

# Commands taking a positional argument followed by options
app.command("read")(commands.read.read)
app.command("search")(commands.search.search)


@app.callback()
def root(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log provider requests")
    ] = False,
):
    """Outlook mailbox client for the CRM integration API."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show version information."""
    typer.echo(f"mailpane version {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
