"""Auth command implementation.

Stores the session token issued by the CRM's Microsoft sign-in callback.
"""

import typer
from typing_extensions import Annotated

from mailpane.auth import (
    SESSION_TOKEN_ENV,
    clear_session_token,
    is_authenticated,
    save_session_token,
)

app = typer.Typer(help="Manage the mail-provider session token")


@app.command()
def login(
    token: Annotated[
        str | None, typer.Option("--token", "-t", help="Session token from the sign-in callback")
    ] = None,
):
    """Store the session token used for every mail-provider request."""
    if token is None:
        token = typer.prompt("Session token", hide_input=True)

    try:
        save_session_token(token)
    except ValueError as e:
        typer.echo(f"Invalid token: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Session token saved.")


@app.command()
def logout():
    """Forget the stored session token."""
    if clear_session_token():
        typer.echo("Session token removed.")
    else:
        typer.echo("No session token stored.")


@app.command()
def status():
    """Show whether a session token is available."""
    if is_authenticated():
        typer.echo("Authenticated.")
    else:
        typer.echo(f"Not authenticated. Use 'mailpane auth login' or set {SESSION_TOKEN_ENV}.")
        raise typer.Exit(1)
