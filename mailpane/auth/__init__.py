"""Session token storage for the mail-provider API.

The Microsoft sign-in itself happens in the CRM's browser flow, which ends
by handing out a session token. This module keeps that token so every
provider call can send it as a bearer token.

Usage:
    from mailpane.auth import save_session_token, load_session_token

    save_session_token("abc123")
    token = load_session_token()
"""

import os

from mailpane.config.paths import SESSION_TOKEN_FILE, ensure_credentials_dir

__all__ = [
    "SESSION_TOKEN_ENV",
    "save_session_token",
    "load_session_token",
    "clear_session_token",
    "is_authenticated",
]

# Environment variable takes precedence over the stored token so a token
# can be supplied for one shell without touching disk.
SESSION_TOKEN_ENV = "MAILPANE_SESSION_TOKEN"


def save_session_token(token: str) -> None:
    """Persist the session token to disk.

    Sets file permissions to 600 (owner read/write only) to protect the token.

    Args:
        token: Session token issued by the sign-in callback.

    Raises:
        ValueError: If the token is empty.
    """
    token = token.strip()
    if not token:
        raise ValueError("Session token must not be empty")

    ensure_credentials_dir()

    SESSION_TOKEN_FILE.write_text(token)
    SESSION_TOKEN_FILE.chmod(0o600)


def load_session_token() -> str | None:
    """Get the session token from the environment or the credentials file.

    Returns:
        Token string, or None if no token has been stored.
    """
    env_token = os.environ.get(SESSION_TOKEN_ENV, "").strip()
    if env_token:
        return env_token

    if not SESSION_TOKEN_FILE.exists():
        return None

    token = SESSION_TOKEN_FILE.read_text().strip()
    return token or None


def clear_session_token() -> bool:
    """Delete the stored session token.

    Returns:
        True if a token file was removed, False if none existed.
    """
    if SESSION_TOKEN_FILE.exists():
        SESSION_TOKEN_FILE.unlink()
        return True
    return False


def is_authenticated() -> bool:
    """Check whether a session token is available."""
    return load_session_token() is not None
