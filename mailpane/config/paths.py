"""Path constants and directory utilities for mailpane config.

Follows the XDG Base Directory specification:
- Config: ~/.config/mailpane/
- Credentials: ~/.config/mailpane/credentials/ (with restricted permissions)
"""

from pathlib import Path


# XDG-compliant config directory
CONFIG_DIR = Path.home() / ".config" / "mailpane"
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Session token stored separately with restricted permissions
CREDENTIALS_DIR = CONFIG_DIR / "credentials"
SESSION_TOKEN_FILE = CREDENTIALS_DIR / "session_token"


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist.

    Returns the config directory path.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR


def ensure_credentials_dir() -> Path:
    """Create credentials directory with restricted permissions.

    Sets directory permissions to 700 (owner read/write/execute only)
    to protect the session token.

    Returns the credentials directory path.
    """
    CREDENTIALS_DIR.mkdir(parents=True, exist_ok=True)
    CREDENTIALS_DIR.chmod(0o700)
    return CREDENTIALS_DIR
