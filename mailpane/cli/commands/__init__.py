"""CLI commands module."""

from . import attachments, auth, config, draft, list, message, read, search, send

__all__ = [
    "attachments",
    "auth",
    "config",
    "draft",
    "list",
    "message",
    "read",
    "search",
    "send",
]
