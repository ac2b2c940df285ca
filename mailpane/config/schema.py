"""Configuration schema definitions.

Uses TypedDict for type safety without runtime overhead.
These types match the structure of config.toml.
"""

from typing import TypedDict


class ProviderConfig(TypedDict, total=False):
    """Mail-provider API settings.

    Attributes:
        base_url: Root URL of the integration API (no trailing slash needed).
        timeout: Per-request timeout in seconds.
    """

    base_url: str
    timeout: int


class DefaultsConfig(TypedDict, total=False):
    """Default settings applied to all operations.

    Attributes:
        folder: Folder selected when the mailbox opens.
        search_top: Maximum number of search results to request.
        download_dir: Directory attachments are saved to.
    """

    folder: str
    search_top: int
    download_dir: str


class MailpaneConfig(TypedDict, total=False):
    """Root configuration structure."""

    provider: ProviderConfig
    defaults: DefaultsConfig
