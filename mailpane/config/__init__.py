"""Configuration management module.

Handles loading, saving, and accessing the mailpane configuration.
Config is stored at ~/.config/mailpane/config.toml

Usage:
    from mailpane.config import load_config, get_provider_settings

    config = load_config()
    provider = get_provider_settings(config)
"""

import tomllib

import tomli_w

from .paths import CONFIG_FILE, ensure_config_dir
from .schema import DefaultsConfig, MailpaneConfig, ProviderConfig
from .template import CONFIG_TEMPLATE

__all__ = [
    "load_config",
    "save_config",
    "init_config",
    "get_provider_settings",
    "get_defaults",
    "set_config_value",
    "CONFIG_FILE",
    "DEFAULT_BASE_URL",
    "DEFAULT_FOLDER",
]

DEFAULT_BASE_URL = "http://localhost:8000/api/integration"
DEFAULT_TIMEOUT = 30
DEFAULT_FOLDER = "Inbox"
DEFAULT_SEARCH_TOP = 50

# Module-level cache for loaded config.
# Avoids repeated disk reads during a single CLI invocation.
_cached_config: MailpaneConfig | None = None


def load_config(*, force_reload: bool = False) -> MailpaneConfig:
    """Load configuration from disk.

    Returns empty dict if config file doesn't exist.
    Uses module-level caching to avoid repeated disk reads.

    Args:
        force_reload: Bypass cache and read from disk (useful after saving).

    Returns:
        The configuration dictionary.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    if not CONFIG_FILE.exists():
        _cached_config = {}
        return _cached_config

    with open(CONFIG_FILE, "rb") as f:
        _cached_config = tomllib.load(f)

    return _cached_config


def save_config(config: MailpaneConfig) -> None:
    """Save configuration to disk.

    Creates config directory if needed. Updates the module cache.

    Args:
        config: The configuration dictionary to save.
    """
    global _cached_config

    ensure_config_dir()

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(config, f)

    _cached_config = config


def init_config(*, overwrite: bool = False) -> bool:
    """Initialize config directory and create template config file.

    Args:
        overwrite: If True, overwrite existing config file.

    Returns:
        True if config was created, False if it already existed.
    """
    ensure_config_dir()

    if CONFIG_FILE.exists() and not overwrite:
        return False

    CONFIG_FILE.write_text(CONFIG_TEMPLATE)
    return True


def get_provider_settings(config: MailpaneConfig) -> ProviderConfig:
    """Get provider settings with defaults filled in for missing keys."""
    provider = config.get("provider", {})
    return {
        "base_url": provider.get("base_url", DEFAULT_BASE_URL),
        "timeout": provider.get("timeout", DEFAULT_TIMEOUT),
    }


def get_defaults(config: MailpaneConfig) -> DefaultsConfig:
    """Get the [defaults] section with defaults filled in for missing keys."""
    defaults = config.get("defaults", {})
    return {
        "folder": defaults.get("folder", DEFAULT_FOLDER),
        "search_top": defaults.get("search_top", DEFAULT_SEARCH_TOP),
        "download_dir": defaults.get("download_dir", "."),
    }


def set_config_value(key: str, value: str) -> None:
    """Set a configuration value using dot notation.

    Examples:
        set_config_value("defaults.search_top", "25")
        set_config_value("provider.base_url", "https://crm.example.com/api/integration")

    Args:
        key: Dot-separated key path (e.g., "defaults.folder").
        value: Value to set (will be type-converted for known fields).

    Raises:
        ValueError: If value cannot be converted to expected type.
    """
    config = load_config(force_reload=True)

    parts = key.split(".")

    # Navigate to parent dict, creating intermediate dicts as needed
    current: dict = config
    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]

    final_key = parts[-1]
    current[final_key] = _convert_value(final_key, value)

    save_config(config)


def _convert_value(key: str, value: str) -> str | int:
    """Convert string value to appropriate type based on field name.

    Known integer fields are converted to int, everything else stays str.

    Raises:
        ValueError: If value cannot be converted to expected type.
    """
    int_fields = {"timeout", "search_top"}

    if key in int_fields:
        return int(value)

    return value
