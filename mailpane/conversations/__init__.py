"""Threaded conversation state: the index and the selection controller."""

from .index import (
    DEFAULT_FOLDER,
    FOLDER_NAME_MAP,
    FOLDERS,
    ConversationIndex,
    ConversationSummary,
    build_index,
    is_unread,
    latest_message,
    normalize_folder_name,
    preview_text,
    sort_thread,
)
from .selection import SelectionController, SelectionState

__all__ = [
    "DEFAULT_FOLDER",
    "FOLDER_NAME_MAP",
    "FOLDERS",
    "ConversationIndex",
    "ConversationSummary",
    "build_index",
    "is_unread",
    "latest_message",
    "normalize_folder_name",
    "preview_text",
    "sort_thread",
    "SelectionController",
    "SelectionState",
]
