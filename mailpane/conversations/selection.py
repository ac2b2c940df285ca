"""Folder and conversation selection.

Keeps ``(folder, conversation_id)`` consistent with the conversation index:
the selected conversation is always either None or a conversation of the
selected folder.

A folder switch clears the conversation before choosing the new folder's
default, so nothing from the previous folder is ever shown against the new
one. A navigation to a specific conversation (from search) records the
target as pending and only selects it once the index holds it in that
folder; every index update re-checks the pending target.
"""

import logging
from dataclasses import dataclass

from mailpane.conversations.index import DEFAULT_FOLDER, ConversationIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    folder: str
    conversation_id: str | None


class SelectionController:
    """State machine for the active folder and conversation.

    Example:
        selection = SelectionController(index, default_folder="Inbox")
        selection.set_folder("Sent Items")
        selection.select_conversation("AAQk...")
    """

    def __init__(
        self,
        index: ConversationIndex | None = None,
        default_folder: str = DEFAULT_FOLDER,
    ):
        self._index = index or ConversationIndex()
        self._folder = default_folder
        self._conversation_id: str | None = None
        self._pending_conversation_id: str | None = None

    @property
    def folder(self) -> str:
        return self._folder

    @property
    def conversation_id(self) -> str | None:
        return self._conversation_id

    @property
    def pending_conversation_id(self) -> str | None:
        """Navigation target still waiting for the index to contain it."""
        return self._pending_conversation_id

    @property
    def state(self) -> SelectionState:
        return SelectionState(self._folder, self._conversation_id)

    @property
    def index(self) -> ConversationIndex:
        return self._index

    def set_folder(self, folder: str) -> None:
        """Switch folders: clear the conversation, then pick the default."""
        self._folder = folder
        self._conversation_id = None
        self._pending_conversation_id = None
        self._conversation_id = self._index.default_conversation(folder)
        logger.debug("Folder %s selected, conversation %s", folder, self._conversation_id)

    def select_conversation(self, conversation_id: str) -> bool:
        """Select a conversation of the current folder.

        Returns:
            False (and leaves the selection alone) if the conversation is
            not part of the current folder.
        """
        if not self._index.contains(self._folder, conversation_id):
            logger.debug(
                "Ignoring selection of %s: not in folder %s",
                conversation_id,
                self._folder,
            )
            return False
        self._pending_conversation_id = None
        self._conversation_id = conversation_id
        return True

    def clear_conversation(self) -> None:
        self._conversation_id = None
        self._pending_conversation_id = None

    def navigate_to(self, folder: str, conversation_id: str) -> bool:
        """Move to a specific conversation in a specific folder.

        Clears the conversation, switches folder, then selects the target
        once the index confirms the folder contains it. If it does not yet,
        the target stays pending until an index update brings it in.

        Returns:
            True if the conversation is selected now, False if pending.
        """
        self._conversation_id = None
        self._folder = folder
        self._pending_conversation_id = conversation_id
        resolved = self._resolve_pending()
        if not resolved:
            logger.debug("Navigation to %s/%s pending", folder, conversation_id)
        return resolved

    def update_index(self, index: ConversationIndex, *, reset: bool = True) -> None:
        """Install a new index snapshot.

        A pending navigation target is selected if the new index has it.
        Otherwise a full refresh (``reset=True``) reselects the folder's
        default conversation, and an incremental update keeps the current
        selection unless it no longer exists.
        """
        self._index = index

        if self._resolve_pending():
            return
        if self._pending_conversation_id is not None:
            # Still waiting; keep the conversation cleared
            self._conversation_id = None
            return

        if reset or not self._is_valid(self._conversation_id):
            self._conversation_id = index.default_conversation(self._folder)

    def _is_valid(self, conversation_id: str | None) -> bool:
        return conversation_id is None or self._index.contains(self._folder, conversation_id)

    def _resolve_pending(self) -> bool:
        target = self._pending_conversation_id
        if target is None or not self._index.contains(self._folder, target):
            return False
        self._conversation_id = target
        self._pending_conversation_id = None
        return True
