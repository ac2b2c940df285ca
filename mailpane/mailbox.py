"""Mailbox: shared state for the conversation engine.

Owns the conversation index (through the selection controller), the
current error message, the loading flag, and wires the compose, search,
attachment and message-action components to one provider client.

Errors follow a last-error-wins policy: every user action catches its own
failure and stores a single message in ``error``; there is no queue.
"""

import logging

from mailpane.actions import MessageActions
from mailpane.attachments import AttachmentManager
from mailpane.compose import ComposeManager
from mailpane.config import get_defaults
from mailpane.config.schema import MailpaneConfig
from mailpane.conversations import (
    DEFAULT_FOLDER,
    ConversationIndex,
    ConversationSummary,
    SelectionController,
    build_index,
)
from mailpane.models import Message
from mailpane.provider import MailpaneError, MailProviderClient
from mailpane.search import DEFAULT_SEARCH_TOP, SearchNavigator

logger = logging.getLogger(__name__)


class Mailbox:
    """Client-side state of one Outlook mailbox.

    Example:
        mailbox = Mailbox(MailProviderClient(base_url))
        if not mailbox.refresh():
            print(mailbox.error)
        for row in mailbox.summaries():
            print(row.latest.subject)
    """

    def __init__(
        self,
        client: MailProviderClient,
        default_folder: str = DEFAULT_FOLDER,
        search_top: int = DEFAULT_SEARCH_TOP,
    ):
        self._client = client
        self.selection = SelectionController(ConversationIndex(), default_folder)
        self.error: str | None = None
        self.loading = False

        self.attachments = AttachmentManager(client, self)
        self.compose = ComposeManager(client, self, self.attachments)
        self.search = SearchNavigator(client, self, top=search_top)
        self.actions = MessageActions(client, self)

    @classmethod
    def from_config(cls, config: MailpaneConfig) -> "Mailbox":
        defaults = get_defaults(config)
        return cls(
            MailProviderClient.from_config(config),
            default_folder=defaults["folder"],
            search_top=defaults["search_top"],
        )

    @property
    def client(self) -> MailProviderClient:
        return self._client

    @property
    def index(self) -> ConversationIndex:
        return self.selection.index

    @property
    def busy(self) -> bool:
        """A compose operation or message action is in flight."""
        return self.compose.busy or self.actions.busy

    # --- errors ---

    def report_error(self, error: Exception | str) -> None:
        """Record the current error, replacing any previous one."""
        self.error = str(error)
        logger.info("Error recorded: %s", self.error)

    def clear_error(self) -> None:
        self.error = None

    # --- loading ---

    def reload(self) -> ConversationIndex:
        """Fetch all conversations and install them as the new index.

        Raises:
            MailpaneError: If the fetch fails; the current index is kept.
        """
        conversations = self._client.list_conversations()
        index = build_index(conversations)
        self.selection.update_index(index, reset=True)
        logger.debug(
            "Loaded %d conversations in %d folders", len(index), len(index.folders)
        )
        return index

    def refresh(self) -> bool:
        """Full conversation refresh with error reporting.

        On failure the error is kept for display and the caller retries by
        calling refresh() again.

        Returns:
            True if the conversations were loaded.
        """
        self.loading = True
        self.clear_error()
        try:
            self.reload()
        except MailpaneError as e:
            self.report_error(e)
            return False
        finally:
            self.loading = False
        return True

    def merge_conversation(
        self, folder: str, conversation_id: str, messages: list[Message]
    ) -> None:
        """Add one conversation to the index without touching the others."""
        self.selection.update_index(
            self.index.merge(folder, conversation_id, messages), reset=False
        )

    # --- reading ---

    def set_folder(self, folder: str) -> None:
        self.selection.set_folder(folder)

    def select_conversation(self, conversation_id: str) -> bool:
        return self.selection.select_conversation(conversation_id)

    def summaries(self, folder: str | None = None) -> list[ConversationSummary]:
        """Conversation list rows of a folder (the selected one by default)."""
        return self.index.summaries(folder or self.selection.folder)

    def selected_thread(self) -> list[Message] | None:
        """Messages of the selected conversation, oldest first."""
        conversation_id = self.selection.conversation_id
        if conversation_id is None:
            return None
        return self.index.thread(self.selection.folder, conversation_id)

    def find_message(self, message_id: str) -> Message | None:
        return self.index.find_message(message_id)

    def clear_search(self) -> None:
        self.search.clear()
