"""Conversation index: folder -> conversationId -> messages.

The provider already groups messages by folder and conversation; the index
owns that structure as client state. An index is never mutated after it is
built: a full refresh builds a new one and an incremental merge returns a
copy, so readers always see a complete snapshot.
"""

from dataclasses import dataclass

from mailpane.models import Message

DEFAULT_FOLDER = "Inbox"

# Folders shown in the mailbox sidebar, in display order
FOLDERS = ["Inbox", "Sent Items", "Drafts", "Archive"]

# Provider folder names (well-known ids and display names) -> display names
FOLDER_NAME_MAP = {
    "Inbox": "Inbox",
    "Sent Items": "Sent Items",
    "SentItems": "Sent Items",
    "Drafts": "Drafts",
    "Archive": "Archive",
    "Deleted Items": "Deleted Items",
    "DeletedItems": "Deleted Items",
    "Junk Email": "Junk Email",
    "JunkEmail": "Junk Email",
}

PREVIEW_LENGTH = 60


def normalize_folder_name(name: str | None) -> str:
    """Map a provider folder name onto the name used as an index key.

    Messages without a folder are treated as Inbox messages; unknown
    folder names pass through unchanged.
    """
    if not name:
        return DEFAULT_FOLDER
    return FOLDER_NAME_MAP.get(name, name)


def sort_thread(messages: list[Message]) -> list[Message]:
    """Order a conversation oldest-first for display."""
    return sorted(messages, key=lambda m: m.received_at)


def latest_message(messages: list[Message]) -> Message | None:
    """Most recently received message, regardless of list order."""
    if not messages:
        return None
    return max(messages, key=lambda m: m.received_at)


def is_unread(messages: list[Message]) -> bool:
    """A conversation is unread while any of its messages is unread."""
    return any(not m.is_read for m in messages)


def preview_text(text: str, limit: int = PREVIEW_LENGTH) -> str:
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


@dataclass(frozen=True)
class ConversationSummary:
    """One row of the conversation list."""

    conversation_id: str
    latest: Message
    message_count: int
    unread: bool

    @property
    def preview(self) -> str:
        return preview_text(self.latest.body_preview or "No preview available")


class ConversationIndex:
    """Read-only snapshot of the mailbox's threaded conversations.

    Folder and conversation order follow insertion order of the mapping the
    index was built from, which is the provider's order.

    Example:
        index = ConversationIndex(client.list_conversations())
        first = index.default_conversation("Inbox")
        thread = index.thread("Inbox", first)
    """

    def __init__(self, conversations: dict[str, dict[str, list[Message]]] | None = None):
        self._folders: dict[str, dict[str, list[Message]]] = {
            folder: {cid: list(messages) for cid, messages in (convos or {}).items()}
            for folder, convos in (conversations or {}).items()
        }

    def __contains__(self, folder: str) -> bool:
        return folder in self._folders

    def __len__(self) -> int:
        return sum(len(convos) for convos in self._folders.values())

    @property
    def folders(self) -> list[str]:
        return list(self._folders)

    def conversation_ids(self, folder: str) -> list[str]:
        """Conversation ids of a folder; empty for a missing folder."""
        return list(self._folders.get(folder, {}))

    def contains(self, folder: str, conversation_id: str) -> bool:
        return conversation_id in self._folders.get(folder, {})

    def messages(self, folder: str, conversation_id: str) -> list[Message]:
        """Messages of a conversation in provider order."""
        return list(self._folders.get(folder, {}).get(conversation_id, []))

    def default_conversation(self, folder: str) -> str | None:
        """First conversation of the folder in insertion order, if any."""
        return next(iter(self._folders.get(folder, {})), None)

    def locate(self, conversation_id: str) -> str | None:
        """Name of the first folder holding the conversation, if loaded."""
        for folder, convos in self._folders.items():
            if conversation_id in convos:
                return folder
        return None

    def find_message(self, message_id: str) -> Message | None:
        for convos in self._folders.values():
            for messages in convos.values():
                for message in messages:
                    if message.id == message_id:
                        return message
        return None

    def thread(self, folder: str, conversation_id: str) -> list[Message]:
        """Messages of a conversation ordered oldest-first.

        Computed on every call from the stored messages, never cached.
        """
        return sort_thread(self.messages(folder, conversation_id))

    def summaries(self, folder: str) -> list[ConversationSummary]:
        """Conversation list rows for a folder, in index order."""
        rows = []
        for cid, messages in self._folders.get(folder, {}).items():
            latest = latest_message(messages)
            if latest is None:
                continue
            rows.append(
                ConversationSummary(
                    conversation_id=cid,
                    latest=latest,
                    message_count=len(messages),
                    unread=is_unread(messages),
                )
            )
        return rows

    def merge(
        self, folder: str, conversation_id: str, messages: list[Message]
    ) -> "ConversationIndex":
        """Return a new index with one conversation inserted or replaced.

        Every other folder and conversation is carried over untouched. An
        existing conversation keeps its position; a new one is appended.
        """
        merged = ConversationIndex()
        merged._folders = {f: dict(convos) for f, convos in self._folders.items()}
        merged._folders.setdefault(folder, {})[conversation_id] = list(messages)
        return merged


def build_index(conversations: dict[str, dict[str, list[Message]]] | None) -> ConversationIndex:
    """Build an index from the provider's folder -> conversation grouping.

    Missing or empty input yields an empty index rather than an error.
    """
    return ConversationIndex(conversations or {})
