"""Provider-side search and navigation from a result to its conversation.

Navigating to a result resolves its conversation in three steps:

1. the conversation is already in the loaded index: select it, no request;
2. otherwise fetch that one conversation, file it under the folder of its
   first message and merge it into the index;
3. if that fetch fails, reload every conversation and look again. When the
   conversation is still missing it is left as the pending selection
   target so the user is not stuck, and the fetch error is reported.
"""

import logging
from typing import TYPE_CHECKING

from mailpane.conversations import normalize_folder_name
from mailpane.models import Message
from mailpane.provider import MailpaneError, MailProviderClient, ProviderError

if TYPE_CHECKING:
    from mailpane.mailbox import Mailbox

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TOP = 50


class SearchNavigator:
    """Search state plus result-to-conversation navigation.

    Attributes:
        query: Query of the results currently shown.
        results: Messages returned by the last search.
        active: True while search results replace the conversation list.
        searching: A search request is in flight.
    """

    def __init__(
        self,
        client: MailProviderClient,
        mailbox: "Mailbox",
        top: int = DEFAULT_SEARCH_TOP,
    ):
        self._client = client
        self._mailbox = mailbox
        self._top = top
        self.query = ""
        self.results: list[Message] = []
        self.active = False
        self.searching = False

    def search(self, query: str, top: int | None = None) -> list[Message] | None:
        """Search the mailbox on the provider.

        A blank query leaves search mode without any request.

        Args:
            query: Free-text query passed to the provider.
            top: Maximum number of results; the configured default if None.

        Returns:
            The matching messages, or None if the search failed.
        """
        if not query.strip():
            self.clear()
            return []

        self.searching = True
        self._mailbox.clear_error()
        try:
            results = self._client.search(query.strip(), top=top or self._top)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return None
        finally:
            self.searching = False

        logger.debug("Search %r returned %d results", query, len(results))
        self.query = query
        self.results = results
        self.active = True
        return results

    def clear(self) -> None:
        """Leave search mode and clear the selected conversation."""
        self._leave_search_mode()
        self._mailbox.selection.clear_conversation()

    def _leave_search_mode(self) -> None:
        self.query = ""
        self.results = []
        self.active = False

    def navigate_to_result(self, message: Message) -> bool:
        """Show the conversation a search result belongs to.

        Returns:
            True if the conversation ended up selected, False if it is only
            pending or navigation failed.
        """
        self._leave_search_mode()
        conversation_id = message.conversation_id
        selection = self._mailbox.selection

        folder = self._mailbox.index.locate(conversation_id)
        if folder is not None:
            logger.debug("Conversation %s already loaded in %s", conversation_id, folder)
            return selection.navigate_to(folder, conversation_id)

        self._mailbox.loading = True
        try:
            try:
                messages = self._client.get_conversation(conversation_id)
                if not messages:
                    raise ProviderError("No messages found in conversation")
            except MailpaneError as e:
                logger.warning(
                    "Fetching conversation %s failed (%s); reloading all conversations",
                    conversation_id,
                    e,
                )
                return self._navigate_after_reload(conversation_id, e)

            folder = normalize_folder_name(messages[0].original_folder)
            self._mailbox.merge_conversation(folder, conversation_id, messages)
            return selection.navigate_to(folder, conversation_id)
        finally:
            self._mailbox.loading = False

    def _navigate_after_reload(self, conversation_id: str, cause: MailpaneError) -> bool:
        try:
            index = self._mailbox.reload()
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False

        self._mailbox.report_error(cause)
        selection = self._mailbox.selection

        folder = index.locate(conversation_id)
        if folder is not None:
            return selection.navigate_to(folder, conversation_id)

        logger.warning("Conversation %s not found after reload", conversation_id)
        selection.navigate_to(selection.folder, conversation_id)
        return False
