"""Reply, forward, move and delete for a single message."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from mailpane.models import Message
from mailpane.provider import MailpaneError, MailProviderClient
from mailpane.recipients import parse_emails

if TYPE_CHECKING:
    from mailpane.mailbox import Mailbox

logger = logging.getLogger(__name__)

# Well-known folder ids accepted by the move endpoint -> display names
MOVE_DESTINATIONS = {
    "inbox": "Inbox",
    "sentitems": "Sent Items",
    "drafts": "Drafts",
    "archive": "Archive",
    "deleteditems": "Deleted Items",
    "junkemail": "Junk Email",
}


class MessageActions:
    """Provider actions on an existing message.

    The four actions share one in-flight flag. Inputs are left to the
    caller, so a failed action can be retried with the same text.
    """

    def __init__(self, client: MailProviderClient, mailbox: "Mailbox"):
        self._client = client
        self._mailbox = mailbox
        self.busy = False

    def reply(self, message: Message, comment: str) -> bool:
        if not comment.strip():
            return False
        return self._run(
            "reply", lambda: self._client.reply(message.id, comment)
        )

    def forward(self, message: Message, to_text: str, comment: str = "") -> bool:
        """Forward a message to the recipients typed in ``to_text``."""
        recipients = parse_emails(to_text)
        if not recipients:
            return False
        return self._run(
            "forward",
            lambda: self._client.forward(
                message.id, [r.to_dict() for r in recipients], comment
            ),
        )

    def move(self, message: Message, destination: str) -> bool:
        """Move a message to one of MOVE_DESTINATIONS."""
        if destination not in MOVE_DESTINATIONS:
            self._mailbox.report_error(f"Unknown destination folder: {destination}")
            return False
        return self._run(
            "move", lambda: self._client.move(message.id, destination)
        )

    def delete(self, message: Message) -> bool:
        return self._run("delete", lambda: self._client.delete_message(message.id))

    def _run(self, action: str, call: Callable[[], None]) -> bool:
        if self._mailbox.busy:
            return False

        self.busy = True
        try:
            call()
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.busy = False

        logger.info("%s succeeded", action.capitalize())
        self._mailbox.refresh()
        return True
