"""Attachment listing, download, upload and removal for one message.

The manager does not know which attachment list is on screen; callers that
remove attachments refresh whichever list they show. Restricting add/remove
to drafts is the caller's policy, the provider enforces it again.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from mailpane.models import Attachment
from mailpane.provider import MailpaneError, MailProviderClient

if TYPE_CHECKING:
    from mailpane.mailbox import Mailbox

logger = logging.getLogger(__name__)


class AttachmentManager:
    """Attachment operations against the provider.

    Failures are written to the mailbox's error state and reported through
    the return value; nothing is raised to the caller.

    Attributes:
        attachments: Result of the most recent list_attachments() call.
        message_id: Message that list was fetched for.
        loading: A list request is in flight.
        uploading: An upload is in flight.
    """

    def __init__(self, client: MailProviderClient, mailbox: "Mailbox"):
        self._client = client
        self._mailbox = mailbox
        self.attachments: list[Attachment] = []
        self.message_id: str | None = None
        self.loading = False
        self.uploading = False

    def fetch(self, message_id: str) -> list[Attachment]:
        """Fetch attachment metadata, raising on failure.

        Raises:
            MailpaneError: If the message id is empty or the request fails.
        """
        if not message_id:
            raise MailpaneError("Message ID is required to fetch attachments")
        attachments = self._client.list_attachments(message_id)
        self.attachments = attachments
        self.message_id = message_id
        return attachments

    def list_attachments(self, message_id: str) -> list[Attachment] | None:
        """Fetch the attachment list for a message.

        Returns:
            The attachments, or None if the request failed.
        """
        self.loading = True
        try:
            return self.fetch(message_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return None
        finally:
            self.loading = False

    def download(
        self,
        message_id: str,
        attachment_id: str,
        file_name: str,
        directory: Path,
    ) -> Path | None:
        """Download an attachment and save it under its display name.

        Args:
            message_id: Message owning the attachment.
            attachment_id: Attachment to fetch.
            file_name: Display name to save the file as.
            directory: Directory to write the file into.

        Returns:
            Path of the saved file, or None on failure.
        """
        if not message_id or not attachment_id:
            self._mailbox.report_error("Invalid message ID or attachment ID")
            return None

        try:
            content = self._client.download_attachment(message_id, attachment_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return None

        # Only the final path component of the display name is used
        target = directory / (Path(file_name).name or attachment_id)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            self._mailbox.report_error(f"Failed to save {target.name}: {e}")
            return None

        logger.info("Saved attachment %s (%d bytes)", target, len(content))
        return target

    def upload(self, message_id: str, path: Path, *, refresh_list: bool = True) -> bool:
        """Upload a local file to a message or draft.

        Args:
            message_id: Draft to attach the file to.
            path: Local file to upload.
            refresh_list: Re-fetch the attachment list afterwards. Batch
                callers pass False and refresh once at the end.

        Returns:
            True if the upload succeeded.
        """
        self.uploading = True
        try:
            self._client.upload_attachment(message_id, path)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.uploading = False

        logger.debug("Attached %s to %s", path.name, message_id)
        if refresh_list:
            self.list_attachments(message_id)
        return True

    def remove(self, message_id: str, attachment_id: str) -> bool:
        """Delete an attachment. The caller refreshes the list it shows."""
        try:
            self._client.delete_attachment(message_id, attachment_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        return True
