"""Compose, draft and send lifecycle.

Modes:
    IDLE -> COMPOSING -> (send | save_draft) -> IDLE
    IDLE -> EDITING_DRAFT -> (update_draft | send_draft) -> IDLE

Sending with local attachments goes through a draft: create the draft,
upload each file to it in order, then send the draft. Any failure on that
path aborts the send and keeps the compose buffer as the user left it.
Saving or updating a draft treats attachment uploads as best-effort: a
failed upload is logged and reported after the draft itself is saved.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from mailpane.attachments import AttachmentManager
from mailpane.models import Attachment, Body, ComposeState, Message
from mailpane.provider import MailpaneError, MailProviderClient
from mailpane.recipients import format_recipients, parse_emails

if TYPE_CHECKING:
    from mailpane.mailbox import Mailbox

logger = logging.getLogger(__name__)

RECIPIENT_FIELDS = ("to", "cc", "bcc")


class ComposeMode(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    EDITING_DRAFT = "editing_draft"


class ComposeManager:
    """Owns the compose buffer and the send/draft operations.

    Each operation has its own in-flight flag so a UI can show which one is
    running. Every operation refuses to start while the mailbox is busy
    with any compose or message action, so two operations never overlap.

    Example:
        compose = mailbox.compose
        compose.open_compose()
        compose.set_recipients("to", "Alice <alice@example.com>")
        compose.state.subject = "Quarterly numbers"
        compose.add_attachments([Path("report.pdf")])
        compose.send()
    """

    def __init__(
        self,
        client: MailProviderClient,
        mailbox: "Mailbox",
        attachments: AttachmentManager,
    ):
        self._client = client
        self._mailbox = mailbox
        self._attachments = attachments

        self.state = ComposeState()
        self.mode = ComposeMode.IDLE
        self.draft: Message | None = None
        self.draft_attachments: list[Attachment] = []
        # Names of files whose upload failed during the last draft save/update
        self.attachment_failures: list[str] = []

        self.sending = False
        self.saving_draft = False
        self.updating_draft = False
        self.sending_draft = False

    # --- state ---

    @property
    def busy(self) -> bool:
        """Any compose operation is in flight."""
        return self.sending or self.saving_draft or self.updating_draft or self.sending_draft

    @property
    def can_send(self) -> bool:
        """At least one recipient and a subject; nothing else in flight."""
        return (
            self.mode is ComposeMode.COMPOSING
            and not self._mailbox.busy
            and len(self.state.to_recipients) > 0
            and bool(self.state.subject.strip())
        )

    @property
    def can_save_draft(self) -> bool:
        return (
            self.mode is ComposeMode.COMPOSING
            and not self._mailbox.busy
            and not self.state.is_empty
        )

    @property
    def can_update_draft(self) -> bool:
        return (
            self.mode is ComposeMode.EDITING_DRAFT
            and self.draft is not None
            and not self._mailbox.busy
            and not self.state.is_empty
        )

    def open_compose(self) -> None:
        """Start a new message with an empty buffer."""
        self._reset()
        self.mode = ComposeMode.COMPOSING

    def open_edit_draft(self, draft: Message) -> None:
        """Start editing an existing draft.

        The buffer is seeded from the draft. If the draft has attachments
        their list is fetched; a failure there is reported but the draft
        still opens, with an empty attachment list.
        """
        self._reset()
        self.state = ComposeState(
            subject=draft.subject,
            body=Body(content_type=draft.body.content_type, content=draft.body.content),
            to_recipients=list(draft.to_recipients),
        )
        self.draft = draft
        self.mode = ComposeMode.EDITING_DRAFT

        if draft.has_attachments:
            try:
                self.draft_attachments = self._attachments.fetch(draft.id)
            except MailpaneError as e:
                logger.warning("Could not load attachments of draft %s: %s", draft.id, e)
                self._mailbox.report_error(e)

    def close(self) -> None:
        """Discard the buffer and leave compose/edit mode."""
        self._reset()

    def _reset(self) -> None:
        self.state = ComposeState()
        self.mode = ComposeMode.IDLE
        self.draft = None
        self.draft_attachments = []

    def set_recipients(self, field: str, text: str) -> None:
        """Parse a free-text recipient field into the buffer.

        Args:
            field: One of "to", "cc" or "bcc".
            text: Comma/semicolon separated "Name <address>" entries.
        """
        if field not in RECIPIENT_FIELDS:
            raise ValueError(f"Unknown recipient field: {field}")
        setattr(self.state, f"{field}_recipients", parse_emails(text))

    def recipients_text(self, field: str) -> str:
        """Current recipients of a field rendered back as editable text."""
        if field not in RECIPIENT_FIELDS:
            raise ValueError(f"Unknown recipient field: {field}")
        return format_recipients(getattr(self.state, f"{field}_recipients"))

    def add_attachments(self, paths: list[Path]) -> None:
        self.state.attachments.extend(paths)

    def remove_pending_attachment(self, position: int) -> None:
        """Drop a not-yet-uploaded file from the buffer by list position."""
        self.state.attachments = [
            p for i, p in enumerate(self.state.attachments) if i != position
        ]

    # --- operations ---

    def send(self) -> bool:
        """Send the composed message.

        Without local attachments the direct send endpoint is used. With
        them, a draft is created (without an attachments field), each file
        is uploaded to it in order, and the draft is sent. Any failure stops
        the sequence and leaves the buffer untouched.

        Returns:
            True if the message was sent.
        """
        if not self.can_send:
            return False

        self.sending = True
        try:
            if self.state.has_pending_attachments:
                draft_id = self._client.create_draft(self.state.draft_payload())
                logger.debug("Created draft %s for send with attachments", draft_id)
                for path in self.state.attachments:
                    if not self._attachments.upload(draft_id, path, refresh_list=False):
                        raise MailpaneError(f"Failed to add attachment: {path.name}")
                self._client.send_draft(draft_id)
            else:
                self._client.send_mail(self.state.send_payload())
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.sending = False

        logger.info("Sent %r", self.state.subject)
        self.close()
        self._mailbox.refresh()
        return True

    def save_draft(self) -> bool:
        """Save the buffer as a new draft.

        Attachment uploads are best-effort: failures are collected in
        ``attachment_failures`` and reported after the save completes.

        Returns:
            True if the draft was created.
        """
        if not self.can_save_draft:
            return False

        self.saving_draft = True
        try:
            draft_id = self._client.create_draft(self.state.draft_payload())
            failures = self._upload_pending(draft_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.saving_draft = False

        self.close()
        self._mailbox.refresh()
        self._report_attachment_failures(failures)
        return True

    def update_draft(self) -> bool:
        """Write the buffer back to the draft being edited.

        Newly added local files are uploaded with the same best-effort
        policy as save_draft().

        Returns:
            True if the draft was updated.
        """
        if not self.can_update_draft:
            return False

        draft_id = self.draft.id
        self.updating_draft = True
        try:
            self._client.update_draft(draft_id, self.state.draft_payload())
            failures = self._upload_pending(draft_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.updating_draft = False

        self.close()
        self._mailbox.refresh()
        self._report_attachment_failures(failures)
        return True

    def send_draft(self, draft_id: str) -> bool:
        """Send an existing draft as-is, independent of the buffer.

        Returns:
            True if the draft was sent.
        """
        if self._mailbox.busy:
            return False

        self.sending_draft = True
        try:
            self._client.send_draft(draft_id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
            return False
        finally:
            self.sending_draft = False

        if self.draft is not None and self.draft.id == draft_id:
            self.close()
        self._mailbox.refresh()
        return True

    def remove_draft_attachment(self, attachment_id: str) -> bool:
        """Delete an uploaded attachment of the draft being edited."""
        if self.draft is None:
            return False
        if not self._attachments.remove(self.draft.id, attachment_id):
            return False
        try:
            self.draft_attachments = self._attachments.fetch(self.draft.id)
        except MailpaneError as e:
            self._mailbox.report_error(e)
        return True

    def _upload_pending(self, draft_id: str) -> list[str]:
        failures = []
        for path in self.state.attachments:
            if not self._attachments.upload(draft_id, path, refresh_list=False):
                logger.warning("Attachment %s was not added to draft %s", path.name, draft_id)
                failures.append(path.name)
        return failures

    def _report_attachment_failures(self, failures: list[str]) -> None:
        self.attachment_failures = failures
        if failures:
            self._mailbox.report_error(
                f"Draft saved, but failed to add attachment(s): {', '.join(failures)}"
            )
