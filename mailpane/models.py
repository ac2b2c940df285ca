"""Data models for mailbox messages, attachments and the compose buffer.

The provider speaks Microsoft Graph-flavoured camelCase JSON; each model
has a ``from_dict`` that accepts that shape and a ``to_dict`` producing the
request payload the integration API expects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

HTML = "HTML"
TEXT = "Text"

DRAFTS_FOLDER = "Drafts"

# Sorts messages with unparseable timestamps first
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class Recipient:
    """A single addressee: display name (may be empty) and address."""

    name: str = ""
    address: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Recipient":
        """Build from either ``{emailAddress: {name, address}}`` or ``{name, address}``."""
        if "emailAddress" in data and isinstance(data["emailAddress"], dict):
            data = data["emailAddress"]
        return cls(
            name=data.get("name") or "",
            address=data.get("address") or "",
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "address": self.address}


@dataclass
class Body:
    """Message body with its content type (``HTML`` or ``Text``)."""

    content_type: str = HTML
    content: str = ""

    @classmethod
    def from_dict(cls, data: dict | None) -> "Body":
        if not data:
            return cls()
        return cls(
            content_type=data.get("contentType") or HTML,
            content=data.get("content") or "",
        )

    def to_dict(self) -> dict:
        return {"contentType": self.content_type, "content": self.content}


@dataclass
class Message:
    """One email as returned by the provider.

    ``sender`` is None for drafts, which have no ``from`` yet.
    ``original_folder`` is the folder this copy currently lives in.
    """

    id: str
    conversation_id: str
    subject: str = ""
    sender: Recipient | None = None
    to_recipients: list[Recipient] = field(default_factory=list)
    body_preview: str = ""
    body: Body = field(default_factory=Body)
    received_date_time: str = ""
    is_read: bool = True
    has_attachments: bool = False
    original_folder: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        sender = data.get("from")
        return cls(
            id=data.get("id", ""),
            conversation_id=data.get("conversationId", ""),
            subject=data.get("subject") or "",
            sender=Recipient.from_dict(sender) if sender else None,
            to_recipients=[
                Recipient.from_dict(r) for r in data.get("toRecipients") or []
            ],
            body_preview=data.get("bodyPreview") or "",
            body=Body.from_dict(data.get("body")),
            received_date_time=data.get("receivedDateTime") or "",
            is_read=bool(data.get("isRead", True)),
            has_attachments=bool(data.get("hasAttachments", False)),
            original_folder=data.get("originalFolder"),
        )

    @property
    def received_at(self) -> datetime:
        """Parsed ``receivedDateTime``; epoch when missing or malformed."""
        if not self.received_date_time:
            return _EPOCH
        try:
            parsed = datetime.fromisoformat(
                self.received_date_time.replace("Z", "+00:00")
            )
        except ValueError:
            return _EPOCH
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @property
    def sender_name(self) -> str:
        """Name shown in the conversation list for this message."""
        if self.sender is None:
            if self.original_folder == DRAFTS_FOLDER:
                return "Draft"
            return "Unknown"
        return self.sender.name or self.sender.address or "Unknown"

    @property
    def is_draft(self) -> bool:
        return self.original_folder == DRAFTS_FOLDER


@dataclass
class Attachment:
    """Attachment metadata; content is only fetched on download."""

    id: str
    name: str
    content_type: str = "application/octet-stream"
    size: int = 0
    is_inline: bool = False
    content_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "attachment",
            content_type=data.get("contentType") or "application/octet-stream",
            size=int(data.get("size") or 0),
            is_inline=bool(data.get("isInline", False)),
            content_id=data.get("contentId"),
        )


@dataclass
class ComposeState:
    """Editing buffer for a new message or a draft being edited.

    ``attachments`` holds local files that have not been uploaded yet.
    """

    subject: str = ""
    body: Body = field(default_factory=Body)
    to_recipients: list[Recipient] = field(default_factory=list)
    cc_recipients: list[Recipient] = field(default_factory=list)
    bcc_recipients: list[Recipient] = field(default_factory=list)
    save_to_sent_items: bool = True
    attachments: list[Path] = field(default_factory=list)

    @property
    def has_pending_attachments(self) -> bool:
        return len(self.attachments) > 0

    @property
    def is_empty(self) -> bool:
        """True when there is neither a subject nor body text to save."""
        return not self.subject.strip() and not self.body.content.strip()

    def draft_payload(self) -> dict:
        """Payload for draft create/update; never carries attachments."""
        return {
            "subject": self.subject,
            "body": self.body.to_dict(),
            "toRecipients": [r.to_dict() for r in self.to_recipients],
            "ccRecipients": [r.to_dict() for r in self.cc_recipients],
            "bccRecipients": [r.to_dict() for r in self.bcc_recipients],
        }

    def send_payload(self) -> dict:
        """Payload for the direct send endpoint."""
        payload = self.draft_payload()
        payload["saveToSentItems"] = self.save_to_sent_items
        return payload


def format_file_size(size: int) -> str:
    """Render a byte count as ``0 Bytes``, ``12.5 KB``, ``3 MB`` and so on."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    value = float(size)
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[exponent]}"
