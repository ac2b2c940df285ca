"""HTTP client for the Outlook integration API.

Wraps the CRM's mail-provider endpoints to provide a clean interface for
the mailbox engine. Handles the bearer token, the ``{"data": ...}``
response envelope, error-message extraction and data transformation into
the models in ``mailpane.models``.
"""

import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path

import requests

from mailpane import auth
from mailpane.config import get_provider_settings
from mailpane.config.schema import MailpaneConfig
from mailpane.models import Attachment, Message
from mailpane.provider.errors import (
    AttachmentFileError,
    AuthenticationMissingError,
    ProviderError,
)

logger = logging.getLogger(__name__)

# (folder name) -> (conversationId) -> messages, in provider order
ConversationsByFolder = dict[str, dict[str, list[Message]]]

TokenProvider = Callable[[], str | None]


def error_message_from_response(
    response: requests.Response, fallback: str | None = None
) -> str:
    """Build a human-readable message for a failed response.

    JSON error bodies carry a ``message`` field. Anything else (an HTML 404
    page from a proxy, an empty body) is described by status and reason, so
    a non-JSON body is never handed to the JSON parser.

    Args:
        response: The failed HTTP response.
        fallback: Operation message for a JSON body without a ``message``
            field; the HTTP status is appended to it.

    Returns:
        Error message suitable for showing to the user.
    """
    status_text = f"HTTP {response.status_code}: {response.reason or 'Error'}"
    content_type = response.headers.get("Content-Type", "")

    if "application/json" in content_type:
        try:
            payload = response.json()
        except ValueError:
            return status_text
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        if fallback:
            return f"{fallback} ({status_text})"
        return status_text

    return status_text


def _unwrap(payload: object) -> dict:
    """Strip the ``{"data": ...}`` envelope when present."""
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            return data
        return payload
    return {}


class MailProviderClient:
    """Client for the mail-provider API.

    One method per provider endpoint. Every call first checks for a session
    token and raises AuthenticationMissingError without touching the
    network when there is none. Non-2xx answers and transport failures
    raise ProviderError.

    Example:
        client = MailProviderClient("http://localhost:8000/api/integration")
        conversations = client.list_conversations()
        inbox = conversations.get("Inbox", {})
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Root URL of the integration API.
            token_provider: Callable returning the current session token;
                defaults to the stored session token.
            timeout: Per-request timeout in seconds.
            session: Optional requests session (shared connection pool).
        """
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider or auth.load_session_token
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: MailpaneConfig) -> "MailProviderClient":
        """Build a client from the [provider] config section."""
        settings = get_provider_settings(config)
        return cls(settings["base_url"], timeout=settings["timeout"])

    # --- HTTP helpers ---

    def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        params: dict | None = None,
        json: dict | None = None,
        files: dict | None = None,
    ) -> requests.Response:
        token = self._token_provider()
        if not token:
            raise AuthenticationMissingError()

        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Authorization": f"Bearer {token}"}
        logger.debug("%s %s", method, url)

        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                files=files,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"{failure}: {e}") from e

        if not response.ok:
            message = error_message_from_response(response, fallback=failure)
            logger.debug("%s %s failed: %s", method, url, message)
            raise ProviderError(message, response.status_code)

        return response

    def _json(self, response: requests.Response) -> dict:
        # 202/204 answers carry no body
        if not response.content:
            return {}
        try:
            return _unwrap(response.json())
        except ValueError:
            return {}

    # --- conversations and search ---

    def list_conversations(self) -> ConversationsByFolder:
        """Fetch every folder's messages, grouped server-side into threads.

        Returns:
            Mapping of folder name to conversationId to messages, in the
            order the provider returned them.
        """
        response = self._request(
            "GET",
            "messages",
            params={"threaded": "true"},
            failure="Failed to fetch conversations",
        )
        raw = self._json(response).get("conversations") or {}

        return {
            folder: {
                conversation_id: [Message.from_dict(m) for m in messages or []]
                for conversation_id, messages in (conversations or {}).items()
            }
            for folder, conversations in raw.items()
        }

    def get_conversation(self, conversation_id: str) -> list[Message]:
        """Fetch all messages of one conversation."""
        response = self._request(
            "GET",
            f"conversations/{conversation_id}",
            failure="Failed to fetch conversation",
        )
        messages = self._json(response).get("messages") or []
        return [Message.from_dict(m) for m in messages]

    def search(self, query: str, top: int = 50) -> list[Message]:
        """Run a provider-side search over the whole mailbox."""
        response = self._request(
            "GET",
            "search",
            params={"query": query, "top": str(top)},
            failure="Failed to search emails",
        )
        emails = self._json(response).get("emails") or []
        return [Message.from_dict(m) for m in emails]

    # --- sending and drafts ---

    def send_mail(self, payload: dict) -> None:
        """Send a message directly (no attachments)."""
        self._request("POST", "send", json=payload, failure="Failed to send email")

    def create_draft(self, payload: dict) -> str:
        """Create a draft and return its id.

        Raises:
            ProviderError: If the provider does not return a draft id.
        """
        response = self._request(
            "POST", "drafts", json=payload, failure="Failed to create draft"
        )
        draft_id = self._json(response).get("id")
        if not draft_id:
            raise ProviderError("No draft ID returned from server")
        return draft_id

    def update_draft(self, draft_id: str, payload: dict) -> None:
        self._request(
            "PATCH",
            f"drafts/{draft_id}",
            json=payload,
            failure="Failed to update draft",
        )

    def send_draft(self, draft_id: str) -> None:
        self._request(
            "POST", f"drafts/{draft_id}/send", failure="Failed to send draft"
        )

    # --- message actions ---

    def reply(self, message_id: str, comment: str) -> None:
        self._request(
            "POST",
            "reply",
            json={"messageId": message_id, "comment": comment},
            failure="Failed to reply to email",
        )

    def forward(self, message_id: str, to_recipients: list[dict], comment: str) -> None:
        self._request(
            "POST",
            "forward",
            json={
                "messageId": message_id,
                "toRecipients": to_recipients,
                "comment": comment,
            },
            failure="Failed to forward email",
        )

    def move(self, message_id: str, destination_id: str) -> None:
        self._request(
            "POST",
            "move",
            json={"messageId": message_id, "destinationId": destination_id},
            failure="Failed to move email",
        )

    def delete_message(self, message_id: str) -> None:
        self._request(
            "DELETE", f"message/{message_id}", failure="Failed to delete email"
        )

    # --- attachments ---

    def list_attachments(self, message_id: str) -> list[Attachment]:
        """Fetch attachment metadata (no content) for a message."""
        response = self._request(
            "GET",
            f"messages/{message_id}/attachments",
            failure="Failed to fetch attachments",
        )
        attachments = self._json(response).get("attachments") or []
        return [Attachment.from_dict(a) for a in attachments]

    def download_attachment(self, message_id: str, attachment_id: str) -> bytes:
        """Fetch the binary content of one attachment."""
        response = self._request(
            "GET",
            f"messages/{message_id}/attachments/{attachment_id}",
            failure="Failed to download attachment",
        )
        return response.content

    def upload_attachment(self, message_id: str, path: Path) -> dict:
        """Upload a local file as a multipart ``file`` field.

        Raises:
            AttachmentFileError: If the file cannot be read.
        """
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            with path.open("rb") as fh:
                response = self._request(
                    "POST",
                    f"messages/{message_id}/attachments",
                    files={"file": (path.name, fh, content_type)},
                    failure="Failed to add attachment",
                )
        except OSError as e:
            raise AttachmentFileError(f"Cannot read {path.name}: {e}") from e
        return self._json(response)

    def delete_attachment(self, message_id: str, attachment_id: str) -> None:
        self._request(
            "DELETE",
            f"messages/{message_id}/attachments/{attachment_id}",
            failure="Failed to remove attachment",
        )
