"""Mail-provider API access.

Usage:
    from mailpane.provider import MailProviderClient, ProviderError

    client = MailProviderClient("http://localhost:8000/api/integration")
    messages = client.get_conversation("AAQkAGI2...")
"""

from .client import ConversationsByFolder, MailProviderClient, error_message_from_response
from .errors import (
    AttachmentFileError,
    AuthenticationMissingError,
    MailpaneError,
    ProviderError,
)

__all__ = [
    "ConversationsByFolder",
    "MailProviderClient",
    "error_message_from_response",
    "MailpaneError",
    "AuthenticationMissingError",
    "ProviderError",
    "AttachmentFileError",
]
