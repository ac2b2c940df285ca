"""Error types raised while talking to the mail provider."""


class MailpaneError(Exception):
    """Base class for errors surfaced to the mailbox user."""

    pass


class AuthenticationMissingError(MailpaneError):
    """No session token is available; no request was attempted."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No authentication token found. Please authenticate with Microsoft first."
        )


class ProviderError(MailpaneError):
    """The provider answered with a non-2xx status or could not be reached.

    Attributes:
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AttachmentFileError(MailpaneError):
    """A local attachment file could not be read or written."""

    pass
