"""Recipient parsing for free-text address fields.

Turns ``"Alice <alice@example.com>, bob@example.com; Carol <carol@example.com>"``
into an ordered list of Recipient records. Addresses are not validated here;
the provider rejects malformed ones.
"""

import re

from mailpane.models import Recipient

# Separators between recipients
_SPLIT_RE = re.compile(r"[,;]")

# "Display Name <address>"
_NAME_ADDRESS_RE = re.compile(r"^(.+?)\s*<(.+?)>$")


def parse_emails(text: str) -> list[Recipient]:
    """Parse a comma- or semicolon-separated recipient field.

    Each token of the form ``Name <address>`` yields both parts trimmed;
    any other token is taken whole as an address with an empty name.
    Empty tokens are dropped and input order is preserved.

    Args:
        text: Raw field content as typed by the user.

    Returns:
        List of recipients, empty for empty input.
    """
    recipients = []
    for token in _SPLIT_RE.split(text or ""):
        token = token.strip()
        if not token:
            continue

        match = _NAME_ADDRESS_RE.match(token)
        if match:
            recipients.append(
                Recipient(name=match.group(1).strip(), address=match.group(2).strip())
            )
        else:
            recipients.append(Recipient(name="", address=token))

    return recipients


def format_recipient(recipient: Recipient) -> str:
    """Render a recipient back into ``Name <address>`` (or bare address) form."""
    if recipient.name:
        return f"{recipient.name} <{recipient.address}>"
    return recipient.address


def format_recipients(recipients: list[Recipient]) -> str:
    """Render recipients as the comma-separated text the parser accepts."""
    return ", ".join(format_recipient(r) for r in recipients)
