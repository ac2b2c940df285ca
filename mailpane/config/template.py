"""Default configuration template.

This template is written to ~/.config/mailpane/config.toml
when running `mailpane config init`.
"""

CONFIG_TEMPLATE = """\
# Mailpane Configuration

[provider]
# Integration API that fronts the Outlook mailbox.
base_url = "http://localhost:8000/api/integration"
timeout = 30

[defaults]
folder = "Inbox"
search_top = 50
download_dir = "."

# The API expects a session token issued by the Microsoft sign-in flow.
# Store it once with:
#   mailpane auth login --token <session-token>
# or export MAILPANE_SESSION_TOKEN for a single shell.
"""
