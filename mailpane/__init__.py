"""Mailbox conversation engine for the CRM Outlook integration."""

__version__ = "0.1.0"
