"""Command-line interface for mailpane."""
