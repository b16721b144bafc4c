"""Command-line interface for CodeMaker."""
