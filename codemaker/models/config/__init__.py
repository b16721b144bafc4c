"""Configuration models for CodeMaker."""

from codemaker.models.config.settings import *

__all__ = ["CLIConfig", "StoredCLIConfig", "DEFAULT_ENDPOINT"]
