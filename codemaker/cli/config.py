"""Configuration management for the CodeMaker CLI."""

from codemaker.core.service import CodeMakerService
from codemaker.models.config import CLIConfig

# Global configuration instance
_config: CLIConfig | None = None


def get_config() -> CLIConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CLIConfig.load_from_file()
    return _config


def set_config(config: CLIConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def get_service() -> CodeMakerService:
    """Create a service bound to the current configuration."""
    return CodeMakerService(get_config())
