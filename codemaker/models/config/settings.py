"""CLI configuration models."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codemaker.models.api.common import LanguageCode

DEFAULT_ENDPOINT = "https://api.codemaker.ai"


class CLIConfig(BaseSettings):
    """Main CLI configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CODEMAKER_",
        env_file=".env",
        extra="ignore",
    )

    # Service settings
    endpoint: str = DEFAULT_ENDPOINT
    api_key: str | None = None
    model: str | None = None
    language_code: LanguageCode | None = None
    request_timeout: float = Field(default=60.0, gt=0)

    # Extended source context
    extended_source_context_enabled: bool = True
    extended_source_context_depth: int = Field(default=16, ge=1, le=100)

    # CLI settings
    log_level: str = "WARNING"
    log_file: Path | None = None
    verbose: bool = False
    color: bool = True
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".codemaker")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment variables take precedence over values loaded from file
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint is an http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must be an http:// or https:// URL")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @classmethod
    def default_path(cls) -> Path:
        return Path.home() / ".codemaker" / "config.yaml"

    @classmethod
    def load_from_file(cls, config_path: Path | None = None) -> "CLIConfig":
        """Load configuration from file."""
        import yaml

        if config_path is None:
            config_path = cls.default_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}

            return cls(**{k: v for k, v in config_data.items() if v is not None})
        except Exception:
            # If config file is invalid, return default config
            return cls()

    def save_to_file(self, config_path: Path | None = None) -> Path:
        """Save configuration to file."""
        import yaml

        if config_path is None:
            config_path = self.config_dir / "config.yaml"

        # Create config directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json")

        with open(config_path, "w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False)

        return config_path


class StoredCLIConfig(CLIConfig):
    """CLIConfig built only from the given values, ignoring the environment.

    Used when writing the configuration file, so variables such as
    CODEMAKER_API_KEY are never copied into it.
    """

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (init_settings,)


__all__ = ["CLIConfig", "StoredCLIConfig", "DEFAULT_ENDPOINT"]
