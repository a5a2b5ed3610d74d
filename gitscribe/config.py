"""gitscribe configuration management using Pydantic."""

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError

from gitscribe.constants import DEFAULT_CONFIG_PATH
from gitscribe.exceptions import ConfigurationError
from gitscribe.git.config import GitConfig


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="warn", pattern="^(debug|info|warn|error)$")
    directory: str | None = None
    json_output: bool = True


class ScribeConfig(BaseModel):
    """Complete gitscribe configuration."""

    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "ScribeConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Defaults to .gitscribe/config.yaml

        Returns:
            ScribeConfig instance, defaults if the file does not exist

        Raises:
            ConfigurationError: If the file is not valid YAML or fails validation
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}", details={"error": str(e)}
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScribeConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigurationError: If validation fails
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError("Invalid configuration", details={"errors": e.errors()}) from e

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to .gitscribe/config.yaml
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
