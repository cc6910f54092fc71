"""SDK configuration.

Configuration is loaded from an explicit YAML file; nothing is read from
the environment. Every field has a default so an empty file is valid.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from bridge_sdk.errors import ConfigError


class SDKConfig(BaseModel):
    """Module-wide settings shared by the archive and form builders."""

    password_min_length: int = 2
    password_max_length: int = 24
    confirmation_identifier: str = "confirmation"
    external_id_autocapitalization: str = "allCharacters"
    external_id_keyboard: str = "asciiCapable"
    archive_directory: Path | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_password_bounds(self) -> "SDKConfig":
        """Ensure the password length bounds form a valid range."""
        if self.password_min_length < 0:
            raise ValueError("'password_min_length' must not be negative")
        if self.password_max_length < self.password_min_length:
            raise ValueError("'password_max_length' must be >= 'password_min_length'")
        return self

    @property
    def password_regex(self) -> str:
        """Validation regex applied to registration passwords."""
        return f"[[:ascii:]]{{{self.password_min_length},{self.password_max_length}}}"


def get_default_config() -> SDKConfig:
    """Return a configuration with every setting at its default."""
    return SDKConfig()


def load_config(path: Path | str) -> SDKConfig:
    """Load an SDK configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The validated SDKConfig.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    try:
        return SDKConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
