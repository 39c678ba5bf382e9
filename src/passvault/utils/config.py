"""
Configuration file loading.

config.toml:
    data_file = "~/.passvault/vault.enc"
    log_level = "INFO"              # optional
    min_passphrase_length = 12      # optional, enforced by the CLI on new passphrases
"""
import logging
import tomllib

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from passvault.utils.errors import ConfigError

DEFAULT_CONFIG_FILE = "config.toml"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class VaultConfig(BaseModel):
    """Validated passvault configuration."""

    data_file: Path
    log_level: str = Field(default="WARNING")
    min_passphrase_length: int = Field(default=1, ge=0)

    @field_validator("data_file", mode="before")
    @classmethod
    def validate_data_file(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("data_file must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_config(config_path: str | Path) -> VaultConfig:
    """Read and validate a TOML config file.

    Relative data_file paths are resolved against the config file's directory.

    Raises:
        ConfigError: the file is missing, not valid TOML, or fails validation.
    """
    path = Path(config_path)
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Error reading config file: {path} not found") from None
    except OSError as e:
        raise ConfigError(f"Error reading config file: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Error parsing config file: {e}") from e

    try:
        config = VaultConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Error parsing config file: {e}") from e

    data_file = config.data_file.expanduser()
    if not data_file.is_absolute():
        data_file = path.parent / data_file
    return config.model_copy(update={"data_file": data_file})
