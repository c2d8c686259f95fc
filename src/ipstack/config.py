"""
Configuration for the ipstack client.

Settings can come from the environment (including a ``.env`` file loaded
with python-dotenv) or from a JSON file, and are turned into a ready
client by build_client.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .client import DEFAULT_TIMEOUT_SECONDS, IPStackClient, create_default_transport
from .enums import LogLevel
from .exceptions import ConfigurationError
from .logger import StructuredLogger
from .options import with_debug, with_logger, with_transport


ENV_PREFIX = "IPSTACK_"
DEFAULT_CONFIG_PATH = Path.home() / ".ipstack" / "config.json"


@dataclass
class ClientConfig:
    """Settings needed to build a client."""

    access_key: str
    secure: bool = False
    debug: bool = False
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_format: str = "text"  # 'json', 'text', 'both'

    def validate(self) -> None:
        """
        Check the configuration for obvious mistakes.

        Raises:
            ConfigurationError: If a value is missing or out of range
        """
        if not self.access_key:
            raise ConfigurationError(
                code="missing_access_key",
                message="No API Key was specified.",
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                code="invalid_timeout",
                message=f"Timeout must be positive, got {self.timeout_seconds}",
            )
        if self.log_format not in ("json", "text", "both"):
            raise ConfigurationError(
                code="invalid_log_format",
                message=f"Invalid log format: {self.log_format}",
            )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return _parse_bool(value)


def _bool_field(data: dict, name: str) -> bool:
    """Read a boolean config field, accepting the same strings as the environment."""
    value = data.get(name, False)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(value)
    raise TypeError(f"'{name}' must be a boolean, got {value!r}")


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(
            code="invalid_timeout",
            message=f"{name} must be a number, got {value!r}",
        ) from e


def load_config_from_env(dotenv_path: Optional[Path] = None) -> ClientConfig:
    """
    Load configuration from environment variables.

    A ``.env`` file is read first; variables already set take precedence.

    Args:
        dotenv_path: Explicit .env file; searched for from the working
            directory upwards when omitted

    Returns:
        ClientConfig built from IPSTACK_* variables
    """
    load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    return ClientConfig(
        access_key=os.getenv(f"{ENV_PREFIX}ACCESS_KEY", "").strip(),
        secure=_bool_env(f"{ENV_PREFIX}SECURE", False),
        debug=_bool_env(f"{ENV_PREFIX}DEBUG", False),
        timeout_seconds=_float_env(f"{ENV_PREFIX}TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        log_format=os.getenv(f"{ENV_PREFIX}LOG_FORMAT", "text"),
    )


def load_config_from_file(config_path: Path) -> ClientConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        ClientConfig read from the file

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return ClientConfig(
            access_key=data["access_key"],
            secure=_bool_field(data, "secure"),
            debug=_bool_field(data, "debug"),
            timeout_seconds=float(data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
            log_format=data.get("log_format", "text"),
        )
    except FileNotFoundError as e:
        raise ConfigurationError(
            code="config_not_found",
            message=f"Configuration file not found: {config_path}",
        ) from e
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Error loading config: {e}",
            details={"path": str(config_path)},
        ) from e


def save_config_to_file(config: ClientConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file, creating parent directories.

    Args:
        config: Configuration to save
        config_path: Destination path
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2)
        f.write("\n")


def build_client(config: ClientConfig) -> IPStackClient:
    """
    Create a client from configuration.

    Args:
        config: Validated client configuration

    Returns:
        IPStackClient owning a default transport with the configured timeout
    """
    config.validate()

    return IPStackClient(
        config.access_key,
        with_transport(
            create_default_transport(config.timeout_seconds),
            close_with_client=True,
        ),
        with_debug(config.debug),
        with_logger(StructuredLogger(output_format=config.log_format, level=LogLevel.DEBUG)),
        secure=config.secure,
    )
