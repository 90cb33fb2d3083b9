"""
Configuration Module for sponsorship-notify.

This module provides configuration loading for the webhook service. Two
sources are combined:

- config.yml (optional): non-secret settings such as the outbound request
  timeout, an alternate image asset path, Pushover and log file settings.
- Environment variables (required): the four X/Twitter OAuth 1.0a secrets and
  the GitHub webhook secret. Each variable may instead point at a Docker
  secret file through a ``<NAME>_FILE`` variable.

Usage:
    >>> from config import load_config, load_credentials
    >>> config = load_config()
    >>> credentials = load_credentials()
    >>> timeout = get_timeout(config)
"""
import os
import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Mapping, Optional


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

# Environment variable names for each credential field
CREDENTIAL_ENV_VARS = {
    "client_token": "SPONSORSHIP_NOTIFY_CLIENT_TOKEN",
    "client_secret": "SPONSORSHIP_NOTIFY_CLIENT_SECRET",
    "access_token": "SPONSORSHIP_NOTIFY_ACCESS_TOKEN",
    "access_secret": "SPONSORSHIP_NOTIFY_ACCESS_SECRET",
    "webhook_secret": "SPONSORSHIP_WEBHOOK_SECRET",
}


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""
    pass


@dataclass(frozen=True)
class Credentials:
    """Secrets used by the service.

    The four token fields sign outbound X/Twitter requests (OAuth 1.0a). The
    webhook secret is only used to verify inbound GitHub signatures. None of
    the fields appear in ``repr`` so they cannot leak through log lines.
    """
    client_token: str = field(repr=False)
    client_secret: str = field(repr=False)
    access_token: str = field(repr=False)
    access_secret: str = field(repr=False)
    webhook_secret: str = field(repr=False)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from config.yml file.

    Args:
        config_path: Path to config.yml file. If None, looks in current directory
                    and parent directories.

    Returns:
        Dictionary containing configuration settings. Falls back to
        get_default_config() when the file is missing or unparseable.

    Example:
        >>> config = load_config()
        >>> pushover_enabled = (config.get("pushover") or {}).get("enabled", False)
    """
    if config_path is None:
        # Try to find config.yml in current directory or parent directories
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            candidate = parent / "config.yml"
            if candidate.exists():
                config_path = str(candidate)
                break

        # If still not found, check the project root (where this file is located)
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            candidate = project_root / "config.yml"
            if candidate.exists():
                config_path = str(candidate)

    if config_path is None:
        logger.warning("config.yml not found, using default configuration")
        return get_default_config()

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
            if not isinstance(config, dict):
                logger.warning("Configuration root must be a mapping, using default configuration")
                return get_default_config()
            logger.info(f"Loaded configuration from {config_path}")
            return config
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {config_path}")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file: {e}")
        return get_default_config()


def get_default_config() -> Dict[str, Any]:
    """Return default configuration when config.yml is not available.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "twitter": {
            "timeout_seconds": DEFAULT_TIMEOUT_SECONDS
        },
        "asset": {
            "path": None
        },
        "logging": {
            "file": "sponsorship-notify.log"
        },
        "pushover": {
            "enabled": False,
            "app_token_file": "/run/secrets/pushover_app_token",
            "user_key_file": "/run/secrets/pushover_user_key"
        }
    }


def get_timeout(config: Dict[str, Any]) -> float:
    """Return the outbound request timeout in seconds, with a safe fallback."""
    timeout = (config.get("twitter") or {}).get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        logger.warning(f"Invalid twitter.timeout_seconds {timeout!r}; falling back to {DEFAULT_TIMEOUT_SECONDS}")
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


def read_secret_file(filepath: str) -> Optional[str]:
    """Read a Docker secret from a file.

    Docker secrets are mounted as files in /run/secrets/ directory.
    This function reads the content of the secret file.

    Args:
        filepath: Path to the secret file

    Returns:
        Content of the secret file (stripped of whitespace), or None if file doesn't exist

    Example:
        >>> token = read_secret_file("/run/secrets/pushover_app_token")
    """
    try:
        with open(filepath, "r") as f:
            return f.read().strip()
    except FileNotFoundError:
        logger.debug(f"Secret file not found: {filepath}")
        return None
    except Exception as e:
        logger.error(f"Error reading secret file {filepath}: {e}")
        return None


def _read_env_secret(name: str, environ: Mapping[str, str]) -> Optional[str]:
    """Resolve a secret from NAME, falling back to the file named by NAME_FILE."""
    value = environ.get(name)
    if value:
        return value
    secret_file = environ.get(f"{name}_FILE")
    if secret_file:
        return read_secret_file(secret_file) or None
    return None


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """Load all required secrets from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Populated Credentials instance

    Raises:
        ConfigurationError: If any required value is missing or empty. The
            message lists every missing variable name, never a value.
    """
    if environ is None:
        environ = os.environ

    values = {}
    missing = []
    for field_name, env_name in CREDENTIAL_ENV_VARS.items():
        value = _read_env_secret(env_name, environ)
        if not value:
            missing.append(env_name)
        values[field_name] = value

    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    logger.info("Loaded credentials from environment")
    return Credentials(**values)
