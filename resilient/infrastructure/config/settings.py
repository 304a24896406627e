"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (~/.resilient/config.yaml). Dotted keys such as
`retry.max_retry_count` map to nested YAML mappings and to environment
variables named `RESILIENT_RETRY_MAX_RETRY_COUNT`.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from resilient.domain.exceptions import ConfigurationError
from resilient.domain.models.common import LogLevel, RetryPolicy

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".resilient"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "RESILIENT_"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(
    config_file: Path = DEFAULT_CONFIG_FILE,
    env_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    # 3. Environment variables are read lazily by get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")


def env_var_name(key: str) -> str:
    """Environment variable consulted for a dotted config key."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _lookup_nested(config: Dict[str, Any], key: str) -> Any:
    if key in config:
        return config[key]
    node: Any = config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(key)
        node = node[part]
    return node


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (RESILIENT_ prefixed)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'retry.max_retry_count'
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    try:
        return _lookup_nested(_config, key)
    except KeyError:
        pass

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Typed accessors ---

def _get_int(key: str, default: Optional[int] = None) -> Optional[int]:
    value = get_config(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(key, value, "expected an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(key, value, "expected an integer") from None


def _get_float(key: str, default: Optional[float] = None) -> Optional[float]:
    value = get_config(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(key, value, "expected a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(key, value, "expected a number") from None


# --- Convenience Functions ---

def get_retry_policy() -> Optional[RetryPolicy]:
    """Builds the retry policy from `retry.max_retry_count` / `retry.delay_between_retries`.

    Returns None when no retry count is configured, so callers fall back to
    the no-retry default.

    Raises:
        ConfigurationError: If a value is not numeric or out of range.
    """
    max_retry_count = _get_int('retry.max_retry_count')
    if max_retry_count is None:
        return None
    if max_retry_count < 1:
        raise ConfigurationError('retry.max_retry_count', max_retry_count, "must be >= 1")
    return RetryPolicy.from_options(max_retry_count, get_retry_delay())


def get_retry_delay() -> float:
    """Seconds between attempts from `retry.delay_between_retries`, 0 if unset."""
    delay = _get_float('retry.delay_between_retries', 0.0)
    if delay < 0:
        raise ConfigurationError('retry.delay_between_retries', delay, "must be >= 0")
    return delay


def get_base_url() -> Optional[str]:
    url = get_config('http.base_url')
    return str(url) if url else None


def get_request_timeout() -> float:
    """Per-attempt HTTP timeout in seconds."""
    timeout = _get_float('http.timeout', DEFAULT_REQUEST_TIMEOUT_SECONDS)
    if timeout is not None and timeout <= 0:
        raise ConfigurationError('http.timeout', timeout, "must be > 0")
    return timeout


def get_call_timeout() -> Optional[float]:
    """Deadline in seconds for a whole logical call (all attempts), or None."""
    timeout = _get_float('retry.call_timeout')
    if timeout is not None and timeout <= 0:
        raise ConfigurationError('retry.call_timeout', timeout, "must be > 0")
    return timeout


def get_log_level() -> LogLevel:
    name = str(get_config('logging.level', 'INFO')).upper()
    if name == 'WARNING':
        name = 'WARN'
    try:
        return LogLevel[name]
    except KeyError:
        raise ConfigurationError('logging.level', name, f"expected one of {[lvl.name for lvl in LogLevel]}") from None


def get_logger_kind() -> str:
    return str(get_config('logging.sink', 'console')).lower()


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
