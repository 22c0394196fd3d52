import importlib
import logging
import os
import re
from pathlib import Path
from typing import Any, TypedDict

import yaml

logger = logging.getLogger(__name__)

# Default config file name
DEFAULT_CONFIG_FILE = "castway.config.yaml"
DEFAULT_STRATEGY = "castway.strategies:ForkingStrategy"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


class EntryConfig(TypedDict, total=False):
    entry: str
    config: dict[str, Any]


class InjectionConfig(TypedDict, total=False):
    enabled: bool


class CastwayConfig(TypedDict, total=False):
    interceptors: list[EntryConfig]
    strategy: EntryConfig
    injection: InjectionConfig


class CastwayConfigError(Exception):
    """Custom exception for configuration errors."""

    pass


def import_from_string(import_str: str) -> Any:
    """Import a class, function, or variable from a module by string.

    Args:
        import_str: String in the format "module.path:symbol". The symbol may
            be a dotted path to a nested attribute.

    Returns:
        The imported object.

    Raises:
        CastwayConfigError: If the import failed due to a missing module, a
            missing symbol, or a malformed import string.

    Examples:
        ```python
        strategy_class = import_from_string("castway.strategies:RebindStrategy")
        ```
    """
    if ":" not in import_str:
        raise CastwayConfigError(
            f"Invalid import string format '{import_str}'. Expected 'module.path:symbol'."
        )

    module_path, object_path = import_str.split(":", 1)

    try:
        module = importlib.import_module(module_path)

        # Handle nested attributes
        target = module
        for part in object_path.split("."):
            target = getattr(target, part)

        return target
    except (ImportError, AttributeError) as e:
        raise CastwayConfigError(f"Failed to import '{import_str}': {str(e)}") from e


def instantiate_entry(entry_config: EntryConfig, **extra: Any) -> Any:
    """Import the entry named by an ``{entry, config}`` block and call it with its config."""
    if not isinstance(entry_config, dict) or "entry" not in entry_config:
        raise CastwayConfigError(
            f"Invalid entry configuration {entry_config!r}. Expected a mapping with an 'entry' key."
        )

    factory = import_from_string(entry_config["entry"])
    if not callable(factory):
        raise CastwayConfigError(f"Entry '{entry_config['entry']}' is not callable")

    return factory(**extra, **(entry_config.get("config") or {}))


def load_raw_config(config_path: str | Path) -> dict[str, Any]:
    """
    Load a configuration file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Dictionary containing the configuration, empty when the file does not exist.

    Raises:
        CastwayConfigError: If the configuration file could not be loaded.
    """
    try:
        config_path_obj = Path(config_path)
        if not config_path_obj.exists():
            return {}

        with open(config_path_obj) as f:
            config = yaml.safe_load(f)

        if config is None:  # Empty file
            config = {}

        if not isinstance(config, dict):
            raise CastwayConfigError(
                f"Invalid configuration format in {config_path}. Expected a dictionary."
            )

        return config
    except Exception as e:
        if isinstance(e, CastwayConfigError):
            raise
        raise CastwayConfigError(
            f"Error loading configuration from {config_path}: {str(e)}"
        ) from e


def _substitute_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """
    Substitute ``${VAR_NAME}`` references in configuration values.

    Raises:
        CastwayConfigError: If a referenced environment variable is not set
    """

    def replace_env_var(match):
        env_var = match.group(1)
        env_value = os.getenv(env_var)
        if env_value is None:
            raise CastwayConfigError(
                f"Required environment variable '{env_var}' is not set"
            )
        return env_value

    def substitute_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_PATTERN.sub(replace_env_var, value)
        elif isinstance(value, dict):
            return {k: substitute_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [substitute_value(item) for item in value]
        else:
            return value

    return substitute_value(config)


def validate_config(config: dict[str, Any]) -> None:
    """Check the shape of the recognised configuration sections.

    Raises:
        CastwayConfigError: If a section has the wrong type
    """
    interceptors = config.get("interceptors", [])
    if not isinstance(interceptors, list):
        raise CastwayConfigError("'interceptors' must be a list")
    for i, interceptor in enumerate(interceptors):
        if not isinstance(interceptor, dict) or "entry" not in interceptor:
            raise CastwayConfigError(f"Interceptor {i} missing required 'entry' field")

    strategy = config.get("strategy")
    if strategy is not None and (not isinstance(strategy, dict) or "entry" not in strategy):
        raise CastwayConfigError("'strategy' must be a mapping with an 'entry' field")

    injection = config.get("injection", {})
    if not isinstance(injection, dict):
        raise CastwayConfigError("'injection' must be a mapping")


def load_config(config_path: str | Path = DEFAULT_CONFIG_FILE) -> CastwayConfig:
    """
    Load, substitute environment variables in, and validate a configuration file.

    Raises:
        CastwayConfigError: If configuration is invalid
    """
    config = load_raw_config(config_path)
    config = _substitute_env_vars(config)
    validate_config(config)
    logger.debug(f"Loaded configuration from {config_path}: sections {sorted(config)}")
    return config
