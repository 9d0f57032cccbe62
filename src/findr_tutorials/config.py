"""
findr-tutorials configuration management.

Handles loading and saving user configuration from ~/.findr_tutorials/config.yaml.
Configuration values are merged with CLI arguments, with CLI taking precedence.
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional
import logging
import os

import yaml

logger = logging.getLogger(__name__)

# Default configuration directory
CONFIG_DIR = Path(os.environ.get("FINDR_TUTORIALS_CONFIG_DIR", Path.home() / ".findr_tutorials"))
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Separators of the table formats accepted by output_format
OUTPUT_SEPARATORS = {"tsv": "\t", "csv": ","}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass
class FindrTutorialsConfig:
    """findr-tutorials configuration settings.

    Attributes:
        data_dir: Data root holding exp_raw/ and exp_pro/ (None = FINDR_TUTORIALS_DATA or ./data)
        backend: Registered analysis backend used when a tutorial run is given none
        fdr: Default false discovery rate threshold of the tutorial steps
        dag_method: Default DAG construction method of the Geuvadis tutorial
        output_format: Format of exported reports ('tsv', 'csv')
        log_level: Logging level when no -v flag is given ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_file: Optional log file path
    """
    data_dir: Optional[str] = None
    backend: Optional[str] = None
    fdr: float = 1.0
    dag_method: str = "greedy edges"
    output_format: str = "tsv"
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert config to dictionary, excluding None values."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def load_config() -> FindrTutorialsConfig:
    """Load configuration from file, returning defaults if not found."""
    if not CONFIG_FILE.exists():
        return FindrTutorialsConfig()

    try:
        with open(CONFIG_FILE) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error loading config file: {e}. Using defaults.")
        return FindrTutorialsConfig()

    # Filter to only valid fields
    valid_fields = {f.name for f in fields(FindrTutorialsConfig)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    return FindrTutorialsConfig(**filtered)


def save_config(config: FindrTutorialsConfig) -> Path:
    """Save configuration to file."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    with open(CONFIG_FILE, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    return CONFIG_FILE


def get_config_path() -> Path:
    """Get the path to the config file."""
    return CONFIG_FILE


def coerce_value(key: str, value: str):
    """Convert a string from the command line to the type of a config field.

    Raises:
        KeyError: If ``key`` is not a config field
        ValueError: If ``value`` cannot be converted
    """
    field_types = {f.name: f.default for f in fields(FindrTutorialsConfig)}
    if key not in field_types:
        raise KeyError(key)

    if value.lower() in ("none", "null", ""):
        if field_types[key] is not None:
            raise ValueError(f"{key} cannot be unset")
        return None

    if isinstance(field_types[key], float):
        return float(value)

    choices = _field_choices().get(key)
    if choices and value not in choices:
        raise ValueError(f"Invalid {key}: '{value}'. Valid options: {', '.join(choices)}")
    return value


def _field_choices() -> dict[str, list[str]]:
    """Allowed values of the string fields that take a fixed set."""
    from findr_tutorials.backend import DagMethod

    return {
        "dag_method": [m.value for m in DagMethod],
        "output_format": list(OUTPUT_SEPARATORS),
        "log_level": list(LOG_LEVELS),
    }


# Verbosity level mapping for CLI
VERBOSITY_LEVELS = {
    0: logging.WARNING,   # Default: warnings and errors only
    1: logging.INFO,      # -v: info messages
    2: logging.DEBUG,     # -vv: debug messages
}


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    default_level: Optional[str] = None,
) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG
        log_file: Optional file to write logs to
        default_level: Level name (e.g. from the config file) used when verbosity is 0
    """
    if verbosity == 0 and default_level:
        level = LOG_LEVELS.get(default_level.upper(), logging.WARNING)
    else:
        level = VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)

    if verbosity >= 2:
        fmt = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    elif verbosity >= 1:
        fmt = "%(levelname)s: %(message)s"
    else:
        fmt = "%(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )


# Global config instance (lazy-loaded)
_config: Optional[FindrTutorialsConfig] = None


def get_config() -> FindrTutorialsConfig:
    """Get the global configuration, loading from file if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config to force reload."""
    global _config
    _config = None


def resolve_data_dir(data_dir: Path | str | None = None) -> Path | None:
    """Pick the data root: explicit argument, then config file, then None (env/default)."""
    if data_dir is not None:
        return Path(data_dir)
    configured = get_config().data_dir
    return Path(configured) if configured else None
