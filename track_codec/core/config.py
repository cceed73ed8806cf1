"""
Configuration management for track-codec.

This module handles loading, validating, and providing access to the
command line tool's configuration stored in track-codec.yaml. The codec
itself takes no configuration; everything here affects logging and how
the CLI prints tracks.

Configuration File Location:
    --config <path> if given, otherwise track-codec.yaml in the current
    working directory. Without either, built-in defaults are used.

Example track-codec.yaml:
    logging:
      level: INFO
      directory: "~/.local/state/track-codec"   # null disables log files

    output:
      format: yaml    # yaml | json
      indent: 2       # json indentation
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from track_codec.core.exceptions import ConfigError
from track_codec.core.logger import LOG_LEVELS


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "track-codec.yaml"

OUTPUT_FORMATS = ("yaml", "json")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        level: Console log level name. Default: INFO.
        directory: Directory for log files (a 'logs' subdirectory is
                   created inside it). None disables file logging.
    """
    level: str = "INFO"
    directory: Path | None = None


@dataclass(frozen=True)
class OutputConfig:
    """
    CLI output configuration.

    Attributes:
        format: How decoded tracks are printed: "yaml" or "json".
        indent: Indentation used for JSON output.
    """
    format: str = "yaml"
    indent: int = 2


@dataclass(frozen=True)
class Config:
    """
    Complete command line configuration.

    Attributes:
        logging: Logging settings.
        output: Output settings.

    Example:
        config = load_config()
        setup_logging(config.logging.directory, config.logging.level)
    """
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_path: Optional explicit path to a config file. If None,
                     track-codec.yaml in the current working directory is
                     used when present, defaults otherwise.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit file is not found, the file has invalid
                     YAML syntax, is not a mapping, or holds invalid values.
                     details['field'] names the offending key when known.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return Config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid, default configuration
    if raw_config is None:
        return Config()

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        logging=_parse_logging_config(_section(raw_config, "logging")),
        output=_parse_output_config(_section(raw_config, "output")),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"field": name}
        )
    return section


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    """
    Parse and validate the logging section.

    Raises:
        ConfigError: If level is unknown or directory is not a string.
    """
    level = section.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of: {', '.join(LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    directory = section.get("directory")
    if directory is not None:
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory", "value": directory}
            )
        directory = Path(directory.strip()).expanduser().resolve()

    return LoggingConfig(level=level.upper(), directory=directory)


def _parse_output_config(section: dict[str, Any]) -> OutputConfig:
    """
    Parse and validate the output section.

    Raises:
        ConfigError: If format is unknown or indent is not a non-negative int.
    """
    output_format = section.get("format", "yaml")
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"'output.format' must be one of: {', '.join(OUTPUT_FORMATS)}",
            details={"field": "output.format", "value": output_format}
        )

    indent = section.get("indent", 2)
    # bool is an int subclass; reject it explicitly
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ConfigError(
            "'output.indent' must be a non-negative integer",
            details={"field": "output.indent", "value": indent}
        )

    return OutputConfig(format=output_format, indent=indent)
