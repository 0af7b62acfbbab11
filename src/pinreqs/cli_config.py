"""
Configuration management for pinreqs.

Settings come from defaults, an optional config file (JSON, YAML, or the
``[tool.pinreqs]`` table of ``pyproject.toml``), environment overrides, and
finally command line flags.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
import yaml
from rich.console import Console

from .structured_logging import DEFAULT_LOG_FORMAT

console = Console(stderr=True)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ScanConfig:
    """Source tree scanning configuration."""

    source_suffix: str = ".py"
    exclude_dirs: List[str] = field(default_factory=list)
    encoding: str = "utf-8"


@dataclass
class PackageManagerConfig:
    """How the installed package listing is obtained."""

    command: List[str] = field(default_factory=lambda: ["pip", "freeze"])


@dataclass
class OutputConfig:
    """Requirements file output configuration."""

    output_file: str = "requirements.txt"
    show_contents: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "WARNING"
    enable_json: bool = False
    log_format: str = DEFAULT_LOG_FORMAT


@dataclass
class GeneratorConfig:
    """Main configuration containing all subsections."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    package_manager: PackageManagerConfig = field(
        default_factory=PackageManagerConfig
    )
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_global_config: Optional[GeneratorConfig] = None


def validate_config_values(config: GeneratorConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if not isinstance(config.scan.source_suffix, str) or not config.scan.source_suffix:
        errors.append("scan.source_suffix must be a non-empty string")
    if not isinstance(config.scan.exclude_dirs, list) or not all(
        isinstance(pattern, str) for pattern in config.scan.exclude_dirs
    ):
        errors.append("scan.exclude_dirs must be a list of strings")
    if not isinstance(config.scan.encoding, str) or not config.scan.encoding:
        errors.append("scan.encoding must be a non-empty string")

    command = config.package_manager.command
    if (
        not isinstance(command, list)
        or not command
        or not all(isinstance(arg, str) and arg for arg in command)
    ):
        errors.append("package_manager.command must be a non-empty list of strings")

    if not isinstance(config.output.output_file, str) or not config.output.output_file:
        errors.append("output.output_file must be a non-empty string")
    if not isinstance(config.output.show_contents, bool):
        errors.append("output.show_contents must be true or false")

    if str(config.logging.log_level).upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"logging.log_level must be one of {', '.join(VALID_LOG_LEVELS)}"
        )
    if not isinstance(config.logging.enable_json, bool):
        errors.append("logging.enable_json must be true or false")
    if not _is_valid_log_format(config.logging.log_format):
        errors.append("logging.log_format must be a valid %-style logging format")

    return errors


def _is_valid_log_format(log_format: Any) -> bool:
    if not isinstance(log_format, str) or not log_format:
        return False
    try:
        logging.Formatter(log_format)
    except ValueError:
        return False
    return True


def _restore_invalid_defaults(config: GeneratorConfig, errors: List[str]) -> None:
    """Reset every field named in a validation error to its default value."""
    defaults = GeneratorConfig()
    for error in errors:
        dotted = error.split(" ", 1)[0]
        section_name, _, key = dotted.partition(".")
        setattr(
            getattr(config, section_name),
            key,
            getattr(getattr(defaults, section_name), key),
        )


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from file."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, encoding="utf-8") as f:
            suffix = config_path.suffix.lower()
            if suffix in [".yaml", ".yml"]:
                return yaml.safe_load(f) or {}
            elif suffix == ".json":
                return json.load(f)
            elif config_path.name == "pyproject.toml":
                return toml.load(f).get("tool", {}).get("pinreqs")
    except Exception as e:
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )

    return None


def find_config_file() -> Optional[Path]:
    """Find config file in standard locations."""
    project_locations = [
        Path.cwd() / ".pinreqs.json",
        Path.cwd() / ".pinreqs.yaml",
        Path.cwd() / ".pinreqs.yml",
    ]
    for location in project_locations:
        if location.exists():
            return location

    pyproject = Path.cwd() / "pyproject.toml"
    if pyproject.exists() and load_config_file(pyproject):
        return pyproject

    user_locations = [
        Path.home() / ".config" / "pinreqs" / "config.json",
        Path.home() / ".config" / "pinreqs" / "config.yaml",
    ]
    for location in user_locations:
        if location.exists():
            return location

    return None


def load_environment_overrides(config: GeneratorConfig) -> None:
    """Load environment variable overrides."""
    if log_level := os.environ.get("PINREQS_LOG_LEVEL"):
        config.logging.log_level = log_level.upper()
    if package_manager := os.environ.get("PINREQS_PACKAGE_MANAGER"):
        config.package_manager.command = package_manager.split()
    if source_suffix := os.environ.get("PINREQS_SOURCE_SUFFIX"):
        config.scan.source_suffix = source_suffix


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    known_keys = {f.name for f in fields(config)}
    for key, value in section_data.items():
        if key in known_keys:
            setattr(config, key, value)
        else:
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )


def apply_config_data(config: GeneratorConfig, file_config: Dict[str, Any]) -> None:
    """Apply every known section of a loaded config mapping."""
    section_names = {f.name for f in fields(config)}
    for section_name, section_data in file_config.items():
        if section_name not in section_names:
            console.print(f"⚠️  Unknown config section: {section_name}", style="yellow")
            continue
        if not isinstance(section_data, dict):
            console.print(
                f"⚠️  Config section {section_name} must be a mapping", style="yellow"
            )
            continue
        apply_config_section(
            getattr(config, section_name), section_data, section_name
        )


def load_config(config_path: Optional[str] = None) -> GeneratorConfig:
    """
    Load configuration from file and environment.

    An explicit ``config_path`` replaces the standard location search and
    bypasses the cached instance.
    """
    global _global_config

    if _global_config is not None and config_path is None:
        return _global_config

    config = GeneratorConfig()

    config_file = Path(config_path) if config_path else find_config_file()
    if config_file:
        file_config = load_config_file(config_file)
        if isinstance(file_config, dict):
            apply_config_data(config, file_config)
        elif file_config is not None:
            console.print(
                f"⚠️  Ignoring {config_file}: top level must be a mapping",
                style="yellow",
            )

    load_environment_overrides(config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        _restore_invalid_defaults(config, validation_errors)

    _global_config = config
    return config


def get_config() -> GeneratorConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _global_config
    _global_config = None


def create_sample_config() -> str:
    """Generate a sample JSON configuration."""
    sample_config = {
        "scan": {
            "source_suffix": ".py",
            "exclude_dirs": [".git", ".venv", "venv", "__pycache__"],
            "encoding": "utf-8",
        },
        "package_manager": {"command": ["pip", "freeze"]},
        "output": {"output_file": "requirements.txt", "show_contents": True},
        "logging": {
            "log_level": "WARNING",
            "enable_json": False,
            "log_format": DEFAULT_LOG_FORMAT,
        },
    }

    return json.dumps(sample_config, indent=2)
