"""Configuration System.

This module provides the configuration system for assessment-kit, including:
- Pydantic models for all configuration sections
- YAML file loading with default fallbacks
- Partial config merging
- Validation with clear error messages

Configuration is loaded from assessment-kit.yaml files. If no file exists,
sensible defaults are used. Partial configurations are merged with defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# CONSTANTS
# =============================================================================

CONFIG_FILENAME = "assessment-kit.yaml"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


# =============================================================================
# ENUMS
# =============================================================================


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# CONFIGURATION MODELS
# =============================================================================


class SynthesisConfig(BaseModel):
    """Synthesis engine settings.

    Controls which rules make up the default catalog and how the engine
    reports score key collisions between rules.
    """

    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Rule ids left out of the default rule catalog",
    )
    warn_on_score_collision: bool = Field(
        True, description="Log a warning when two rules write the same score key"
    )

    @field_validator("disabled_rules")
    @classmethod
    def validate_disabled_rules(cls, v: list[str]) -> list[str]:
        """Reject blank rule ids."""
        for rule_id in v:
            if not rule_id.strip():
                raise ValueError("disabled_rules entries must be non-empty rule ids")
        return v


class ReportConfig(BaseModel):
    """Report generation settings."""

    title: str = Field(
        "Business Assessment Report", description="Title printed at the top of reports"
    )
    include_scores: bool = Field(True, description="Whether to include the scores table")
    min_severity: int = Field(
        1, ge=1, le=5, description="Lowest insight severity included in reports (1-5)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Logging level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    retention_days: int = Field(
        30, ge=1, description="Days of log files kept in the workspace logs/ directory"
    )


class Config(BaseModel):
    """Complete configuration.

    This is the main configuration model containing all configuration sections.
    Configuration is loaded from assessment-kit.yaml with defaults for missing values.
    """

    model_config = ConfigDict(use_enum_values=True)

    version: str = Field("1.0", description="Configuration version")
    synthesis: SynthesisConfig = Field(
        default_factory=SynthesisConfig, description="Synthesis engine settings"
    )
    report: ReportConfig = Field(
        default_factory=ReportConfig, description="Report generation settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================


def get_default_config() -> Config:
    """Return the default configuration.

    Returns:
        Config with all default values.
    """
    return Config()


# =============================================================================
# CONFIG LOADING
# =============================================================================


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    Lists are replaced entirely (not merged).

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from a YAML file.

    If no path is provided, looks for assessment-kit.yaml in the current directory.
    If the file doesn't exist, returns default configuration.
    Partial configurations are merged with defaults.

    Args:
        path: Path to configuration file. If None, looks for assessment-kit.yaml
              in current directory.

    Returns:
        Loaded and validated Config.

    Raises:
        ConfigurationError: If YAML is invalid or configuration values are invalid.
    """
    if path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    else:
        config_path = Path(path)

    if not config_path.exists():
        return get_default_config()

    try:
        with open(config_path) as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error reading {config_path}: {e}") from e

    # Handle empty file
    if user_config is None:
        return get_default_config()

    if not isinstance(user_config, dict):
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: expected a mapping at top level"
        )

    merged = deep_merge(get_default_config().model_dump(), user_config)

    try:
        return Config(**merged)
    except Exception as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


# =============================================================================
# CONFIG VALIDATION
# =============================================================================


def validate_config(config: Config, known_rule_ids: set[str] | None = None) -> list[str]:
    """Validate a configuration and return any advisory messages.

    This performs checks beyond Pydantic's built-in validation, looking for
    settings that are legal but probably not what the user intended.

    Args:
        config: Configuration to validate
        known_rule_ids: Ids of the rules available in the default catalog.
                        When given, unknown disabled rule ids are reported.

    Returns:
        List of validation messages. Empty list if valid.
    """
    errors: list[str] = []

    if known_rule_ids is not None:
        for rule_id in config.synthesis.disabled_rules:
            if rule_id not in known_rule_ids:
                errors.append(
                    f"synthesis.disabled_rules contains unknown rule id '{rule_id}'."
                )
        if known_rule_ids and known_rule_ids.issubset(config.synthesis.disabled_rules):
            errors.append(
                "synthesis.disabled_rules disables every rule. "
                "Synthesis will never produce insights."
            )

    if config.report.min_severity >= 5:
        errors.append(
            f"report.min_severity={config.report.min_severity} hides everything "
            "except critical insights. Consider 3 or lower."
        )

    if not config.synthesis.warn_on_score_collision:
        errors.append(
            "synthesis.warn_on_score_collision=false hides rules that overwrite "
            "each other's scores."
        )

    return errors
