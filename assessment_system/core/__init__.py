"""Core Module.

This package provides the core components for assessment-kit:

- Configuration loading and validation (assessment-kit.yaml)
- Workspace management (tool payloads, metadata, results)
- Logging configuration with daily rotation

Example usage:
    from assessment_system.core import load_config, Workspace, setup_logging

    workspace = Workspace("/path/to/workspace")
    workspace.init(name="Acme Corp")

    logger = setup_logging(workspace.path, workspace.config)
    logger.info("Workspace ready")
"""

from assessment_system.core.config import (
    CONFIG_FILENAME,
    Config,
    ConfigurationError,
    LoggingConfig,
    LogLevel,
    ReportConfig,
    SynthesisConfig,
    get_default_config,
    load_config,
    validate_config,
)
from assessment_system.core.logging import LogManager, get_logger, setup_logging
from assessment_system.core.workspace import (
    DEFAULT_WORKSPACE,
    WORKSPACE_ENV_VAR,
    Workspace,
    WorkspaceError,
    get_workspace,
    require_workspace,
)

__all__ = [
    # Configuration
    "CONFIG_FILENAME",
    "Config",
    "SynthesisConfig",
    "ReportConfig",
    "LoggingConfig",
    "LogLevel",
    "load_config",
    "get_default_config",
    "validate_config",
    "ConfigurationError",
    # Workspace
    "Workspace",
    "WorkspaceError",
    "get_workspace",
    "require_workspace",
    "DEFAULT_WORKSPACE",
    "WORKSPACE_ENV_VAR",
    # Logging
    "setup_logging",
    "get_logger",
    "LogManager",
]
