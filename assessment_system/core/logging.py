"""Workspace logging.

Every command that opens a workspace logs to a daily file in its ``logs/``
directory::

    logs/assessment-kit-2025-06-01.log

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached once, to the ``assessment_system`` logger, by :func:`setup_logging`.
Files older than ``logging.retention_days`` are pruned whenever handlers are
attached.

Example usage:
    from assessment_system.core.logging import setup_logging

    logger = setup_logging(workspace.path, workspace.config, console=False)
    logger.info("Synthesis started")
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from assessment_system.core.config import (
    CONFIG_FILENAME,
    Config,
    get_default_config,
    load_config,
)

DEFAULT_LOGGER_NAME = "assessment_system"
LOG_FILE_PREFIX = "assessment-kit"
LOG_FILE_EXTENSION = ".log"
LOGS_DIRNAME = "logs"

logger = logging.getLogger(__name__)


def log_file_name(day: date) -> str:
    """Name of the log file for ``day``."""
    return f"{LOG_FILE_PREFIX}-{day:%Y-%m-%d}{LOG_FILE_EXTENSION}"


def log_file_date(path: Path) -> Optional[date]:
    """Day a log file was started, or None for foreign files.

    Rotated files (``assessment-kit-2025-06-01.log.2025-06-02``) keep the
    start date of the file they were rotated from.
    """
    head = f"{LOG_FILE_PREFIX}-"
    if not path.name.startswith(head):
        return None
    stamp = path.name[len(head):len(head) + 10]
    try:
        return datetime.strptime(stamp, "%Y-%m-%d").date()
    except ValueError:
        return None


def setup_logging(
    workspace_path: Path,
    config: Optional[Config] = None,
    name: str = DEFAULT_LOGGER_NAME,
    console: bool = True,
) -> logging.Logger:
    """Attach workspace log handlers to ``name`` and return that logger.

    Args:
        workspace_path: Workspace root; logs go to its logs/ directory.
        config: Workspace config. Read from the workspace when omitted.
        name: Logger to configure.
        console: Also log to stderr.
    """
    return LogManager(workspace_path, config).setup(name, console=console)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)


class LogManager:
    """Log handlers and log file housekeeping for one workspace."""

    def __init__(self, workspace_path: Path, config: Optional[Config] = None):
        self.workspace_path = Path(workspace_path)
        self.logs_path = self.workspace_path / LOGS_DIRNAME

        if config is None:
            config_file = self.workspace_path / CONFIG_FILENAME
            config = load_config(config_file) if config_file.exists() else get_default_config()
        self.config = config

    @property
    def retention_days(self) -> int:
        return self.config.logging.retention_days

    def setup(self, name: str = DEFAULT_LOGGER_NAME, console: bool = True) -> logging.Logger:
        """Configure ``name`` with a daily file handler and optional console output.

        The level is always refreshed from config. Handlers are only attached
        the first time, so repeated setup in one process does not duplicate
        output.
        """
        target = logging.getLogger(name)
        level = getattr(logging, self.config.logging.level, logging.INFO)
        target.setLevel(level)

        if target.handlers:
            return target

        self.logs_path.mkdir(parents=True, exist_ok=True)
        self.cleanup_old_logs()

        formatter = logging.Formatter(self.config.logging.format)
        file_handler = TimedRotatingFileHandler(
            filename=self.get_log_file_path(),
            when="midnight",
            backupCount=self.retention_days,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"

        handlers: list[logging.Handler] = [file_handler]
        if console:
            handlers.append(logging.StreamHandler())

        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            target.addHandler(handler)

        return target

    def get_log_file_path(self) -> Path:
        """Today's log file."""
        return self.logs_path / log_file_name(date.today())

    def list_log_files(self) -> list[Path]:
        """Current and rotated log files, oldest first."""
        if not self.logs_path.is_dir():
            return []
        return sorted(
            path
            for path in self.logs_path.glob(f"{LOG_FILE_PREFIX}-*")
            if path.is_file() and log_file_date(path) is not None
        )

    def cleanup_old_logs(self, keep_days: Optional[int] = None) -> list[Path]:
        """Delete log files started more than ``keep_days`` days ago.

        Defaults to ``logging.retention_days``. Returns the deleted paths.
        """
        if keep_days is None:
            keep_days = self.retention_days
        cutoff = date.today() - timedelta(days=keep_days)

        deleted = []
        for path in self.list_log_files():
            if log_file_date(path) >= cutoff:
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.warning("Could not delete old log file %s: %s", path, e)
                continue
            deleted.append(path)
        return deleted
