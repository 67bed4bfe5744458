"""Workspace Management.

A workspace is a directory holding one business's assessment data,
separate from the application code:

- assessment-kit.yaml: configuration
- workspace.yaml: metadata (name, description, timestamps)
- tools/: one payload file per assessment tool (<tool-id>.yaml or .json)
- synthesis/: stored synthesis results
- reports/: generated reports
- logs/: daily rotating logs

The workspace path can be set via:
1. Explicit path parameter
2. ASSESSMENT_WORKSPACE environment variable
3. ~/.assessment-workspace (default)
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from assessment_system.core.config import (
    CONFIG_FILENAME,
    Config,
    ConfigurationError,
    get_default_config,
    load_config,
)


# =============================================================================
# CONSTANTS
# =============================================================================

# Default workspace location
DEFAULT_WORKSPACE = Path.home() / ".assessment-workspace"

# Environment variable for workspace
WORKSPACE_ENV_VAR = "ASSESSMENT_WORKSPACE"

# Metadata filename
META_FILENAME = "workspace.yaml"

# Tool ids become file names
_TOOL_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

_TOOL_SUFFIXES = (".yaml", ".yml", ".json")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class WorkspaceError(Exception):
    """Raised when workspace operations fail."""

    pass


# =============================================================================
# HELPERS
# =============================================================================


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` via a temp file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        suffix=".tmp",
        prefix=f".{path.stem}_",
    )
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)  # Atomic on POSIX
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# WORKSPACE CLASS
# =============================================================================


class Workspace:
    """Assessment workspace management."""

    WORKSPACE_DIRS = [
        "tools",
        "synthesis",
        "reports",
        "logs",
    ]

    def __init__(self, path: Path | str | None = None):
        """Initialize workspace at the given path.

        Args:
            path: Workspace path. If None, uses environment variable or default.
        """
        self.path = self._resolve_path(path)
        self._config: Config | None = None

    @staticmethod
    def _resolve_path(path: Path | str | None) -> Path:
        """Resolve workspace path from argument, env, or default."""
        if path:
            return Path(path).expanduser().resolve()

        env_path = os.environ.get(WORKSPACE_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser().resolve()

        return DEFAULT_WORKSPACE

    # =========================================================================
    # EXISTENCE AND CONFIGURATION
    # =========================================================================

    @property
    def exists(self) -> bool:
        """True if assessment-kit.yaml exists in the workspace."""
        return self.config_file.exists()

    @property
    def config_file(self) -> Path:
        return self.path / CONFIG_FILENAME

    @property
    def meta_file(self) -> Path:
        return self.path / META_FILENAME

    @property
    def config(self) -> Config:
        """Workspace configuration, loaded once.

        Raises:
            WorkspaceError: If the workspace is not initialized or the
                configuration is invalid.
        """
        if self._config is None:
            self.require()
            try:
                self._config = load_config(self.config_file)
            except ConfigurationError as e:
                raise WorkspaceError(str(e)) from e
        return self._config

    def require(self) -> None:
        """Raise WorkspaceError unless the workspace is initialized."""
        if not self.exists:
            raise WorkspaceError(
                f"Workspace not initialized at {self.path}. "
                f"Run 'assess init {self.path}' first."
            )

    def _save_config(self, config: Config) -> None:
        data = config.model_dump(mode="json")
        atomic_write_text(
            self.config_file, yaml.dump(data, default_flow_style=False, sort_keys=False)
        )

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def init(self, name: str = "My Business", force: bool = False) -> bool:
        """Initialize a new workspace.

        Creates the directory structure, default configuration and metadata.

        Args:
            name: Business name shown in insights and reports.
            force: If True, reinitialize even if workspace exists. Tool data
                is kept.

        Returns:
            True if created, False if already exists and force=False.
        """
        if self.exists and not force:
            return False

        self.path.mkdir(parents=True, exist_ok=True)
        for dir_path in self.WORKSPACE_DIRS:
            (self.path / dir_path).mkdir(parents=True, exist_ok=True)

        config = get_default_config()
        self._save_config(config)
        self._config = config

        now = _now_iso()
        self.save_meta({"name": name, "description": "", "created_at": now, "updated_at": now})

        return True

    # =========================================================================
    # METADATA
    # =========================================================================

    def load_meta(self) -> dict[str, Any]:
        """Load workspace metadata; empty dict if none has been written."""
        if not self.meta_file.exists():
            return {}
        try:
            with open(self.meta_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise WorkspaceError(f"Invalid YAML in {self.meta_file}: {e}") from e
        if not isinstance(data, dict):
            raise WorkspaceError(f"{self.meta_file} must contain a mapping")
        return data

    def save_meta(self, meta: dict[str, Any]) -> None:
        atomic_write_text(
            self.meta_file, yaml.dump(meta, default_flow_style=False, sort_keys=False)
        )

    def touch(self) -> None:
        """Bump the metadata ``updated_at`` timestamp."""
        meta = self.load_meta()
        meta["updated_at"] = _now_iso()
        self.save_meta(meta)

    # =========================================================================
    # TOOL DATA
    # =========================================================================

    @staticmethod
    def validate_tool_id(tool_id: str) -> str:
        if not _TOOL_ID_PATTERN.match(tool_id):
            raise WorkspaceError(
                f"Invalid tool id '{tool_id}'. Use lowercase letters, digits, '-' or '_'."
            )
        return tool_id

    def _tool_file(self, tool_id: str) -> Path | None:
        for suffix in _TOOL_SUFFIXES:
            candidate = self.tools_path / f"{tool_id}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def tool_ids(self) -> list[str]:
        """Ids of tools with stored payloads, sorted."""
        if not self.tools_path.exists():
            return []
        return sorted(
            {p.stem for p in self.tools_path.iterdir() if p.suffix in _TOOL_SUFFIXES}
        )

    def load_tool(self, tool_id: str) -> Any:
        """Load one tool's payload, or None if the tool has no data."""
        path = self._tool_file(self.validate_tool_id(tool_id))
        if path is None:
            return None
        try:
            with open(path) as f:
                if path.suffix == ".json":
                    return json.load(f)
                return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise WorkspaceError(f"Invalid tool data in {path}: {e}") from e

    def load_tools(self) -> dict[str, Any]:
        """Load every stored tool payload keyed by tool id."""
        return {tool_id: self.load_tool(tool_id) for tool_id in self.tool_ids()}

    def save_tool(self, tool_id: str, data: Any) -> Path:
        """Store a tool payload as YAML, replacing any previous file."""
        self.validate_tool_id(tool_id)
        existing = self._tool_file(tool_id)
        path = self.tools_path / f"{tool_id}.yaml"
        atomic_write_text(path, yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        if existing is not None and existing != path:
            existing.unlink()
        self.touch()
        return path

    def remove_tool(self, tool_id: str) -> bool:
        path = self._tool_file(self.validate_tool_id(tool_id))
        if path is None:
            return False
        path.unlink()
        self.touch()
        return True

    # =========================================================================
    # PATH HELPERS
    # =========================================================================

    @property
    def tools_path(self) -> Path:
        """Path to tool payload directory."""
        return self.path / "tools"

    @property
    def synthesis_path(self) -> Path:
        """Path to stored synthesis results."""
        return self.path / "synthesis"

    @property
    def reports_path(self) -> Path:
        """Path to generated reports."""
        return self.path / "reports"

    @property
    def logs_path(self) -> Path:
        """Path to logs directory."""
        return self.path / "logs"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def get_workspace(path: Path | str | None = None) -> Workspace:
    """Get a workspace instance (may not be initialized)."""
    return Workspace(path)


def require_workspace(path: Path | str | None = None) -> Workspace:
    """Get an initialized workspace.

    Raises:
        WorkspaceError: If workspace not initialized.
    """
    workspace = Workspace(path)
    workspace.require()
    return workspace
