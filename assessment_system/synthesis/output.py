"""Persistence of synthesis results in the workspace.

A stored result is replace-on-recompute: every save overwrites
synthesis/latest.json wholesale. A stored result goes stale as soon as tool
data changes; see is_result_current.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from assessment_system.core.workspace import WorkspaceError, atomic_write_text
from assessment_system.synthesis.models import SynthesisResult

if TYPE_CHECKING:
    from assessment_system.core.workspace import Workspace

logger = logging.getLogger(__name__)

RESULT_FILENAME = "latest.json"


def result_path(workspace: Workspace) -> Path:
    return workspace.synthesis_path / RESULT_FILENAME


def save_synthesis_result(result: SynthesisResult, workspace: Workspace) -> Path:
    """Save a synthesis result, replacing any previously stored one.

    Returns:
        Path to the stored result file.
    """
    path = result_path(workspace)
    atomic_write_text(path, json.dumps(result.to_dict(), indent=2, default=str))
    logger.info("Saved synthesis result to %s", path)
    return path


def load_synthesis_result(workspace: Workspace) -> SynthesisResult | None:
    """Load the stored synthesis result, or None if synthesis never ran.

    Raises:
        WorkspaceError: If the stored file is corrupt.
    """
    path = result_path(workspace)
    if not path.exists():
        return None
    try:
        with open(path) as f:
            return SynthesisResult.from_dict(json.load(f))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise WorkspaceError(f"Corrupt synthesis result in {path}: {e}") from e


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def is_result_current(result: SynthesisResult, workspace: Workspace) -> bool:
    """True if no tool data changed after ``result`` was computed.

    Tool writes and removals bump the workspace ``updated_at`` timestamp;
    a result older than that no longer reflects the stored payloads.
    """
    updated = workspace.load_meta().get("updated_at")
    if not updated:
        return True
    if not isinstance(updated, datetime):
        try:
            updated = datetime.fromisoformat(str(updated))
        except ValueError:
            logger.warning("Unreadable workspace updated_at %r, treating result as stale", updated)
            return False
    return _as_utc(result.timestamp) >= _as_utc(updated)
