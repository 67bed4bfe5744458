"""Synthesis context construction.

Builds the SynthesisContext a synthesis pass consumes: a read-only snapshot
of every tool payload plus lightweight workspace metadata. The snapshot is
deep-copied so later edits to the workspace (or to the caller's dicts) can
never be observed part-way through a pass.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from assessment_system.synthesis.models import SynthesisContext, WorkspaceMeta

if TYPE_CHECKING:
    from assessment_system.core.workspace import Workspace

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"


class SynthesisContextBuilder:
    """Assemble SynthesisContext snapshots.

    Usage::

        ctx = SynthesisContextBuilder(workspace).build()
        ctx = SynthesisContextBuilder.from_mapping({"swot-analysis": {...}})
    """

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def build(self) -> SynthesisContext:
        """Snapshot the workspace's tool payloads and metadata."""
        tools = self.workspace.load_tools()
        meta = self.workspace.load_meta()
        logger.debug("Building synthesis context from %d tools", len(tools))
        return self.from_mapping(tools, meta)

    @staticmethod
    def from_mapping(
        tools: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None = None,
    ) -> SynthesisContext:
        """Build a context from in-memory tool payloads and metadata.

        ``meta`` accepts ``name``/``company_name`` and
        ``updated_at``/``assessment_date`` keys.
        """
        snapshot = copy.deepcopy(dict(tools or {}))
        return SynthesisContext(
            tools=MappingProxyType(snapshot),
            meta=SynthesisContextBuilder.build_meta(meta or {}),
        )

    @staticmethod
    def build_meta(meta: Mapping[str, Any]) -> WorkspaceMeta:
        company = meta.get("company_name") or meta.get("name") or UNKNOWN_COMPANY
        date = (
            meta.get("assessment_date")
            or meta.get("updated_at")
            or datetime.now(timezone.utc).isoformat()
        )
        return WorkspaceMeta(company_name=str(company), assessment_date=str(date))
