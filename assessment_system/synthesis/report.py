"""Report generation for synthesis results.

Renders a SynthesisResult into a Markdown document using Jinja2 templates.
Insights keep the order the engine produced; they are only grouped into
one section per insight type.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from assessment_system.core.config import ReportConfig
from assessment_system.synthesis.dashboard import group_by_type, skipped_summary
from assessment_system.synthesis.filters import CUSTOM_FILTERS
from assessment_system.synthesis.models import SynthesisResult, WorkspaceMeta
from assessment_system.synthesis.templates import REPORT_TEMPLATE, TEMPLATE_DIR

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Error during report rendering."""

    pass


class ReportGenerator:
    """Render synthesis results to Markdown.

    Design principles:
    - Deterministic output (same result = same document)
    - Insight order is never changed, only grouped by type
    - Settings come from ReportConfig, overridable per call
    """

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        template_dir: Path | None = None,
    ):
        """Initialize the report generator.

        Args:
            config: Report settings. Defaults to ReportConfig().
            template_dir: Optional custom template directory. Defaults to
                          the built-in templates.
        """
        self.config = config or ReportConfig()
        self._template_dir = template_dir or TEMPLATE_DIR
        self._env = Environment(
            loader=FileSystemLoader(self._template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        for name, func in CUSTOM_FILTERS.items():
            self._env.filters[name] = func

    def render(
        self,
        result: SynthesisResult,
        meta: WorkspaceMeta,
        min_severity: Optional[int] = None,
        include_scores: Optional[bool] = None,
    ) -> str:
        """Render a synthesis result to Markdown.

        Args:
            result: The synthesis result to render
            meta: Workspace metadata for the report header
            min_severity: Lowest severity to include (default from config)
            include_scores: Whether to include the scores table (default from config)

        Returns:
            The rendered document

        Raises:
            ReportError: If rendering fails
        """
        if min_severity is None:
            min_severity = self.config.min_severity
        if include_scores is None:
            include_scores = self.config.include_scores

        insights = [i for i in result.insights if i.severity >= min_severity]

        context = {
            "title": self.config.title,
            "meta": meta,
            "result": result,
            "insights": insights,
            "groups": group_by_type(insights),
            "hidden_count": len(result.insights) - len(insights),
            "min_severity": min_severity,
            "skipped_summary": skipped_summary(result),
            "scores": result.scores,
            "include_scores": include_scores,
        }

        try:
            template = self._env.get_template(REPORT_TEMPLATE)
            return template.render(**context)
        except TemplateNotFound as e:
            raise ReportError(f"Template not found: {e}") from e
        except Exception as e:
            raise ReportError(f"Report rendering failed: {e}") from e

    def render_to_file(
        self,
        result: SynthesisResult,
        meta: WorkspaceMeta,
        output_path: Path,
        overwrite: bool = False,
        **render_options,
    ) -> Path:
        """Render a synthesis result and save it to a file.

        Raises:
            ReportError: If rendering fails
            FileExistsError: If file exists and overwrite is False
        """
        output_path = Path(output_path)
        if output_path.exists() and not overwrite:
            raise FileExistsError(f"File already exists: {output_path}")

        document = self.render(result, meta, **render_options)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(document, encoding="utf-8")
        logger.info("Wrote assessment report to %s", output_path)
        return output_path
