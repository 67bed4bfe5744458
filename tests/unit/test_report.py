"""Tests for Markdown report generation."""

from datetime import datetime, timezone

import pytest

from assessment_system.core.config import ReportConfig
from assessment_system.synthesis.models import Insight, SynthesisResult, WorkspaceMeta
from assessment_system.synthesis.report import ReportError, ReportGenerator


@pytest.fixture
def result():
    def make(insight_id, type, severity, title):
        return Insight(
            id=insight_id,
            rule_id="A-rule",
            type=type,
            severity=severity,
            title=title,
            description=f"{title} description.",
            recommendation=f"{title} recommendation.",
            affected_tools=("swot-analysis", "90day-roadmap"),
        )

    return SynthesisResult(
        insights=[
            make("a", "warning", 5, "Unmitigated Threat"),
            make("b", "gap", 3, "Dimension Imbalance Detected"),
            make("c", "strength", 1, "Compounding Advantages Detected"),
        ],
        scores={"overallReadiness": 30, "strategyAlignment": 60.0},
        timestamp=datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc),
        rules_evaluated=3,
        rules_skipped=["E5-sop-metric-missing"],
    )


@pytest.fixture
def meta():
    return WorkspaceMeta(company_name="Acme Ltd", assessment_date="2025-05-30T08:00:00+00:00")


class TestRender:
    """Test rendering to Markdown."""

    def test_header_and_summary(self, result, meta):
        document = ReportGenerator().render(result, meta)

        assert document.startswith("# Business Assessment Report\n")
        assert "**Company:** Acme Ltd" in document
        assert "**Assessment date:** 2025-05-30" in document
        assert "**Synthesis run:** 2025-06-01" in document
        assert "- Rules evaluated: 3" in document
        assert "- 1 rule skipped pending more data" in document
        assert "- Insights: 3" in document

    def test_sections_follow_type_rank(self, result, meta):
        document = ReportGenerator().render(result, meta)

        gaps = document.index("## Gaps")
        warnings = document.index("## Warnings")
        strengths = document.index("## Strengths")
        assert gaps < warnings < strengths
        assert "## Opportunities" not in document

    def test_insight_details(self, result, meta):
        document = ReportGenerator().render(result, meta)

        assert "### Unmitigated Threat" in document
        assert "*Severity 5 (Critical)*" in document
        assert "Related tools: swot-analysis, 90day-roadmap" in document
        assert "**Recommendation:** Unmitigated Threat recommendation." in document

    def test_scores_table(self, result, meta):
        document = ReportGenerator().render(result, meta)

        assert "## Scores" in document
        assert "| Overall readiness | 30 |" in document
        assert "| Strategy alignment | 60 |" in document

    def test_scores_can_be_excluded(self, result, meta):
        generator = ReportGenerator(ReportConfig(include_scores=False))
        assert "## Scores" not in generator.render(result, meta)
        assert "## Scores" in generator.render(result, meta, include_scores=True)

    def test_min_severity_from_config(self, result, meta):
        generator = ReportGenerator(ReportConfig(min_severity=3, title="Acme Review"))
        document = generator.render(result, meta)

        assert document.startswith("# Acme Review\n")
        assert "Compounding Advantages Detected" not in document
        assert "- Insights: 2 (1 below severity 3 omitted)" in document

    def test_min_severity_override(self, result, meta):
        document = ReportGenerator().render(result, meta, min_severity=5)
        assert "Unmitigated Threat" in document
        assert "Dimension Imbalance Detected" not in document

    def test_empty_result(self, meta):
        document = ReportGenerator().render(SynthesisResult(), meta)
        assert "No insights were generated" in document
        assert "## Scores" not in document

    def test_deterministic(self, result, meta):
        generator = ReportGenerator()
        assert generator.render(result, meta) == generator.render(result, meta)

    def test_missing_template(self, result, meta, tmp_path):
        generator = ReportGenerator(template_dir=tmp_path)
        with pytest.raises(ReportError, match="Template not found"):
            generator.render(result, meta)


class TestRenderToFile:
    """Test writing reports to disk."""

    def test_writes_file(self, result, meta, tmp_path):
        output = tmp_path / "reports" / "report.md"
        path = ReportGenerator().render_to_file(result, meta, output)

        assert path == output
        assert "# Business Assessment Report" in output.read_text()

    def test_refuses_to_overwrite(self, result, meta, tmp_path):
        output = tmp_path / "report.md"
        output.write_text("keep me")

        with pytest.raises(FileExistsError):
            ReportGenerator().render_to_file(result, meta, output)
        assert output.read_text() == "keep me"

    def test_overwrite(self, result, meta, tmp_path):
        output = tmp_path / "report.md"
        output.write_text("old")

        ReportGenerator().render_to_file(result, meta, output, overwrite=True, min_severity=4)
        content = output.read_text()
        assert "Unmitigated Threat" in content
        assert "Dimension Imbalance Detected" not in content
