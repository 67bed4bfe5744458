"""Cross-Tool Synthesis Module.

Evaluates registered rules over the combined data of all assessment tools
and produces prioritized insights.

Example usage:
    from assessment_system.core import Workspace
    from assessment_system.synthesis import (
        ReportGenerator,
        SynthesisContextBuilder,
        build_default_registry,
    )

    workspace = Workspace("/path/to/workspace")
    registry = build_default_registry(workspace.config)

    context = SynthesisContextBuilder(workspace).build()
    result = registry.evaluate_all(context)
    for insight in result.insights:
        print(insight.severity, insight.title)

    markdown = ReportGenerator(workspace.config.report).render(result, context.meta)
"""

from assessment_system.synthesis.context import SynthesisContextBuilder
from assessment_system.synthesis.dashboard import (
    SEVERITY_LABELS,
    DismissalState,
    InsightStats,
    filter_insights,
    group_by_tool,
    group_by_type,
    insights_for_tool,
    skipped_summary,
)
from assessment_system.synthesis.models import (
    Insight,
    SynthesisContext,
    SynthesisResult,
    WorkspaceMeta,
)
from assessment_system.synthesis.output import (
    is_result_current,
    load_synthesis_result,
    save_synthesis_result,
)
from assessment_system.synthesis.registry import Rule, RuleRegistry, prioritize_insights
from assessment_system.synthesis.report import ReportError, ReportGenerator
from assessment_system.synthesis.rule import (
    SynthesisRule,
    extract_keywords,
    generate_insight_id,
)
from assessment_system.synthesis.rules import (
    DEFAULT_RULES,
    build_default_registry,
    default_rule_ids,
)

__all__ = [
    # Engine
    "RuleRegistry",
    "Rule",
    "prioritize_insights",
    "build_default_registry",
    "default_rule_ids",
    "DEFAULT_RULES",
    # Rule contract
    "SynthesisRule",
    "generate_insight_id",
    "extract_keywords",
    # Data model
    "Insight",
    "SynthesisContext",
    "SynthesisResult",
    "WorkspaceMeta",
    # Context
    "SynthesisContextBuilder",
    # Consumers
    "filter_insights",
    "insights_for_tool",
    "group_by_tool",
    "group_by_type",
    "skipped_summary",
    "InsightStats",
    "DismissalState",
    "SEVERITY_LABELS",
    "ReportGenerator",
    "ReportError",
    # Output
    "save_synthesis_result",
    "load_synthesis_result",
    "is_result_current",
]
