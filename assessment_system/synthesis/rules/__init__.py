"""Built-in synthesis rules.

The default catalog is built explicitly from DEFAULT_RULES; importing a
rule module has no side effects. Add a rule by writing a SynthesisRule
subclass and listing it here.
"""

from __future__ import annotations

import logging

from assessment_system.core.config import Config
from assessment_system.synthesis.registry import RuleRegistry
from assessment_system.synthesis.rule import SynthesisRule
from assessment_system.synthesis.rules.burnout_risk import BurnoutRiskRule
from assessment_system.synthesis.rules.execution_gap import ExecutionGapRule
from assessment_system.synthesis.rules.low_readiness import LowReadinessRule
from assessment_system.synthesis.rules.opportunity_match import OpportunityMatchRule
from assessment_system.synthesis.rules.sop_metric_missing import SOPMetricMissingRule
from assessment_system.synthesis.rules.strength_leverage import StrengthLeverageRule
from assessment_system.synthesis.rules.strength_multiplication import StrengthMultiplicationRule
from assessment_system.synthesis.rules.unmitigated_threat import UnmitigatedThreatRule

logger = logging.getLogger(__name__)

DEFAULT_RULES: tuple[type[SynthesisRule], ...] = (
    ExecutionGapRule,
    UnmitigatedThreatRule,
    BurnoutRiskRule,
    StrengthLeverageRule,
    SOPMetricMissingRule,
    OpportunityMatchRule,
    StrengthMultiplicationRule,
    LowReadinessRule,
)


def default_rule_ids() -> set[str]:
    return {rule_cls.id for rule_cls in DEFAULT_RULES}


def build_default_registry(config: Config | None = None) -> RuleRegistry:
    """Build a registry holding every built-in rule not disabled in config."""
    disabled: set[str] = set()
    warn_on_collision = True
    if config is not None:
        disabled = set(config.synthesis.disabled_rules)
        warn_on_collision = config.synthesis.warn_on_score_collision

    registry = RuleRegistry(warn_on_score_collision=warn_on_collision)
    for rule_cls in DEFAULT_RULES:
        if rule_cls.id in disabled:
            logger.debug("Rule %s disabled by configuration", rule_cls.id)
            continue
        registry.register(rule_cls())
    return registry


__all__ = [
    "DEFAULT_RULES",
    "build_default_registry",
    "default_rule_ids",
    "BurnoutRiskRule",
    "ExecutionGapRule",
    "LowReadinessRule",
    "OpportunityMatchRule",
    "SOPMetricMissingRule",
    "StrengthLeverageRule",
    "StrengthMultiplicationRule",
    "UnmitigatedThreatRule",
]
