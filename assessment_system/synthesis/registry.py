"""Rule registry and synthesis pass orchestration.

The registry owns the rule catalog and runs ``evaluate_all``:

1. Admission: a rule is eligible iff every required tool has a defined
   payload in the context. Ineligible rules are recorded in
   ``rules_skipped`` and never invoked.
2. Isolated execution: each eligible rule's ``evaluate`` runs inside its own
   fault boundary. A failing rule is logged and dropped; the pass continues.
3. Scores: ``calculate_scores`` runs in a separate fault boundary and its
   mapping is merged into the aggregate (last write wins).
4. Ordering: insights are stably sorted by severity (descending), then type
   rank (gap < warning < opportunity < strength).

The registry keeps no result state; each pass returns a fresh snapshot.
Catalog iteration order (``get_all``/``get_ids``) carries no meaning;
callers needing a stable listing should sort by id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from assessment_system.schemas.common import TYPE_RANK
from assessment_system.synthesis.models import Insight, SynthesisContext, SynthesisResult

logger = logging.getLogger(__name__)


class Rule(Protocol):
    """Structural type accepted by the registry."""

    id: str
    name: str
    description: str
    required_tools: Iterable[str]

    def evaluate(self, context: SynthesisContext) -> list[Insight]: ...


def prioritize_insights(insights: Iterable[Insight]) -> list[Insight]:
    """Return insights ordered by severity desc, then type rank.

    The sort is stable: insights tying on both keys keep their input order.
    """
    return sorted(insights, key=lambda i: (-i.severity, TYPE_RANK[i.type]))


class RuleRegistry:
    """Catalog of synthesis rules keyed by rule id.

    Usage:
        registry = RuleRegistry()
        registry.register(ExecutionGapRule())
        result = registry.evaluate_all(context)
    """

    def __init__(self, rules: Iterable[Rule] = (), warn_on_score_collision: bool = True):
        self._rules: dict[str, Rule] = {}
        self.warn_on_score_collision = warn_on_score_collision
        for rule in rules:
            self.register(rule)

    # =========================================================================
    # CATALOG
    # =========================================================================

    def register(self, rule: Rule) -> None:
        """Insert or overwrite the rule at ``rule.id``. Last registration wins."""
        if rule.id in self._rules:
            logger.warning("Synthesis rule %s already registered, overwriting", rule.id)
        self._rules[rule.id] = rule

    def unregister(self, rule_id: str) -> None:
        """Remove a rule. Unknown ids are ignored."""
        self._rules.pop(rule_id, None)

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def has(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def get_all(self) -> list[Rule]:
        return list(self._rules.values())

    def get_ids(self) -> list[str]:
        return list(self._rules.keys())

    def count(self) -> int:
        return len(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def get_applicable_rules(self, available_tool_ids: Iterable[str]) -> list[Rule]:
        """Rules whose required tools are all in ``available_tool_ids``.

        A dry-run admission check; no rule is executed.
        """
        available = set(available_tool_ids)
        return [
            rule for rule in self._rules.values() if set(rule.required_tools) <= available
        ]

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def evaluate_all(self, context: SynthesisContext) -> SynthesisResult:
        """Run every eligible rule against ``context`` and aggregate the results.

        Never raises because of a rule failure.
        """
        insights: list[Insight] = []
        scores: dict[str, float] = {}
        score_owners: dict[str, str] = {}
        rules_skipped: list[str] = []
        rules_failed: list[str] = []
        rules_evaluated = 0

        for rule in list(self._rules.values()):
            missing = [t for t in rule.required_tools if not context.has_tool(t)]
            if missing:
                logger.debug("Skipping rule %s: missing tools %s", rule.id, missing)
                rules_skipped.append(rule.id)
                continue

            rule_insights = self._run_evaluate(rule, context)
            if rule_insights is None:
                rules_failed.append(rule.id)
            else:
                insights.extend(rule_insights)
                rules_evaluated += 1

            rule_scores = self._run_calculate_scores(rule, context)
            if rule_scores:
                self._merge_scores(rule.id, rule_scores, scores, score_owners)

        logger.info(
            "Synthesis pass: %d rules evaluated, %d skipped, %d failed, %d insights",
            rules_evaluated,
            len(rules_skipped),
            len(rules_failed),
            len(insights),
        )

        return SynthesisResult(
            insights=prioritize_insights(insights),
            scores=scores,
            rules_evaluated=rules_evaluated,
            rules_skipped=rules_skipped,
            rules_failed=rules_failed,
        )

    @staticmethod
    def _run_evaluate(rule: Rule, context: SynthesisContext) -> list[Insight] | None:
        """Run ``rule.evaluate``; return None if it failed."""
        try:
            produced = list(rule.evaluate(context) or [])
            for item in produced:
                if not isinstance(item, Insight):
                    raise TypeError(
                        f"evaluate() returned {type(item).__name__}, expected Insight"
                    )
            return produced
        except Exception:
            logger.exception("Synthesis rule %s failed", rule.id)
            return None

    @staticmethod
    def _run_calculate_scores(rule: Rule, context: SynthesisContext) -> Mapping[str, Any] | None:
        """Run ``rule.calculate_scores`` if the rule defines it; None on failure."""
        calculate = getattr(rule, "calculate_scores", None)
        if calculate is None:
            return None
        try:
            rule_scores = calculate(context)
            if rule_scores is not None and not isinstance(rule_scores, Mapping):
                raise TypeError(
                    f"calculate_scores() returned {type(rule_scores).__name__}, expected a mapping"
                )
            return rule_scores
        except Exception:
            logger.exception("Synthesis rule %s failed to calculate scores", rule.id)
            return None

    def _merge_scores(
        self,
        rule_id: str,
        rule_scores: Mapping[str, Any],
        scores: dict[str, float],
        score_owners: dict[str, str],
    ) -> None:
        for key, value in rule_scores.items():
            previous = score_owners.get(key)
            if previous is not None and previous != rule_id and self.warn_on_score_collision:
                logger.warning(
                    "Score '%s' from rule %s overwrites value from rule %s",
                    key,
                    rule_id,
                    previous,
                )
            scores[key] = value
            score_owners[key] = rule_id
