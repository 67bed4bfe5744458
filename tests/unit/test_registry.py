"""Tests for the rule registry and synthesis pass."""

import logging

import pytest

from assessment_system.schemas.common import InsightType
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.registry import RuleRegistry, prioritize_insights
from assessment_system.synthesis.rule import SynthesisRule


# =============================================================================
# TEST RULES
# =============================================================================


class StaticRule(SynthesisRule):
    """Emits a fixed list of (severity, type) insights."""

    def __init__(self, rule_id, required_tools=(), emits=(), scores=None):
        self.id = rule_id
        self.name = rule_id
        self.description = f"Static rule {rule_id}"
        self.required_tools = tuple(required_tools)
        self.emits = list(emits)
        self.scores = scores
        self.calls = 0

    def evaluate(self, context):
        self.calls += 1
        return [
            self.insight(type=t, severity=s, title=f"{self.id} {n}", description="d", recommendation="r")
            for n, (s, t) in enumerate(self.emits)
        ]

    def calculate_scores(self, context):
        return self.scores


class ExplodingRule(SynthesisRule):
    """Raises from evaluate."""

    def __init__(self, rule_id="X-explodes", required_tools=()):
        self.id = rule_id
        self.name = "Exploding"
        self.description = "Always fails"
        self.required_tools = tuple(required_tools)

    def evaluate(self, context):
        raise RuntimeError("boom")


class MustNotRunRule(SynthesisRule):
    """Fails the test if invoked."""

    id = "X-must-not-run"
    name = "Must not run"
    description = "Requires a tool that is never present"
    required_tools = ("missing-tool",)

    def evaluate(self, context):
        pytest.fail("evaluate() called on an ineligible rule")

    def calculate_scores(self, context):
        pytest.fail("calculate_scores() called on an ineligible rule")


class DuckRule:
    """Satisfies the Rule protocol without subclassing."""

    id = "D-duck"
    name = "Duck"
    description = "Plain object rule"
    required_tools = ["swot-analysis"]

    def evaluate(self, context):
        return [
            Insight(
                id="D-1-aaaaa",
                rule_id=self.id,
                type="strength",
                severity=1,
                title="Duck",
                description="d",
                recommendation="r",
            )
        ]


@pytest.fixture
def context():
    return SynthesisContext(tools={"swot-analysis": {"threats": []}, "90day-roadmap": {"tasks": []}})


# =============================================================================
# CATALOG
# =============================================================================


class TestCatalog:
    """Tests for rule registration."""

    def test_register_and_get(self):
        registry = RuleRegistry()
        rule = StaticRule("A-one")
        registry.register(rule)

        assert registry.get("A-one") is rule
        assert registry.has("A-one")
        assert "A-one" in registry
        assert registry.count() == 1
        assert len(registry) == 1

    def test_get_unknown_returns_none(self):
        assert RuleRegistry().get("nope") is None

    def test_register_overwrites_and_warns(self, caplog):
        registry = RuleRegistry()
        first = StaticRule("A-one")
        second = StaticRule("A-one")
        registry.register(first)

        with caplog.at_level(logging.WARNING):
            registry.register(second)

        assert registry.get("A-one") is second
        assert registry.count() == 1
        assert "already registered" in caplog.text

    def test_unregister(self):
        registry = RuleRegistry([StaticRule("A-one")])
        registry.unregister("A-one")
        registry.unregister("never-registered")
        assert registry.count() == 0

    def test_get_ids_and_get_all(self):
        registry = RuleRegistry([StaticRule("B-two"), StaticRule("A-one")])
        assert sorted(registry.get_ids()) == ["A-one", "B-two"]
        assert {r.id for r in registry.get_all()} == {"A-one", "B-two"}

    def test_get_applicable_rules(self):
        registry = RuleRegistry(
            [
                StaticRule("A-one", required_tools=["swot-analysis"]),
                StaticRule("B-two", required_tools=["swot-analysis", "90day-roadmap"]),
                StaticRule("C-three", required_tools=[]),
            ]
        )
        applicable = {r.id for r in registry.get_applicable_rules(["swot-analysis"])}
        assert applicable == {"A-one", "C-three"}

    def test_accepts_protocol_object(self, context):
        registry = RuleRegistry([DuckRule()])
        result = registry.evaluate_all(context)
        assert [i.rule_id for i in result.insights] == ["D-duck"]
        assert result.scores == {}


# =============================================================================
# ADMISSION
# =============================================================================


class TestAdmission:
    """A rule runs iff all its required tools have a defined payload."""

    def test_ineligible_rule_is_never_invoked(self, context):
        registry = RuleRegistry([MustNotRunRule()])
        result = registry.evaluate_all(context)

        assert result.rules_skipped == ["X-must-not-run"]
        assert result.rules_evaluated == 0
        assert result.insights == []

    def test_none_payload_counts_as_missing(self):
        rule = StaticRule("A-one", required_tools=["swot-analysis"], emits=[(3, "gap")])
        result = RuleRegistry([rule]).evaluate_all(SynthesisContext(tools={"swot-analysis": None}))

        assert rule.calls == 0
        assert result.rules_skipped == ["A-one"]

    def test_rule_with_no_required_tools_always_runs(self):
        rule = StaticRule("A-one", emits=[(2, "opportunity")])
        result = RuleRegistry([rule]).evaluate_all(SynthesisContext())

        assert rule.calls == 1
        assert result.rules_evaluated == 1

    def test_skip_plus_evaluated_covers_catalog(self, context):
        registry = RuleRegistry(
            [
                StaticRule("A-one", required_tools=["swot-analysis"]),
                StaticRule("B-two", required_tools=["leadership-dna"]),
                StaticRule("C-three", required_tools=["90day-roadmap"]),
            ]
        )
        result = registry.evaluate_all(context)
        assert result.rules_evaluated + len(result.rules_skipped) == len(registry)

    def test_empty_context_skips_everything(self):
        registry = RuleRegistry(
            [StaticRule("A-one", required_tools=["swot-analysis"]), MustNotRunRule()]
        )
        result = registry.evaluate_all(SynthesisContext(tools={}))

        assert result.insights == []
        assert result.scores == {}
        assert result.rules_evaluated == 0
        assert sorted(result.rules_skipped) == ["A-one", "X-must-not-run"]

    def test_empty_registry(self, context):
        result = RuleRegistry().evaluate_all(context)
        assert result.insights == []
        assert result.rules_evaluated == 0
        assert result.rules_skipped == []


# =============================================================================
# FAULT ISOLATION
# =============================================================================


class TestFaultIsolation:
    """A failing rule never affects the others."""

    def test_failing_rule_does_not_stop_pass(self, context, caplog):
        good = StaticRule("A-good", emits=[(3, "gap")])
        registry = RuleRegistry([ExplodingRule(), good])

        with caplog.at_level(logging.ERROR):
            result = registry.evaluate_all(context)

        assert [i.rule_id for i in result.insights] == ["A-good"]
        assert result.rules_evaluated == 1
        assert result.rules_failed == ["X-explodes"]
        assert "X-explodes" in caplog.text
        assert "boom" in caplog.text

    def test_failed_rule_not_counted_or_skipped(self, context):
        result = RuleRegistry([ExplodingRule()]).evaluate_all(context)
        assert result.rules_evaluated == 0
        assert result.rules_skipped == []
        assert result.rules_failed == ["X-explodes"]

    def test_invalid_return_value_is_a_failure(self, context):
        class BadReturnRule(StaticRule):
            def evaluate(self, context):
                return [{"title": "not an insight"}]

        result = RuleRegistry([BadReturnRule("A-bad")]).evaluate_all(context)
        assert result.insights == []
        assert result.rules_failed == ["A-bad"]

    def test_malformed_payload_fails_only_that_rule(self):
        from assessment_system.synthesis.rules import UnmitigatedThreatRule

        ctx = SynthesisContext(
            tools={"swot-analysis": {"threats": "not a list"}, "90day-roadmap": {"tasks": []}}
        )
        good = StaticRule("A-good", emits=[(1, "strength")])
        result = RuleRegistry([UnmitigatedThreatRule(), good]).evaluate_all(ctx)

        assert result.rules_failed == ["E2-unmitigated-threat"]
        assert [i.rule_id for i in result.insights] == ["A-good"]

    def test_failing_scores_keep_insights(self, context, caplog):
        class BadScoresRule(StaticRule):
            def calculate_scores(self, context):
                raise ValueError("no scores today")

        rule = BadScoresRule("A-one", emits=[(2, "gap")])
        with caplog.at_level(logging.ERROR):
            result = RuleRegistry([rule]).evaluate_all(context)

        assert len(result.insights) == 1
        assert result.rules_evaluated == 1
        assert result.scores == {}
        assert "failed to calculate scores" in caplog.text

    def test_scores_still_merged_when_evaluate_fails(self, context):
        class HalfBrokenRule(ExplodingRule):
            def calculate_scores(self, context):
                return {"overall": 10}

        result = RuleRegistry([HalfBrokenRule()]).evaluate_all(context)
        assert result.rules_failed == ["X-explodes"]
        assert result.scores == {"overall": 10}


# =============================================================================
# ORDERING
# =============================================================================


class TestOrdering:
    """Insights sort by severity desc, then gap < warning < opportunity < strength."""

    def test_severity_then_type_rank(self, context):
        rule = StaticRule(
            "A-one",
            emits=[(3, "gap"), (5, "warning"), (3, "opportunity"), (5, "gap")],
        )
        result = RuleRegistry([rule]).evaluate_all(context)
        assert [(i.severity, i.type.value) for i in result.insights] == [
            (5, "gap"),
            (5, "warning"),
            (3, "gap"),
            (3, "opportunity"),
        ]

    def test_order_is_sorted_across_rules(self, context):
        registry = RuleRegistry(
            [
                StaticRule("A-one", emits=[(1, "strength"), (4, "opportunity")]),
                StaticRule("B-two", emits=[(4, "gap"), (2, "warning")]),
            ]
        )
        result = registry.evaluate_all(context)
        keys = [(i.severity, i.type) for i in result.insights]
        assert keys == [
            (4, InsightType.GAP),
            (4, InsightType.OPPORTUNITY),
            (2, InsightType.WARNING),
            (1, InsightType.STRENGTH),
        ]

    def test_ties_keep_production_order(self):
        insights = [
            Insight(id=str(n), rule_id="A", type="gap", severity=3, title=str(n),
                    description="d", recommendation="r")
            for n in range(5)
        ]
        assert [i.id for i in prioritize_insights(insights)] == ["0", "1", "2", "3", "4"]

    def test_prioritize_does_not_mutate_input(self):
        insights = [
            Insight(id="a", rule_id="A", type="strength", severity=1, title="a",
                    description="d", recommendation="r"),
            Insight(id="b", rule_id="A", type="gap", severity=5, title="b",
                    description="d", recommendation="r"),
        ]
        ordered = prioritize_insights(insights)
        assert [i.id for i in ordered] == ["b", "a"]
        assert [i.id for i in insights] == ["a", "b"]


# =============================================================================
# SCORES AND IDEMPOTENCE
# =============================================================================


class TestScores:
    """Score merging across rules."""

    def test_scores_merged_across_rules(self, context):
        registry = RuleRegistry(
            [
                StaticRule("A-one", scores={"alpha": 1}),
                StaticRule("B-two", scores={"beta": 2}),
            ]
        )
        assert registry.evaluate_all(context).scores == {"alpha": 1, "beta": 2}

    def test_collision_last_write_wins_with_warning(self, context, caplog):
        registry = RuleRegistry(
            [
                StaticRule("A-one", scores={"overall": 1}),
                StaticRule("B-two", scores={"overall": 2}),
            ]
        )
        with caplog.at_level(logging.WARNING):
            result = registry.evaluate_all(context)

        assert result.scores == {"overall": 2}
        assert "overwrites" in caplog.text

    def test_collision_warning_can_be_disabled(self, context, caplog):
        registry = RuleRegistry(
            [
                StaticRule("A-one", scores={"overall": 1}),
                StaticRule("B-two", scores={"overall": 2}),
            ],
            warn_on_score_collision=False,
        )
        with caplog.at_level(logging.WARNING):
            result = registry.evaluate_all(context)

        assert result.scores == {"overall": 2}
        assert "overwrites" not in caplog.text

    def test_rule_without_scores_contributes_nothing(self, context):
        result = RuleRegistry([StaticRule("A-one", scores=None)]).evaluate_all(context)
        assert result.scores == {}


class TestIdempotence:
    """Repeated passes over the same context agree on everything but ids and timestamp."""

    def test_two_passes_match(self, context):
        registry = RuleRegistry(
            [
                StaticRule("A-one", emits=[(3, "gap"), (5, "warning")], scores={"x": 1}),
                StaticRule("B-two", required_tools=["leadership-dna"]),
                ExplodingRule(),
            ]
        )

        def signature(result):
            return (
                [(i.rule_id, i.type, i.severity, i.title, i.data) for i in result.insights],
                result.scores,
                result.rules_evaluated,
                result.rules_skipped,
                result.rules_failed,
            )

        assert signature(registry.evaluate_all(context)) == signature(registry.evaluate_all(context))

    def test_context_not_mutated(self, context):
        before = {k: dict(v) for k, v in context.tools.items()}
        RuleRegistry([StaticRule("A-one", emits=[(1, "gap")])]).evaluate_all(context)
        assert dict(context.tools) == before

    def test_each_pass_returns_fresh_result(self, context):
        registry = RuleRegistry([StaticRule("A-one", emits=[(1, "gap")])])
        first = registry.evaluate_all(context)
        second = registry.evaluate_all(context)
        assert first is not second
        assert first.insights is not second.insights
