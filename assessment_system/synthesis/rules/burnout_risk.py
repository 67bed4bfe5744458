"""Burnout risk.

Compares roadmap workload against a safe weekly capacity derived from the
advisor readiness questionnaire: 100% readiness sustains 5 tasks per week,
50% sustains 2.5, 0% sustains none.
"""

import math
from collections import Counter

from assessment_system.schemas.common import InsightType, ToolId
from assessment_system.schemas.payloads import AdvisorReadinessData, RoadmapData
from assessment_system.synthesis.models import Insight, SynthesisContext
from assessment_system.synthesis.rule import SynthesisRule

MAX_ANSWER = 5
TASKS_PER_WEEK_AT_FULL_READINESS = 5
LOW_READINESS = 50
CRITICAL_READINESS = 30


def readiness_percentage(answers: dict[str, float]) -> int:
    """Readiness as a percentage of the maximum possible answer total.

    Halves round up (12.5 -> 13).
    """
    if not answers:
        return 0
    max_score = len(answers) * MAX_ANSWER
    return math.floor(sum(answers.values()) / max_score * 100 + 0.5)


class BurnoutRiskRule(SynthesisRule):
    """Identifies burnout risk from low readiness combined with high workload."""

    id = "E3-burnout-risk"
    name = "Burnout Risk Warning"
    description = "Identifies risk of burnout from low readiness combined with high workload"
    required_tools = (ToolId.ADVISOR_READINESS.value, ToolId.ROADMAP.value)

    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        advisor = self.view(context, ToolId.ADVISOR_READINESS.value, AdvisorReadinessData)
        roadmap = self.view(context, ToolId.ROADMAP.value, RoadmapData)

        # An unanswered questionnaire is missing data, not zero readiness
        if not advisor.answers or roadmap.tasks is None:
            return []

        readiness = readiness_percentage(advisor.answers)

        tasks_by_week = Counter(task.week for task in roadmap.tasks)
        active_weeks = len(tasks_by_week)
        avg_tasks_per_week = len(roadmap.tasks) / active_weeks if active_weeks else 0.0

        safe_capacity = readiness / 100 * TASKS_PER_WEEK_AT_FULL_READINESS

        if readiness >= LOW_READINESS or avg_tasks_per_week <= safe_capacity:
            return []

        # Zero capacity means any workload is an overload
        overload = avg_tasks_per_week / safe_capacity if safe_capacity else None

        return [
            self.insight(
                type=InsightType.WARNING,
                severity=5 if readiness < CRITICAL_READINESS else 4,
                title="Burnout Risk Detected",
                description=(
                    f"Your advisor readiness score ({readiness}%) suggests limited "
                    f"capacity, but your roadmap averages {avg_tasks_per_week:.1f} tasks "
                    f"per active week. This exceeds the recommended {safe_capacity:.1f} "
                    "tasks/week for your current state."
                ),
                recommendation=(
                    "Consider: (1) Reduce roadmap scope or extend timeline, (2) Delegate "
                    "tasks to improve capacity, (3) Focus on improving operational "
                    "maturity before scaling execution."
                ),
                data={
                    "readinessPercentage": readiness,
                    "avgTasksPerWeek": avg_tasks_per_week,
                    "safeCapacity": safe_capacity,
                    "totalTasks": len(roadmap.tasks),
                    "overloadFactor": overload,
                },
            )
        ]
