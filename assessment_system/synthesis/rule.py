"""Synthesis rule contract.

A rule is a named unit of domain logic that declares the tools it needs
and turns a SynthesisContext into zero or more Insights. Rules:

- read only ``context.tools[<declared id>]`` and ``context.meta``
- are deterministic apart from generated insight ids
- never mutate the context and never perform I/O

Subclass SynthesisRule for new rules. The registry also accepts any object
exposing ``id``, ``name``, ``description``, ``required_tools`` and
``evaluate`` (``calculate_scores`` is optional).
"""

from __future__ import annotations

import random
import string
import time
from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

from assessment_system.schemas.common import InsightType
from assessment_system.schemas.payloads import ToolPayload
from assessment_system.synthesis.models import Insight, SynthesisContext

P = TypeVar("P", bound=ToolPayload)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_insight_id(prefix: str) -> str:
    """Generate an insight id: ``<prefix>-<epoch ms>-<5 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=5))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def extract_keywords(text: str, min_length: int = 4) -> list[str]:
    """Lower-case ``text`` and keep whitespace tokens longer than ``min_length``."""
    return [word for word in text.lower().split() if len(word) > min_length]


class SynthesisRule(ABC):
    """Base class for synthesis rules.

    Subclasses set the class attributes and implement ``evaluate``.
    ``insight_prefix`` is the short code used in generated insight ids
    (defaults to the part of ``id`` before the first dash).
    """

    id: str = ""
    name: str = ""
    description: str = ""
    required_tools: tuple[str, ...] = ()
    insight_prefix: str = ""

    @abstractmethod
    def evaluate(self, context: SynthesisContext) -> list[Insight]:
        """Produce insights from the context. May return an empty list."""

    def calculate_scores(self, context: SynthesisContext) -> Optional[dict[str, float]]:
        """Return side-channel scores, or None when the rule has none."""
        return None

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def view(self, context: SynthesisContext, tool_id: str, model: type[P]) -> P:
        """Validate a declared tool's payload into its typed view."""
        if tool_id not in self.required_tools:
            raise KeyError(f"Rule {self.id} reads undeclared tool '{tool_id}'")
        return model.parse(context.tools[tool_id])

    def insight(
        self,
        type: InsightType,
        severity: int,
        title: str,
        description: str,
        recommendation: str,
        data: Optional[dict[str, Any]] = None,
        affected_tools: Optional[tuple[str, ...]] = None,
    ) -> Insight:
        """Build an Insight attributed to this rule with a fresh id."""
        prefix = self.insight_prefix or self.id.split("-", 1)[0]
        return Insight(
            id=generate_insight_id(prefix),
            rule_id=self.id,
            type=type,
            severity=severity,
            title=title,
            description=description,
            recommendation=recommendation,
            affected_tools=affected_tools if affected_tools is not None else self.required_tools,
            data=data or {},
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
