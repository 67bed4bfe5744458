"""Typed views over assessment tool payloads.

Tool payloads are opaque to the synthesis engine; it only checks presence.
Each rule reads the payloads it declared through one of these models, so a
malformed payload raises a ``pydantic.ValidationError`` inside that rule
instead of silently producing a wrong insight.

Optional sections default to ``None`` so a partially completed tool still
validates; rules decide what to do with missing sections. Unknown fields are
ignored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolPayload(BaseModel):
    """Base class for tool payload views."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def parse(cls, payload: Any):
        """Validate a raw payload into this view."""
        return cls.model_validate(payload)


# =============================================================================
# LEADERSHIP / VISION
# =============================================================================


class DimensionScore(BaseModel):
    """A slider dimension with a current value (1-10)."""

    model_config = ConfigDict(extra="ignore")

    current: float = Field(..., description="Current self-assessed score")
    target: Optional[float] = Field(None, description="Desired score")


class LeadershipDNAData(ToolPayload):
    """Leadership DNA tool: named leadership dimensions scored 1-10."""

    dimensions: Optional[dict[str, DimensionScore]] = None


class Pillar(BaseModel):
    """A strategic pillar on the vision canvas."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    description: str = ""

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def blank_if_null(cls, v: Any) -> Any:
        """Treat a cleared text field as empty."""
        return "" if v is None else v


class NorthStar(BaseModel):
    """The single headline metric a business steers by."""

    model_config = ConfigDict(extra="ignore")

    metric: str = ""
    target: str = ""

    @field_validator("metric", "target", mode="before")
    @classmethod
    def blank_if_null(cls, v: Any) -> Any:
        return "" if v is None else v


class VisionCanvasData(ToolPayload):
    """Vision canvas tool: strategic pillars, core values, north star."""

    pillars: Optional[list[Pillar]] = None
    core_values: Optional[list[str]] = Field(None, alias="coreValues")
    north_star: Optional[NorthStar] = Field(None, alias="northStar")


# =============================================================================
# SWOT / ROADMAP
# =============================================================================


class SWOTItem(BaseModel):
    """A free-text SWOT entry with a 1-5 confidence rating."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    text: str
    confidence: int = Field(..., ge=0, le=5)


class SWOTData(ToolPayload):
    """SWOT analysis tool."""

    strengths: Optional[list[SWOTItem]] = None
    weaknesses: Optional[list[SWOTItem]] = None
    opportunities: Optional[list[SWOTItem]] = None
    threats: Optional[list[SWOTItem]] = None


class RoadmapTask(BaseModel):
    """A task planned in a given week of the 90-day roadmap."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    title: str = ""
    notes: Optional[str] = None
    week: int = Field(1, ge=1)


class RoadmapData(ToolPayload):
    """90-day roadmap tool."""

    tasks: Optional[list[RoadmapTask]] = None


# =============================================================================
# READINESS / MATURITY
# =============================================================================


class AdvisorReadinessData(ToolPayload):
    """Advisor readiness questionnaire: question id -> answer (0-5)."""

    answers: Optional[dict[str, float]] = None


class SOPArea(BaseModel):
    """A business process area with maturity and importance ratings (1-5)."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str
    maturity: int = Field(..., ge=0, le=5)
    importance: int = Field(..., ge=0, le=5)


class SOPMaturityData(ToolPayload):
    """SOP maturity tool."""

    areas: Optional[list[SOPArea]] = None


class AIReadinessData(ToolPayload):
    """AI readiness tool: dimension -> percentage score (0-100)."""

    dimensions: Optional[dict[str, float]] = None


class EQEntry(BaseModel):
    """One dated business EQ self-assessment."""

    model_config = ConfigDict(extra="ignore")

    date: Optional[str] = None
    dimensions: dict[str, float] = Field(default_factory=dict)


class BusinessEQData(ToolPayload):
    """Business EQ tool: chronological assessment entries."""

    entries: Optional[list[EQEntry]] = None


class ReadinessCheckData(ToolPayload):
    """Quick readiness check: three percentage dimensions (0-100)."""

    strategy_alignment: float = Field(..., ge=0, le=100, alias="dimension1")
    operational_readiness: float = Field(..., ge=0, le=100, alias="dimension2")
    resource_capacity: float = Field(..., ge=0, le=100, alias="dimension3")
    category: Optional[str] = None
