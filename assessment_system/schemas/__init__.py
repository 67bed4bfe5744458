"""Schemas shared across the assessment system."""

from assessment_system.schemas.common import (
    MAX_SEVERITY,
    MIN_SEVERITY,
    TYPE_RANK,
    InsightType,
    ToolId,
)
from assessment_system.schemas.payloads import (
    AdvisorReadinessData,
    AIReadinessData,
    BusinessEQData,
    LeadershipDNAData,
    ReadinessCheckData,
    RoadmapData,
    SOPMaturityData,
    SWOTData,
    ToolPayload,
    VisionCanvasData,
)

__all__ = [
    "InsightType",
    "ToolId",
    "TYPE_RANK",
    "MIN_SEVERITY",
    "MAX_SEVERITY",
    "ToolPayload",
    "LeadershipDNAData",
    "VisionCanvasData",
    "SWOTData",
    "RoadmapData",
    "AdvisorReadinessData",
    "SOPMaturityData",
    "AIReadinessData",
    "BusinessEQData",
    "ReadinessCheckData",
]
