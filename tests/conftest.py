"""Pytest configuration and fixtures."""

import logging

import pytest

from assessment_system.core.logging import DEFAULT_LOGGER_NAME


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests."""
    return tmp_path


@pytest.fixture
def temp_workspace(temp_dir):
    """Create a temporary workspace for testing."""
    from assessment_system.core.workspace import Workspace

    ws = Workspace(temp_dir / "workspace")
    ws.init(name="Test Business")
    return ws


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Remove handlers added by setup_logging so tests don't share log files."""
    yield
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# =============================================================================
# TOOL PAYLOADS
# =============================================================================


@pytest.fixture
def leadership_dna():
    """Leadership DNA with weak execution (4/10)."""
    return {
        "dimensions": {
            "execution": {"current": 4, "target": 8},
            "vision": {"current": 8, "target": 9},
            "communication": {"current": 7, "target": 8},
        }
    }


@pytest.fixture
def vision_canvas():
    """Vision canvas with seven pillars and a North Star metric."""
    return {
        "pillars": [
            {"id": f"p{i}", "title": f"Pillar {i}", "description": "Grow revenue"}
            for i in range(1, 8)
        ],
        "coreValues": ["Integrity", "Customer focus"],
        "northStar": {"metric": "Monthly recurring revenue", "target": "50k"},
    }


@pytest.fixture
def swot_analysis():
    """SWOT with one unaddressed threat and a strength matching an opportunity."""
    return {
        "strengths": [
            {"id": "s1", "text": "Strong engineering team", "confidence": 5},
            {"id": "s2", "text": "Loyal customers", "confidence": 2},
        ],
        "weaknesses": [],
        "opportunities": [
            {"id": "o1", "text": "Hire engineering talent abroad", "confidence": 4},
        ],
        "threats": [
            {"id": "t1", "text": "Competitor pricing pressure", "confidence": 5},
            {"id": "t2", "text": "Supply chain delays", "confidence": 2},
        ],
    }


@pytest.fixture
def roadmap():
    """Roadmap with 12 tasks over 2 active weeks."""
    return {
        "tasks": [
            {"id": f"t{i}", "title": f"Task {i}", "notes": "", "week": 1 + i % 2}
            for i in range(12)
        ]
    }


@pytest.fixture
def advisor_readiness():
    """Advisor readiness at 40% (8 of 20)."""
    return {"answers": {"q1": 2, "q2": 2, "q3": 2, "q4": 2}}


@pytest.fixture
def readiness_check():
    """Readiness check averaging 30% with a 50-point spread."""
    return {"dimension1": 60, "dimension2": 20, "dimension3": 10}


@pytest.fixture
def all_tools(
    leadership_dna, vision_canvas, swot_analysis, roadmap, advisor_readiness, readiness_check
):
    return {
        "leadership-dna": leadership_dna,
        "vision-canvas": vision_canvas,
        "swot-analysis": swot_analysis,
        "90day-roadmap": roadmap,
        "advisor-readiness": advisor_readiness,
        "readiness-check": readiness_check,
    }
