"""
Assessment Synthesis System

Evaluates declarative synthesis rules over the combined data of independent
business self-assessment tools and produces prioritized insights.

Usage:
    assess init ~/my-assessment
    assess rules list
    assess synthesize
    assess report --output report.md
"""

__version__ = "0.1.0"
__author__ = "Assessment System"
