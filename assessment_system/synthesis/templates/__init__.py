"""Jinja2 templates for synthesis reports.

- report.md.j2: Markdown assessment report (summary, insights by type, scores)
"""

from pathlib import Path

# Template directory
TEMPLATE_DIR = Path(__file__).parent

REPORT_TEMPLATE = "report.md.j2"
