"""JSON rendering of reconciliation reports."""

from pathlib import Path
from typing import Optional
import json
import logging

from ..models.report import ReconciliationReport
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)


def render_json(report: ReconciliationReport, indent: int = 2, include_matches: bool = False) -> str:
    """Serialize a report to a JSON string."""
    return json.dumps(report.to_dict(include_matches=include_matches), indent=indent)


def write_json_report(
    report: ReconciliationReport,
    output_path: Optional[Path] = None,
    indent: int = 2,
    include_matches: bool = False,
) -> str:
    """
    Render a report and optionally write it to a file.

    Args:
        report: Reconciliation report
        output_path: File to write; nothing is written when omitted
        indent: JSON indentation
        include_matches: Also list every matched pair

    Returns:
        The rendered JSON text

    Raises:
        ReportGenerationError: If the file cannot be written
    """
    content = render_json(report, indent=indent, include_matches=include_matches)
    if output_path is not None:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content + "\n", encoding="utf-8")
        except OSError as e:
            raise ReportGenerationError(f"Failed to write JSON report {output_path}: {e}") from e
        logger.info(f"Report saved: {output_path}")
    return content
