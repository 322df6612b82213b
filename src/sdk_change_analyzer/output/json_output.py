"""
JSON output formatter.
"""

import json
from typing import Any

from sdk_change_analyzer.models.endpoint import EndpointDescriptor
from sdk_change_analyzer.models.report import AnalysisReport
from sdk_change_analyzer.output.formatters import BaseFormatter, register_formatter


@register_formatter("json")
class JsonFormatter(BaseFormatter):
    """
    Format output as JSON.
    """

    file_suffix = ".json"

    def __init__(self, indent: int = 2) -> None:
        """
        Initialize the JSON formatter.

        Args:
            indent: JSON indentation level.
        """
        self.indent = indent

    def report_to_dict(self, report: AnalysisReport) -> dict[str, Any]:
        """Convert a report to plain data with a derived summary block."""
        data = report.to_dict()
        data["summary"] = {
            "files_changed": report.total_files_changed,
            "generated_files_changed": len(report.generated_files_changed),
            "client_files_changed": len(report.client_files_changed),
            "other_files_changed": len(report.other_files_changed),
            "lines_added": report.lines_added,
            "lines_removed": report.lines_removed,
            "new_endpoints": len(report.new_endpoints),
            "wrapper_files_analyzed": report.wrapper_files_analyzed,
            "affected_wrappers": report.affected_count,
            "wrapper_impact_level": report.wrapper_impact_level.value,
            "risk_level": report.risk.level.value,
            "risk_score": report.risk.score,
        }
        for entry, wrapper in zip(data["affected_wrappers"], report.affected_wrappers):
            entry["affected_import_count"] = wrapper.affected_import_count
        return data

    def format(self, report: AnalysisReport) -> str:
        """Format an analysis report as JSON."""
        return json.dumps(self.report_to_dict(report), indent=self.indent)

    def format_endpoints(self, endpoints: list[EndpointDescriptor]) -> str:
        """Format a list of endpoints as JSON."""
        data = {
            "total": len(endpoints),
            "endpoints": [ep.model_dump(mode="json") for ep in endpoints],
        }

        return json.dumps(data, indent=self.indent)
