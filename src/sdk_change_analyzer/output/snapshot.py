"""
Persist analysis reports as JSON snapshots.

Each run writes a timestamped file and overwrites a `latest` copy so
automation can always find the most recent analysis at a fixed path.
"""

import logging
from pathlib import Path

from sdk_change_analyzer.models.report import AnalysisReport
from sdk_change_analyzer.output.json_output import JsonFormatter

logger = logging.getLogger(__name__)

LATEST_NAME = "latest-analysis.json"


class SnapshotStore:
    """
    Write reports into a directory.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._formatter = JsonFormatter()

    @property
    def latest_path(self) -> Path:
        return self.directory / LATEST_NAME

    def snapshot_path(self, report: AnalysisReport) -> Path:
        """Timestamped file name for a report."""
        stamp = report.timestamp.strftime("%Y%m%dT%H%M%S%f")
        return self.directory / f"change-analysis-{stamp}.json"

    def save(self, report: AnalysisReport) -> Path:
        """
        Write the report snapshot and replace the latest copy.

        Args:
            report: The report to persist.

        Returns:
            Path of the timestamped snapshot.

        Raises:
            OSError: If the directory cannot be created or written.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        content = self._formatter.format(report)

        path = self.snapshot_path(report)
        path.write_text(content, encoding="utf-8")
        self.latest_path.write_text(content, encoding="utf-8")
        logger.info("Analysis saved to %s", path)
        return path
