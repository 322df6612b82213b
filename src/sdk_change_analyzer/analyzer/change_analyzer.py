"""
Change analyzer - assembles the analysis report for a client update.

This module combines diff parsing, endpoint extraction, wrapper import
profiling, correlation and risk scoring into one AnalysisReport.

Every stage is guarded: a failing stage marks its report section as
unavailable and records the error, and the remaining stages still run.
A caller always gets a report back, even if a degraded one.
"""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from sdk_change_analyzer.config import Config
from sdk_change_analyzer.loader import SourceLoader, SourceUnavailableError
from sdk_change_analyzer.models.diff import DiffHighlights, FileChange, ParsedDiff
from sdk_change_analyzer.models.endpoint import EndpointDescriptor
from sdk_change_analyzer.models.imports import WrapperFileProfile
from sdk_change_analyzer.models.report import (
    AffectedWrapper,
    AnalysisReport,
    ReportSections,
    SectionStatus,
)
from sdk_change_analyzer.parser.diff_parser import DiffParser
from sdk_change_analyzer.parser.endpoint_extractor import EndpointExtractor
from sdk_change_analyzer.analyzer.change_correlator import ChangeCorrelator
from sdk_change_analyzer.analyzer.import_graph import ImportGraphAnalyzer, is_generated_path
from sdk_change_analyzer.analyzer.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)

# Progress callback type: (current, total, description) -> None
ProgressCallback = Callable[[int, int, str], None]


@dataclass
class SourceSnapshot:
    """Files of one source tree, or the reason they are unavailable."""

    files: Optional[Mapping[str, str]] = None
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)


class ChangeAnalyzer:
    """
    Analyze a generated-client diff against the wrapper layer.

    This is the main orchestration class that:
    1. Parses the diff
    2. Extracts the API methods of the generated snapshot
    3. Profiles the imports of every wrapper file
    4. Correlates changed generated files with wrapper imports
    5. Scores the overall risk
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize the analyzer.

        Args:
            config: Optional configuration object.
        """
        self.config = config or Config()
        self.import_analyzer = ImportGraphAnalyzer(self.config)
        self.correlator = ChangeCorrelator(self.config)
        self.scorer = RiskScorer(self.config)

    def api_changes(self, generated_changes: list[FileChange]) -> list[FileChange]:
        """Changed generated files under the API subdirectory."""
        api_subdir = self.config.paths.api_subdir
        return [fc for fc in generated_changes if is_generated_path(fc.path, api_subdir)]

    def group_other_changes(
        self,
        changes: list[FileChange],
        generated_changes: list[FileChange],
    ) -> tuple[list[str], list[str]]:
        """
        Split the non-generated changed paths into wrapper and other paths.

        Args:
            changes: All file changes of the diff.
            generated_changes: The subset inside the generated subtree.

        Returns:
            Tuple of (client_paths, other_paths), each in diff order.
        """
        generated = {fc.path for fc in generated_changes}
        client_marker = self.config.paths.client_marker
        client_paths: list[str] = []
        other_paths: list[str] = []
        for fc in changes:
            if fc.path in generated:
                continue
            if is_generated_path(fc.path, client_marker):
                client_paths.append(fc.path)
            else:
                other_paths.append(fc.path)
        return client_paths, other_paths

    def _api_files(self, files: Mapping[str, str]) -> dict[str, str]:
        api_subdir = self.config.paths.api_subdir
        api_files = {p: t for p, t in files.items() if is_generated_path(p, api_subdir)}
        if not api_files:
            logger.debug("No '%s' segment in generated paths, scanning all files", api_subdir)
            return dict(files)
        return api_files

    def analyze(
        self,
        diff_text: str,
        generated_files: Optional[Mapping[str, str]],
        wrapper_files: Optional[Mapping[str, str]],
        diff_source: str = "stdin",
        progress_callback: Optional[ProgressCallback] = None,
    ) -> AnalysisReport:
        """
        Analyze a diff against in-memory source snapshots.

        Args:
            diff_text: Unified diff text (may be empty or malformed).
            generated_files: Generated file path -> text, or None if the
                generated tree is unavailable.
            wrapper_files: Wrapper file path -> text, or None if the
                wrapper tree is unavailable.
            diff_source: Label for where the diff came from.
            progress_callback: Optional callback for progress updates.

        Returns:
            AnalysisReport; never raises.
        """
        generated = SourceSnapshot(
            files=generated_files,
            error=None if generated_files is not None else "Generated directory not found",
        )
        wrappers = SourceSnapshot(
            files=wrapper_files,
            error=None if wrapper_files is not None else "Client directory not found",
        )
        return self._analyze(diff_text, diff_source, generated, wrappers, progress_callback)

    def analyze_paths(
        self,
        diff_path: Path,
        generated_dir: Path,
        wrapper_dir: Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> AnalysisReport:
        """
        Analyze a diff file against source trees on disk.

        Args:
            diff_path: Path to the diff file.
            generated_dir: Root of the generated client.
            wrapper_dir: Root of the wrapper layer.
            progress_callback: Optional callback for progress updates.

        Returns:
            AnalysisReport; never raises.
        """
        diff_error: Optional[str] = None
        try:
            diff_text = diff_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            diff_error = f"Failed to read diff {diff_path}: {e}"
            logger.error(diff_error)
            diff_text = ""

        loader = SourceLoader(self.config.loader)
        generated = self._load(loader, generated_dir)
        wrappers = self._load(loader, wrapper_dir)

        return self._analyze(
            diff_text,
            str(diff_path),
            generated,
            wrappers,
            progress_callback,
            diff_error=diff_error,
        )

    @staticmethod
    def _load(loader: SourceLoader, root: Path) -> SourceSnapshot:
        try:
            result = loader.load_directory(root)
        except SourceUnavailableError as e:
            logger.warning(str(e))
            return SourceSnapshot(error=str(e))
        return SourceSnapshot(files=result.files, warnings=result.warnings)

    def _analyze(
        self,
        diff_text: str,
        diff_source: str,
        generated: SourceSnapshot,
        wrappers: SourceSnapshot,
        progress_callback: Optional[ProgressCallback] = None,
        diff_error: Optional[str] = None,
    ) -> AnalysisReport:
        start_time = time.time()
        errors: list[str] = []
        warnings: list[str] = list(generated.warnings) + list(wrappers.warnings)

        def report_progress(current: int, total: int, desc: str) -> None:
            if progress_callback:
                progress_callback(current, total, desc)

        # Parse the diff
        report_progress(0, 100, "Parsing diff...")
        parsed = ParsedDiff()
        highlights = DiffHighlights()
        diff_status = SectionStatus()
        if diff_error is not None:
            errors.append(diff_error)
            diff_status = SectionStatus(available=False, error=diff_error)
        else:
            try:
                parsed = DiffParser.parse_string(diff_text)
                warnings.extend(parsed.diagnostics)
                highlights = DiffParser.extract_highlights(parsed)
            except Exception as e:
                message = f"Failed to parse diff: {e}"
                logger.exception(message)
                errors.append(message)
                diff_status = SectionStatus(available=False, error=message)

        generated_changes = self.correlator.generated_changes(parsed.files)
        api_changes = self.api_changes(generated_changes)
        client_paths, other_paths = self.group_other_changes(parsed.files, generated_changes)

        # Enumerate endpoints of the generated snapshot
        report_progress(25, 100, "Extracting endpoints...")
        endpoints: list[EndpointDescriptor] = []
        endpoints_status = SectionStatus()
        if generated.files is None:
            errors.append(f"Endpoints unavailable: {generated.error}")
            endpoints_status = SectionStatus(available=False, error=generated.error)
        else:
            try:
                endpoints = EndpointExtractor.extract_many(
                    self._api_files(generated.files), warnings=warnings,
                )
            except Exception as e:
                message = f"Failed to extract endpoints: {e}"
                logger.exception(message)
                errors.append(message)
                endpoints_status = SectionStatus(available=False, error=message)

        # Profile wrapper imports
        report_progress(50, 100, "Profiling wrapper imports...")
        profiles: list[WrapperFileProfile] = []
        imports_status = SectionStatus()
        if wrappers.files is None:
            errors.append(f"Import graph unavailable: {wrappers.error}")
            imports_status = SectionStatus(available=False, error=wrappers.error)
        else:
            try:
                profiles = self.import_analyzer.profile_many(wrappers.files)
            except Exception as e:
                message = f"Failed to profile wrapper files: {e}"
                logger.exception(message)
                errors.append(message)
                imports_status = SectionStatus(available=False, error=message)

        # Correlate
        report_progress(75, 100, f"Correlating {len(generated_changes)} generated changes...")
        affected: list[AffectedWrapper] = []
        correlation_status = SectionStatus()
        if imports_status.available:
            try:
                affected = self.correlator.correlate(parsed.files, profiles)
            except Exception as e:
                message = f"Failed to correlate changes: {e}"
                logger.exception(message)
                errors.append(message)
                correlation_status = SectionStatus(available=False, error=message)

        # Score
        report_progress(90, 100, "Scoring risk...")
        risk = self.scorer.assess(
            total_files=len(parsed.files),
            affected_wrappers=len(affected),
            generated_api_changes=len(api_changes),
        )

        duration_ms = (time.time() - start_time) * 1000
        report_progress(100, 100, "Complete!")
        logger.info(
            "Analysis complete: %d files, %d affected wrappers, risk %s",
            len(parsed.files), len(affected), risk.level.value,
        )

        return AnalysisReport(
            diff_source=diff_source,
            generated_marker=self.config.paths.generated_marker,
            file_changes=parsed.files,
            diff_summary=parsed.summary,
            highlights=highlights,
            generated_files_changed=[fc.path for fc in generated_changes],
            client_files_changed=client_paths,
            other_files_changed=other_paths,
            new_endpoints=endpoints,
            wrapper_files_analyzed=len(profiles),
            affected_wrappers=affected,
            wrapper_impact_level=self.correlator.impact_level(affected),
            risk=risk,
            sections=ReportSections(
                diff=diff_status,
                endpoints=endpoints_status,
                imports=imports_status,
                correlation=correlation_status,
            ),
            analysis_duration_ms=duration_ms,
            errors=errors,
            warnings=warnings,
        )

