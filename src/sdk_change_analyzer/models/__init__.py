"""
Data models for SDK Change Analyzer.

This package contains Pydantic models for representing parsed diffs,
endpoint descriptors, wrapper import profiles, and analysis reports.
"""

from sdk_change_analyzer.models.diff import (
    ChangeKind,
    DiffHighlights,
    DiffSummary,
    FileChange,
    HighlightLine,
    Hunk,
    LineChange,
    LineKind,
    ParsedDiff,
)
from sdk_change_analyzer.models.endpoint import (
    EndpointDescriptor,
    EndpointKind,
)
from sdk_change_analyzer.models.imports import (
    ImportRecord,
    MethodSignature,
    WrapperFileProfile,
)
from sdk_change_analyzer.models.report import (
    AffectedWrapper,
    AnalysisReport,
    ReportSections,
    RiskAssessment,
    RiskFactors,
    RiskLevel,
    SectionStatus,
)

__all__ = [
    # Diff models
    "ChangeKind",
    "DiffHighlights",
    "DiffSummary",
    "FileChange",
    "HighlightLine",
    "Hunk",
    "LineChange",
    "LineKind",
    "ParsedDiff",
    # Endpoint models
    "EndpointDescriptor",
    "EndpointKind",
    # Import models
    "ImportRecord",
    "MethodSignature",
    "WrapperFileProfile",
    # Report models
    "AffectedWrapper",
    "AnalysisReport",
    "ReportSections",
    "RiskAssessment",
    "RiskFactors",
    "RiskLevel",
    "SectionStatus",
]
