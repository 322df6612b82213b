"""
Report data models.

Models representing risk classification and the assembled analysis report.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from sdk_change_analyzer.models.diff import ChangeKind, DiffHighlights, DiffSummary, FileChange
from sdk_change_analyzer.models.endpoint import EndpointDescriptor
from sdk_change_analyzer.models.imports import ImportRecord


class RiskLevel(str, Enum):
    """How disruptive a change is for the wrapper layer."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    BREAKING = "BREAKING"  # Reserved for escalation outside this package


class AffectedWrapper(BaseModel):
    """A wrapper file with at least one import invalidated by the diff."""

    path: str = Field(description="Wrapper file path")
    risk_level: RiskLevel = Field(description="Tier from the affected-import count")
    affected_imports: list[ImportRecord] = Field(
        default_factory=list,
        description="Imports whose generated source changed",
    )

    class Config:
        frozen = True

    @property
    def affected_import_count(self) -> int:
        """Number of named symbols across the affected imports."""
        return sum(len(imp.symbols) for imp in self.affected_imports)

    @property
    def affected_symbols(self) -> list[str]:
        symbols: list[str] = []
        for imp in self.affected_imports:
            symbols.extend(imp.symbols)
        return symbols


class RiskFactors(BaseModel):
    """Raw counts fed into the scorer and the points each one earned."""

    total_files: int = Field(default=0, description="Changed files in the diff")
    affected_wrappers: int = Field(default=0, description="Affected wrapper files")
    generated_api_changes: int = Field(
        default=0,
        description="Changed files under the generated API subdirectory",
    )
    file_score: int = Field(default=0)
    wrapper_score: int = Field(default=0)
    generated_api_score: int = Field(default=0)

    class Config:
        frozen = True


class RiskAssessment(BaseModel):
    """Overall risk classification with its audit trail."""

    level: RiskLevel = Field(default=RiskLevel.LOW)
    score: int = Field(default=0)
    factors: RiskFactors = Field(default_factory=RiskFactors)

    class Config:
        frozen = True


class SectionStatus(BaseModel):
    """Availability of one analysis dimension."""

    available: bool = Field(default=True)
    error: Optional[str] = Field(default=None)

    class Config:
        frozen = True


class ReportSections(BaseModel):
    """Availability of each analysis dimension in a report."""

    diff: SectionStatus = Field(default_factory=SectionStatus)
    endpoints: SectionStatus = Field(default_factory=SectionStatus)
    imports: SectionStatus = Field(default_factory=SectionStatus)
    correlation: SectionStatus = Field(default_factory=SectionStatus)

    class Config:
        frozen = True


class AnalysisReport(BaseModel):
    """Complete analysis report."""

    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the analysis was performed",
    )
    diff_source: str = Field(default="stdin", description="Source of the diff")
    generated_marker: str = Field(
        default="generated",
        description="Path segment used to recognise generated code",
    )
    file_changes: list[FileChange] = Field(
        default_factory=list,
        description="Files in the diff",
    )
    diff_summary: DiffSummary = Field(default_factory=DiffSummary)
    highlights: DiffHighlights = Field(default_factory=DiffHighlights)
    generated_files_changed: list[str] = Field(
        default_factory=list,
        description="Changed paths inside the generated subtree",
    )
    client_files_changed: list[str] = Field(
        default_factory=list,
        description="Changed paths inside the wrapper subtree",
    )
    other_files_changed: list[str] = Field(
        default_factory=list,
        description="Changed paths in neither subtree",
    )
    new_endpoints: list[EndpointDescriptor] = Field(
        default_factory=list,
        description="Async API methods found in the generated snapshot",
    )
    wrapper_files_analyzed: int = Field(default=0)
    affected_wrappers: list[AffectedWrapper] = Field(
        default_factory=list,
        description="Wrapper files whose generated imports changed",
    )
    wrapper_impact_level: RiskLevel = Field(
        default=RiskLevel.LOW,
        description="HIGH if any wrapper is HIGH, MEDIUM if any is affected",
    )
    risk: RiskAssessment = Field(default_factory=RiskAssessment)
    sections: ReportSections = Field(default_factory=ReportSections)
    analysis_duration_ms: Optional[float] = Field(
        default=None,
        description="How long the analysis took in milliseconds",
    )
    errors: list[str] = Field(
        default_factory=list,
        description="Any errors encountered during analysis",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Any warnings from the analysis",
    )

    class Config:
        frozen = True

    @property
    def total_files_changed(self) -> int:
        return len(self.file_changes)

    @property
    def lines_added(self) -> int:
        return sum(fc.added_count for fc in self.file_changes)

    @property
    def lines_removed(self) -> int:
        return sum(fc.removed_count for fc in self.file_changes)

    @property
    def affected_count(self) -> int:
        """Number of affected wrapper files."""
        return len(self.affected_wrappers)

    @property
    def has_errors(self) -> bool:
        """Check if there were any errors."""
        return len(self.errors) > 0

    def get_files_by_kind(self, kind: ChangeKind) -> list[FileChange]:
        return [fc for fc in self.file_changes if fc.kind == kind]

    def get_wrappers_by_level(self, level: RiskLevel) -> list[AffectedWrapper]:
        """Get affected wrappers filtered by risk tier."""
        return [aw for aw in self.affected_wrappers if aw.risk_level == level]

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation made only of primitives, lists and dicts."""
        return self.model_dump(mode="json")
