"""
Unit tests for output formatters and snapshots.
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from sdk_change_analyzer.models.diff import (
    ChangeKind,
    DiffHighlights,
    FileChange,
    HighlightLine,
    Hunk,
    LineChange,
    LineKind,
)
from sdk_change_analyzer.models.endpoint import EndpointDescriptor
from sdk_change_analyzer.models.imports import ImportRecord
from sdk_change_analyzer.models.report import (
    AffectedWrapper,
    AnalysisReport,
    ReportSections,
    RiskAssessment,
    RiskLevel,
    SectionStatus,
)
from sdk_change_analyzer.output.formatters import (
    available_formatters,
    formatter_name_for_path,
    get_formatter,
)
from sdk_change_analyzer.output.json_output import JsonFormatter
from sdk_change_analyzer.output.snapshot import LATEST_NAME, SnapshotStore
from sdk_change_analyzer.output.text_output import TextFormatter


@pytest.fixture
def sample_report() -> AnalysisReport:
    """A report with one affected wrapper."""
    return AnalysisReport(
        timestamp=datetime(2024, 5, 1, 12, 30, 0),
        diff_source="update.diff",
        file_changes=[
            FileChange(path="src/generated/models/UserModel.ts", kind=ChangeKind.MODIFIED),
            FileChange(
                path="src/client/users.ts",
                kind=ChangeKind.MODIFIED,
                hunks=[Hunk(
                    source_start=1,
                    source_length=0,
                    target_start=1,
                    target_length=1,
                    lines=[LineChange(kind=LineKind.ADDITION, content="// note", target_line_no=1)],
                )],
            ),
        ],
        generated_files_changed=["src/generated/models/UserModel.ts"],
        client_files_changed=["src/client/users.ts"],
        highlights=DiffHighlights(
            modified_files=["src/generated/models/UserModel.ts", "src/client/users.ts"],
            api_changes=[
                HighlightLine(
                    file_path="src/generated/apis/UsersApi.ts",
                    kind=LineKind.ADDITION,
                    content="path: `/api/users/{id}`,",
                ),
            ],
        ),
        wrapper_impact_level=RiskLevel.MEDIUM,
        new_endpoints=[
            EndpointDescriptor(name="usersGet", file_path="apis/UsersApi.ts", return_type="UserModel"),
        ],
        wrapper_files_analyzed=2,
        affected_wrappers=[
            AffectedWrapper(
                path="src/client/users.ts",
                risk_level=RiskLevel.MEDIUM,
                affected_imports=[
                    ImportRecord(
                        wrapper_path="src/client/users.ts",
                        source="../generated/models/UserModel",
                        symbols=["UserModel", "UserModelFromJSON"],
                        is_generated_source=True,
                    ),
                ],
            ),
        ],
        risk=RiskAssessment(level=RiskLevel.LOW, score=1),
    )


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format_report(self, sample_report: AnalysisReport) -> None:
        """Test that the output is valid JSON with a summary block."""
        data = json.loads(JsonFormatter().format(sample_report))

        assert data["diff_source"] == "update.diff"
        assert data["summary"]["files_changed"] == 2
        assert data["summary"]["affected_wrappers"] == 1
        assert data["summary"]["risk_level"] == "LOW"
        assert data["affected_wrappers"][0]["risk_level"] == "MEDIUM"
        assert data["affected_wrappers"][0]["affected_import_count"] == 2

    def test_summary_block(self, sample_report: AnalysisReport) -> None:
        """Test the grouping counts, line totals and impact tier in the summary."""
        summary = json.loads(JsonFormatter().format(sample_report))["summary"]

        assert summary["generated_files_changed"] == 1
        assert summary["client_files_changed"] == 1
        assert summary["other_files_changed"] == 0
        assert summary["lines_added"] == 1
        assert summary["lines_removed"] == 0
        assert summary["wrapper_impact_level"] == "MEDIUM"

    def test_format_empty_report(self) -> None:
        """Test formatting a report with nothing in it."""
        data = json.loads(JsonFormatter().format(AnalysisReport()))

        assert data["affected_wrappers"] == []
        assert data["summary"]["risk_score"] == 0

    def test_format_endpoints(self) -> None:
        """Test formatting an endpoint list."""
        endpoints = [
            EndpointDescriptor(name="usersGet", file_path="apis/UsersApi.ts", return_type="UserModel"),
            EndpointDescriptor(name="usersList", file_path="apis/UsersApi.ts", return_type="Array<UserModel>"),
        ]

        data = json.loads(JsonFormatter(indent=None).format_endpoints(endpoints))

        assert data["total"] == 2
        assert [ep["name"] for ep in data["endpoints"]] == ["usersGet", "usersList"]
        assert data["endpoints"][1]["return_type"] == "Array<UserModel>"


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_format_report(self, sample_report: AnalysisReport) -> None:
        """Test the main sections of the text report."""
        output = TextFormatter(colorize=False).format(sample_report)

        assert "SDK Change Analyzer" in output
        assert "Files Changed: 2 (1 generated, 1 client, 0 other)" in output
        assert "Affected Wrappers: 1" in output
        assert "src/client/users.ts" in output
        assert "2 imports affected" in output
        assert "UserModel, UserModelFromJSON" in output

    def test_format_highlights(self, sample_report: AnalysisReport) -> None:
        """Test the highlighted lines, line totals and impact tier."""
        output = TextFormatter(colorize=False).format(sample_report)

        assert "Lines: +1 -0" in output
        assert "(impact MEDIUM)" in output
        assert "API Changes (1)" in output
        assert "+ path: `/api/users/{id}`," in output
        assert "Type Changes" not in output

    def test_highlights_are_capped(self) -> None:
        """Test that long highlight lists are shortened in the terminal view."""
        lines = [
            HighlightLine(file_path="src/generated/a.ts", kind=LineKind.DELETION, content=f"export type T{i} = string;")
            for i in range(12)
        ]
        report = AnalysisReport(highlights=DiffHighlights(type_changes=lines))

        output = TextFormatter(colorize=False).format(report)

        assert "Type Changes (12)" in output
        assert "- export type T9 = string;" in output
        assert "export type T10" not in output
        assert "... 2 more" in output

    def test_format_correlation_unavailable(self) -> None:
        """Test that a failed correlation step is shown."""
        report = AnalysisReport(
            sections=ReportSections(
                correlation=SectionStatus(available=False, error="Failed to correlate changes: boom"),
            ),
        )

        output = TextFormatter(colorize=False).format(report)

        assert "Correlation unavailable: Failed to correlate changes: boom" in output

    def test_format_no_affected(self) -> None:
        """Test the message for a report with no affected wrappers."""
        output = TextFormatter(colorize=False).format(AnalysisReport())

        assert "No wrapper files affected" in output

    def test_format_unavailable_and_errors(self) -> None:
        """Test that unavailable sections and errors are listed."""
        report = AnalysisReport(
            sections=ReportSections(
                imports=SectionStatus(available=False, error="Client directory not found"),
            ),
            errors=["Import graph unavailable: Client directory not found"],
            warnings=["Skipping large file: [big].ts"],
        )

        output = TextFormatter(colorize=False).format(report)

        assert "Imports unavailable" in output
        assert "Import graph unavailable: Client directory not found" in output
        assert "Skipping large file: [big].ts" in output

    def test_format_endpoints(self) -> None:
        """Test the endpoint table."""
        endpoints = [
            EndpointDescriptor(
                name="usersGet",
                file_path="apis/UsersApi.ts",
                return_type="UserModel",
                line_number=12,
            ),
        ]

        output = TextFormatter(colorize=False).format_endpoints(endpoints)

        assert "usersGet" in output
        assert "Total: 1 endpoints" in output

    def test_format_no_endpoints(self) -> None:
        """Test the endpoint listing when nothing was found."""
        assert "No endpoints found" in TextFormatter(colorize=False).format_endpoints([])


class TestFormatterRegistry:
    """Tests for the formatter registry."""

    def test_available(self) -> None:
        """Test the registered formatter names."""
        assert available_formatters() == ["json", "text"]

    @pytest.mark.parametrize(
        "path,expected",
        [
            (Path("report.json"), "json"),
            (Path("out/REPORT.JSON"), "json"),
            (Path("report.txt"), "text"),
            (Path("report.html"), None),
            (Path("report"), None),
        ],
    )
    def test_formatter_name_for_path(self, path: Path, expected: str) -> None:
        """Test choosing a formatter from an output file suffix."""
        assert formatter_name_for_path(path) == expected

    def test_get_formatter(self) -> None:
        """Test looking formatters up by name."""
        assert isinstance(get_formatter("json"), JsonFormatter)
        assert isinstance(get_formatter("text", colorize=False), TextFormatter)

    def test_unknown_formatter(self) -> None:
        """Test that an unknown name raises ValueError."""
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_save(self, tmp_path: Path, sample_report: AnalysisReport) -> None:
        """Test that both the timestamped and the latest file are written."""
        store = SnapshotStore(tmp_path / "analysis")

        path = store.save(sample_report)

        assert path.name == "change-analysis-20240501T123000000000.json"
        assert path.exists()
        assert store.latest_path == tmp_path / "analysis" / LATEST_NAME
        assert store.latest_path.read_text(encoding="utf-8") == path.read_text(encoding="utf-8")
        assert json.loads(path.read_text(encoding="utf-8"))["diff_source"] == "update.diff"

    def test_latest_is_replaced(self, tmp_path: Path, sample_report: AnalysisReport) -> None:
        """Test that a second save overwrites the latest copy."""
        store = SnapshotStore(tmp_path)
        store.save(sample_report)
        later = sample_report.model_copy(update={"timestamp": datetime(2024, 5, 2, 8, 0, 0)})

        second = store.save(later)

        assert len(list(tmp_path.glob("change-analysis-*.json"))) == 2
        latest = json.loads(store.latest_path.read_text(encoding="utf-8"))
        assert latest["timestamp"] == "2024-05-02T08:00:00"
        assert second.name.startswith("change-analysis-20240502")
