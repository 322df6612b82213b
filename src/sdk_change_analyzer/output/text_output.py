"""
Human-readable text output formatter.
"""

from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sdk_change_analyzer.models.diff import ChangeKind, LineKind
from sdk_change_analyzer.models.endpoint import EndpointDescriptor
from sdk_change_analyzer.models.report import AnalysisReport, RiskLevel
from sdk_change_analyzer.output.formatters import BaseFormatter, register_formatter

# The JSON output keeps every highlight; the terminal view shows the first few
MAX_HIGHLIGHTS = 10


@register_formatter("text")
class TextFormatter(BaseFormatter):
    """
    Format output as human-readable text using Rich.
    """

    file_suffix = ".txt"

    def __init__(self, colorize: bool = True) -> None:
        """
        Initialize the text formatter.

        Args:
            colorize: Whether to use colors in output.
        """
        self.colorize = colorize

    def _level_style(self, level: RiskLevel) -> str:
        """Get the style for a risk level."""
        if not self.colorize:
            return ""

        styles = {
            RiskLevel.BREAKING: "bold magenta",
            RiskLevel.HIGH: "bold red",
            RiskLevel.MEDIUM: "yellow",
            RiskLevel.LOW: "green",
        }
        return styles.get(level, "")

    def _level_icon(self, level: RiskLevel) -> str:
        """Get an icon for a risk level."""
        icons = {
            RiskLevel.BREAKING: "💥",
            RiskLevel.HIGH: "🔴",
            RiskLevel.MEDIUM: "🟡",
            RiskLevel.LOW: "🟢",
        }
        return icons.get(level, "⚪")

    def _print_highlights(self, console: Console, report: AnalysisReport) -> None:
        highlights = report.highlights
        if not (highlights.api_changes or highlights.type_changes):
            return

        for title, entries in (
            ("API Changes", highlights.api_changes),
            ("Type Changes", highlights.type_changes),
        ):
            if not entries:
                continue
            console.print(f"[bold]{title}[/bold] ({len(entries)})")
            for entry in entries[:MAX_HIGHLIGHTS]:
                marker = "+" if entry.kind == LineKind.ADDITION else "-"
                console.print(f"  {marker} {escape(entry.content)}  [dim]{escape(entry.file_path)}[/dim]")
            if len(entries) > MAX_HIGHLIGHTS:
                console.print(f"  [dim]... {len(entries) - MAX_HIGHLIGHTS} more[/dim]")
            console.print()

    def format(self, report: AnalysisReport) -> str:
        """Format an analysis report as text."""
        output = StringIO()
        console = Console(file=output, force_terminal=self.colorize, width=120)

        # Header
        console.print()
        console.print(
            Panel.fit(
                "[bold]SDK Change Analyzer[/bold]\n"
                "Analysis Report",
                border_style="blue",
            )
        )
        console.print()

        risk = report.risk
        style = self._level_style(risk.level) or "none"
        console.print("[bold]Summary[/bold]")
        console.print(f"  Timestamp: {report.timestamp.isoformat()}")
        console.print(f"  Diff Source: {escape(report.diff_source)}")
        console.print(
            f"  Files Changed: {report.total_files_changed} "
            f"({len(report.generated_files_changed)} generated, "
            f"{len(report.client_files_changed)} client, "
            f"{len(report.other_files_changed)} other)"
        )
        for kind in ChangeKind:
            count = len(report.get_files_by_kind(kind))
            if count:
                console.print(f"    {kind.value}: {count}")
        console.print(f"  Lines: +{report.lines_added} -{report.lines_removed}")
        console.print(f"  API Methods Found: {len(report.new_endpoints)}")
        console.print(f"  Wrapper Files Analyzed: {report.wrapper_files_analyzed}")
        console.print(
            f"  Affected Wrappers: {report.affected_count} "
            f"(impact {report.wrapper_impact_level.value})"
        )
        console.print(
            f"  Risk: {self._level_icon(risk.level)} "
            f"[{style}]{risk.level.value}[/{style}] (score {risk.score})"
        )
        factors = risk.factors
        console.print(
            f"    files={factors.total_files} (+{factors.file_score}), "
            f"wrappers={factors.affected_wrappers} (+{factors.wrapper_score}), "
            f"api files={factors.generated_api_changes} (+{factors.generated_api_score})"
        )
        if report.analysis_duration_ms:
            console.print(f"  Analysis Time: {report.analysis_duration_ms:.2f}ms")
        console.print()

        self._print_highlights(console, report)

        if report.affected_wrappers:
            console.print("[bold]Affected Wrapper Files[/bold]")
            console.print()

            for level in [RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW]:
                wrappers = report.get_wrappers_by_level(level)
                if not wrappers:
                    continue

                icon = self._level_icon(level)
                level_style = self._level_style(level) or "none"
                console.print(f"  {icon} [bold]{level.value}[/bold] ({len(wrappers)})")

                for aw in wrappers:
                    console.print(
                        f"    [{level_style}]{escape(aw.path)}[/{level_style}] "
                        f"({aw.affected_import_count} imports affected)"
                    )
                    for record in aw.affected_imports:
                        symbols = ", ".join(record.symbols)
                        console.print(f"      {{ {escape(symbols)} }} from '{escape(record.source)}'")
                console.print()
        else:
            console.print("[green]No wrapper files affected by the changes.[/green]")
            console.print()

        # Unavailable sections
        sections = report.sections
        for name, status in (
            ("Diff", sections.diff),
            ("Endpoints", sections.endpoints),
            ("Imports", sections.imports),
            ("Correlation", sections.correlation),
        ):
            if not status.available:
                console.print(f"[bold red]{name} unavailable:[/bold red] {escape(status.error or '')}")

        # Errors and warnings
        if report.errors:
            console.print("[bold red]Errors[/bold red]")
            for error in report.errors:
                console.print(f"  ❌ {escape(error)}")
            console.print()

        if report.warnings:
            console.print("[bold yellow]Warnings[/bold yellow]")
            for warning in report.warnings:
                console.print(f"  ⚠️  {escape(warning)}")
            console.print()

        return output.getvalue()

    def format_endpoints(self, endpoints: list[EndpointDescriptor]) -> str:
        """Format a list of endpoints as a table."""
        output = StringIO()
        console = Console(file=output, force_terminal=self.colorize, width=120)

        if not endpoints:
            console.print("[dim]No endpoints found.[/dim]")
            return output.getvalue()

        table = Table(title="Generated API Methods", show_header=True, header_style="bold")
        table.add_column("Method", style="cyan")
        table.add_column("Returns", style="green")
        table.add_column("File", style="dim")
        table.add_column("Line", justify="right")

        for ep in endpoints:
            table.add_row(
                ep.name,
                escape(ep.return_type or ""),
                escape(ep.file_path),
                str(ep.line_number or ""),
            )

        console.print(table)
        console.print(f"\nTotal: {len(endpoints)} endpoints")

        return output.getvalue()
