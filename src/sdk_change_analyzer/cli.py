"""
Command-line interface for SDK Change Analyzer.

This module provides the CLI using Click framework for argument parsing
and orchestrates the analysis pipeline.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from sdk_change_analyzer import __version__
from sdk_change_analyzer.config import Config, find_config_file, load_config
from sdk_change_analyzer.output.formatters import (
    BaseFormatter,
    formatter_name_for_path,
    get_formatter,
)

console = Console(stderr=True)

FORMAT_CHOICES = ["text", "json"]


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _make_formatter(output_format: Optional[str], output: Optional[Path], config: Config) -> BaseFormatter:
    """Pick the formatter from --format, then the output file suffix, then text."""
    name = output_format
    if name is None and output is not None:
        name = formatter_name_for_path(output)
    name = name or "text"
    if name == "text":
        return get_formatter("text", colorize=config.output.colorize and output is None)
    return get_formatter(name)


def _write_output(formatted_output: str, output: Optional[Path]) -> None:
    if output:
        output.write_text(formatted_output, encoding="utf-8")
        console.print(f"[green]Results written to:[/green] {output}")
    else:
        sys.stdout.write(formatted_output)
        sys.stdout.flush()


@click.group()
@click.version_option(version=__version__, prog_name="sdk-change-analyzer")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file.",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path]) -> None:
    """SDK Change Analyzer - Assess how a regenerated API client affects its wrappers."""
    ctx.ensure_object(dict)
    config_path = config or find_config_file(Path.cwd())
    try:
        ctx.obj["config"] = load_config(config_path) if config_path else Config()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()


@cli.command()
@click.option(
    "--diff",
    "-d",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to the unified diff of the generated client.",
)
@click.option(
    "--generated",
    "-g",
    type=click.Path(path_type=Path),
    default=Path("src/generated"),
    show_default=True,
    help="Directory of the generated client.",
)
@click.option(
    "--wrapper",
    "-w",
    type=click.Path(path_type=Path),
    default=Path("src/client"),
    show_default=True,
    help="Directory of the hand-written wrapper files.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMAT_CHOICES),
    default=None,
    help="Output format. Defaults to the --output file suffix, else text.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path. If not specified, prints to stdout.",
)
@click.option(
    "--save-snapshot",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for a timestamped JSON snapshot and latest-analysis.json.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    diff: Path,
    generated: Path,
    wrapper: Path,
    output_format: Optional[str],
    output: Optional[Path],
    save_snapshot: Optional[Path],
    verbose: bool,
) -> None:
    """Analyze a generated-client diff and report affected wrapper files."""
    from sdk_change_analyzer.analyzer.change_analyzer import ChangeAnalyzer
    from sdk_change_analyzer.output.snapshot import SnapshotStore

    config: Config = ctx.obj["config"]
    verbose = verbose or config.output.verbose
    _configure_logging(verbose)

    if verbose:
        console.print(f"[blue]Using diff file:[/blue] {diff}")
        console.print(f"[blue]Generated directory:[/blue] {generated}")
        console.print(f"[blue]Wrapper directory:[/blue] {wrapper}")

    try:
        analyzer = ChangeAnalyzer(config)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,  # Remove progress bar when done
        ) as progress:
            task = progress.add_task("Initializing...", total=100)

            def update_progress(current: int, total: int, description: str) -> None:
                progress.update(task, completed=current, total=total, description=description)

            report = analyzer.analyze_paths(
                diff, generated, wrapper, progress_callback=update_progress,
            )

        formatter = _make_formatter(output_format, output, config)
        _write_output(formatter.format(report), output)

        if save_snapshot:
            path = SnapshotStore(save_snapshot).save(report)
            console.print(f"[green]Snapshot saved to:[/green] {path}")

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise click.Abort()


@cli.command("endpoints")
@click.option(
    "--generated",
    "-g",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory of the generated client.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMAT_CHOICES),
    default=None,
    help="Output format. Defaults to the --output file suffix, else text.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path. If not specified, prints to stdout.",
)
@click.pass_context
def list_endpoints(
    ctx: click.Context,
    generated: Path,
    output_format: Optional[str],
    output: Optional[Path],
) -> None:
    """List the async API methods declared in the generated client."""
    from sdk_change_analyzer.loader import SourceLoader
    from sdk_change_analyzer.parser.endpoint_extractor import EndpointExtractor

    config: Config = ctx.obj["config"]
    _configure_logging(config.output.verbose)

    try:
        result = SourceLoader(config.loader).load_directory(generated)
        endpoints = EndpointExtractor.extract_many(result.files)
        formatter = _make_formatter(output_format, output, config)
        _write_output(formatter.format_endpoints(endpoints), output)

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})
