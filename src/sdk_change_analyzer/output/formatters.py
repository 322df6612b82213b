"""
Formatter base class and name registry.

A formatter renders an AnalysisReport, or a bare endpoint listing, to a
string. Formatters register under a short name and a file suffix so the
CLI can pick one from `--format` or from the `--output` file name.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from sdk_change_analyzer.models.endpoint import EndpointDescriptor
    from sdk_change_analyzer.models.report import AnalysisReport


class BaseFormatter(ABC):
    """
    Renders reports and endpoint listings.

    `file_suffix` is the extension an output file written in this format
    normally carries.
    """

    file_suffix: str = ""

    @abstractmethod
    def format(self, report: "AnalysisReport") -> str:
        """Render a full analysis report."""

    @abstractmethod
    def format_endpoints(self, endpoints: list["EndpointDescriptor"]) -> str:
        """Render the async API methods found in a generated client."""


_FORMATTERS: dict[str, type[BaseFormatter]] = {}


def register_formatter(name: str) -> Callable[[type[BaseFormatter]], type[BaseFormatter]]:
    """
    Class decorator adding a formatter to the registry under `name`.

    A later registration under the same name replaces the earlier one.
    """
    def decorator(cls: type[BaseFormatter]) -> type[BaseFormatter]:
        _FORMATTERS[name] = cls
        return cls
    return decorator


def _ensure_builtin_formatters() -> None:
    # The built-in formatters register themselves on import
    from sdk_change_analyzer.output import json_output, text_output  # noqa: F401


def available_formatters() -> list[str]:
    """Registered formatter names, sorted."""
    _ensure_builtin_formatters()
    return sorted(_FORMATTERS)


def formatter_name_for_path(path: Path) -> Optional[str]:
    """
    Name of the formatter whose file suffix matches `path`.

    Args:
        path: An output file path such as `report.json`.

    Returns:
        The formatter name, or None when no formatter claims the suffix.
    """
    _ensure_builtin_formatters()
    suffix = path.suffix.lower()
    if not suffix:
        return None
    for name in sorted(_FORMATTERS):
        if _FORMATTERS[name].file_suffix == suffix:
            return name
    return None


def get_formatter(name: str, **kwargs: object) -> BaseFormatter:
    """
    Instantiate a registered formatter.

    Args:
        name: Registered name, e.g. "text" or "json".
        **kwargs: Forwarded to the formatter's constructor.

    Raises:
        ValueError: If nothing is registered under `name`.
    """
    available = available_formatters()
    if name not in _FORMATTERS:
        raise ValueError(f"Unknown formatter: {name}. Available: {', '.join(available)}")
    return _FORMATTERS[name](**kwargs)
