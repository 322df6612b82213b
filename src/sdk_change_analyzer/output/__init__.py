"""
Output package for SDK Change Analyzer.

This package contains formatters for displaying analysis results
(text, JSON) and the JSON snapshot store.
"""

from sdk_change_analyzer.output.formatters import (
    BaseFormatter,
    available_formatters,
    formatter_name_for_path,
    get_formatter,
)
from sdk_change_analyzer.output.json_output import JsonFormatter
from sdk_change_analyzer.output.snapshot import SnapshotStore
from sdk_change_analyzer.output.text_output import TextFormatter

__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "SnapshotStore",
    "TextFormatter",
    "available_formatters",
    "formatter_name_for_path",
    "get_formatter",
]
