"""
Parser package for SDK Change Analyzer.

This package contains modules for:
- Diff parsing (using unidiff, with a tolerant fallback)
- Async signature scanning of TypeScript source
- Endpoint extraction from generated API files
"""

from sdk_change_analyzer.parser.diff_parser import DiffParser, DiffParserError
from sdk_change_analyzer.parser.endpoint_extractor import EndpointExtractor
from sdk_change_analyzer.parser.signatures import AsyncSignature, scan_async_signatures

__all__ = [
    "AsyncSignature",
    "DiffParser",
    "DiffParserError",
    "EndpointExtractor",
    "scan_async_signatures",
]
