"""
Import graph analysis for wrapper source files.

Records which generated-code paths and symbols each wrapper file imports,
together with the async methods the wrapper exposes. Only named imports
are tracked: a default or namespace import cannot be invalidated symbol
by symbol.
"""

import logging
import re
from collections.abc import Mapping
from typing import Optional

from sdk_change_analyzer.config import Config
from sdk_change_analyzer.loader import is_size_marker
from sdk_change_analyzer.models.imports import (
    ImportRecord,
    MethodSignature,
    WrapperFileProfile,
)
from sdk_change_analyzer.parser.signatures import scan_async_signatures

logger = logging.getLogger(__name__)

RE_NAMED_IMPORT = re.compile(
    r"^[ \t]*import\s+(type\s+)?"
    r"(?:[A-Za-z_$][\w$]*\s*,\s*)?"
    r"\{([^}]*)\}\s*"
    r"from\s*['\"]([^'\"]+)['\"]",
    re.MULTILINE,
)
RE_LINE_COMMENT = re.compile(r"//[^\n]*")
RE_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)

_SOURCE_EXTENSIONS = (".d.ts", ".ts", ".tsx", ".js", ".mjs")


def parse_named_symbols(clause: str) -> list[str]:
    """
    Split the body of `{ ... }` into imported symbol names.

    `A as B` yields `A`, the name exported by the source module, and
    inline `type` modifiers are dropped.
    """
    clause = RE_BLOCK_COMMENT.sub(" ", clause)
    clause = RE_LINE_COMMENT.sub(" ", clause)
    symbols: list[str] = []
    for part in clause.split(","):
        tokens = part.split()
        if not tokens:
            continue
        if tokens[0] == "type" and len(tokens) > 1:
            tokens = tokens[1:]
        symbols.append(tokens[0])
    return symbols


def is_generated_path(source: str, marker: str) -> bool:
    """Check whether `marker` is one of the path segments of `source`."""
    return marker in source.split("/")


def normalize_generated_path(source: str, marker: str) -> str:
    """
    Reduce an import source to its location inside the generated subtree.

    `../generated/models/UserModel.js` becomes `models/UserModel`; a barrel
    import such as `../generated/index.js` becomes the empty string.
    """
    segments = source.split("/")
    if marker in segments:
        segments = segments[segments.index(marker) + 1:]
    segments = [s for s in segments if s not in ("", ".", "..")]
    if segments:
        last = segments[-1]
        for extension in _SOURCE_EXTENSIONS:
            if last.endswith(extension):
                last = last[: -len(extension)]
                break
        segments[-1] = last
        if last == "index":
            segments = segments[:-1]
    return "/".join(segments)


class ImportGraphAnalyzer:
    """
    Build WrapperFileProfiles from wrapper source text.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize the analyzer.

        Args:
            config: Configuration supplying the generated-root marker.
        """
        self.config = config or Config()

    @property
    def marker(self) -> str:
        return self.config.paths.generated_marker

    def extract_imports(self, path: str, text: str) -> list[ImportRecord]:
        """
        Find the named imports in one wrapper file.

        Args:
            path: Wrapper file path.
            text: Full source text.

        Returns:
            ImportRecords in source order.
        """
        records: list[ImportRecord] = []
        for match in RE_NAMED_IMPORT.finditer(text):
            symbols = parse_named_symbols(match.group(2))
            if not symbols:
                continue
            source = match.group(3)
            records.append(ImportRecord(
                wrapper_path=path,
                source=source,
                symbols=symbols,
                is_generated_source=is_generated_path(source, self.marker),
                type_only=match.group(1) is not None,
                line_number=text.count("\n", 0, match.start()) + 1,
            ))
        return records

    @staticmethod
    def extract_methods(text: str) -> list[MethodSignature]:
        """Exported async methods, scanned the same way as generated endpoints."""
        return [
            MethodSignature(
                name=signature.name,
                return_type=signature.return_type,
                line_number=signature.line_number,
            )
            for signature in scan_async_signatures(text)
        ]

    def profile(self, path: str, text: str) -> WrapperFileProfile:
        """
        Build the profile of one wrapper file.

        Args:
            path: Wrapper file path.
            text: Full source text, or the oversized-file marker.

        Returns:
            WrapperFileProfile; empty with a note when the text is a marker.
        """
        if is_size_marker(text):
            logger.warning("Profile of %s is empty: file exceeded the size limit", path)
            return WrapperFileProfile(
                path=path,
                note="File too large for analysis; imports not inspected",
            )

        return WrapperFileProfile(
            path=path,
            imports=self.extract_imports(path, text),
            methods=self.extract_methods(text),
        )

    def profile_many(self, files: Mapping[str, str]) -> list[WrapperFileProfile]:
        """
        Build profiles for several wrapper files.

        Args:
            files: Mapping of wrapper path to source text.

        Returns:
            Profiles sorted alphabetically by path.
        """
        return [self.profile(path, files[path]) for path in sorted(files)]
