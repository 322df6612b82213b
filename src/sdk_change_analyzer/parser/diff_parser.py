"""
Diff parser using the unidiff library.

This module wraps the unidiff library to parse unified diff text and
extract structured change information. Diff text from heterogeneous
sources is not fully trustworthy, so when unidiff rejects the input a
tolerant line scanner recovers whatever structure it can instead of
failing the whole parse.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from unidiff import PatchSet, PatchedFile
from unidiff.errors import UnidiffParseError

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

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

RE_GIT_HEADER = re.compile(r"^diff --git a/(.+) b/(.+)$")
RE_SOURCE_HEADER = re.compile(r"^--- (\S.*?)(?:\t.*)?$")
RE_TARGET_HEADER = re.compile(r"^\+\+\+ (\S.*?)(?:\t.*)?$")
RE_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")
# Whole lines only; summary-like text after a +/- marker is not a summary
RE_SUMMARY = re.compile(
    r"^[ \t]*(\d+) files? changed"
    r"(?:, (\d+) insertions?\(\+\))?"
    r"(?:, (\d+) deletions?\(-\))?[ \t]*$",
    re.MULTILINE,
)
RE_API_HINT = re.compile(r"endpoint|path|/api/|/v\d+/")
RE_TYPE_HINT = re.compile(r"interface|type|export")
HIGHLIGHT_WIDTH = 100

_LINE_KINDS = {
    "+": LineKind.ADDITION,
    "-": LineKind.DELETION,
    " ": LineKind.CONTEXT,
}


class DiffParserError(Exception):
    """Error reading diff input."""
    pass


def strip_vcs_prefix(path: str) -> str:
    """Remove the `a/` or `b/` prefix git puts in front of diff paths."""
    path = path.strip()
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


class _HunkBuilder:
    """Accumulates the body of one hunk for the tolerant scanner."""

    def __init__(self, match: re.Match) -> None:
        self.source_start = int(match.group(1))
        self.source_length = int(match.group(2)) if match.group(2) is not None else 1
        self.target_start = int(match.group(3))
        self.target_length = int(match.group(4)) if match.group(4) is not None else 1
        self.section_header = match.group(5).strip()
        self.lines: list[LineChange] = []
        self._source_left = self.source_length
        self._target_left = self.target_length
        self._source_no = self.source_start
        self._target_no = self.target_start

    @property
    def complete(self) -> bool:
        return self._source_left <= 0 and self._target_left <= 0

    def accept(self, line: str) -> bool:
        """Append a body line if it fits the declared ranges."""
        marker = line[:1] if line else " "
        kind = _LINE_KINDS.get(marker)
        if kind is None:
            return False

        if kind == LineKind.ADDITION:
            if self._target_left <= 0:
                return False
            self.lines.append(LineChange(
                kind=kind, content=line[1:], target_line_no=self._target_no,
            ))
            self._target_no += 1
            self._target_left -= 1
        elif kind == LineKind.DELETION:
            if self._source_left <= 0:
                return False
            self.lines.append(LineChange(
                kind=kind, content=line[1:], source_line_no=self._source_no,
            ))
            self._source_no += 1
            self._source_left -= 1
        else:
            if self._source_left <= 0 or self._target_left <= 0:
                return False
            self.lines.append(LineChange(
                kind=kind,
                content=line[1:],
                source_line_no=self._source_no,
                target_line_no=self._target_no,
            ))
            self._source_no += 1
            self._target_no += 1
            self._source_left -= 1
            self._target_left -= 1
        return True

    def build(self) -> Hunk:
        return Hunk(
            source_start=self.source_start,
            source_length=self.source_length,
            target_start=self.target_start,
            target_length=self.target_length,
            section_header=self.section_header,
            lines=self.lines,
        )


class _FileBuilder:
    """Accumulates one file entry for the tolerant scanner."""

    def __init__(self, source: Optional[str] = None, target: Optional[str] = None) -> None:
        self.source = source
        self.target = target
        self.new_file = False
        self.deleted_file = False
        self.renamed = False
        self.hunks: list[Hunk] = []

    def build(self, diagnostics: list[str]) -> Optional[FileChange]:
        source = self.source
        target = self.target
        if source is None and target is None:
            diagnostics.append("File header without any path was dropped")
            return None

        added = self.new_file or source == DEV_NULL
        deleted = self.deleted_file or target == DEV_NULL
        if deleted or target is None:
            path = strip_vcs_prefix(source or "")
        else:
            path = strip_vcs_prefix(target)
        source_path = None if source in (None, DEV_NULL) else strip_vcs_prefix(source)

        if added:
            kind = ChangeKind.ADDED
        elif deleted:
            kind = ChangeKind.DELETED
        elif self.renamed or (source_path is not None and source_path != path):
            kind = ChangeKind.RENAMED
        else:
            kind = ChangeKind.MODIFIED

        if kind == ChangeKind.ADDED and any(h.source_line_count for h in self.hunks):
            diagnostics.append(f"{path}: marked as new but has old-version lines; treated as modified")
            kind = ChangeKind.MODIFIED
        elif kind == ChangeKind.DELETED and any(h.target_line_count for h in self.hunks):
            diagnostics.append(f"{path}: marked as deleted but has new-version lines; treated as modified")
            kind = ChangeKind.MODIFIED

        return FileChange(
            path=path,
            kind=kind,
            source_path=source_path if kind == ChangeKind.RENAMED else None,
            hunks=self.hunks,
        )


class DiffParser:
    """
    Parse unified diff text into FileChange records.

    unidiff is tried first; input it rejects is handed to a tolerant
    scanner which never raises and reports what it skipped in the
    result's diagnostics.
    """

    @staticmethod
    def _determine_change_kind(patched_file: PatchedFile) -> ChangeKind:
        """
        Determine the type of change for a patched file.

        Args:
            patched_file: A PatchedFile from unidiff.

        Returns:
            The ChangeKind for this file.
        """
        if patched_file.is_added_file:
            return ChangeKind.ADDED
        elif patched_file.is_removed_file:
            return ChangeKind.DELETED
        elif patched_file.is_rename:
            return ChangeKind.RENAMED
        else:
            return ChangeKind.MODIFIED

    @staticmethod
    def _parse_hunk(hunk: "unidiff.Hunk") -> Hunk:  # type: ignore[name-defined]
        """
        Parse a unidiff Hunk into our Hunk model.

        Args:
            hunk: A Hunk from unidiff.

        Returns:
            Hunk with classified lines.
        """
        lines: list[LineChange] = []
        for line in hunk:
            if line.is_added:
                kind = LineKind.ADDITION
            elif line.is_removed:
                kind = LineKind.DELETION
            elif line.is_context:
                kind = LineKind.CONTEXT
            else:
                # "\ No newline at end of file"
                continue
            lines.append(LineChange(
                kind=kind,
                content=line.value.rstrip("\r\n"),
                source_line_no=line.source_line_no,
                target_line_no=line.target_line_no,
            ))

        return Hunk(
            source_start=hunk.source_start,
            source_length=hunk.source_length,
            target_start=hunk.target_start,
            target_length=hunk.target_length,
            section_header=(hunk.section_header or "").strip(),
            lines=lines,
        )

    @staticmethod
    def _parse_patched_file(patched_file: PatchedFile) -> FileChange:
        """
        Parse a PatchedFile into our FileChange model.

        Args:
            patched_file: A PatchedFile from unidiff.

        Returns:
            FileChange with all hunk information.
        """
        kind = DiffParser._determine_change_kind(patched_file)

        # Use the target path unless the file is gone
        if kind == ChangeKind.DELETED:
            path = strip_vcs_prefix(patched_file.source_file)
        else:
            path = strip_vcs_prefix(patched_file.target_file)

        source_path = None
        if kind == ChangeKind.RENAMED:
            source_path = strip_vcs_prefix(patched_file.source_file)

        return FileChange(
            path=path,
            kind=kind,
            source_path=source_path,
            hunks=[DiffParser._parse_hunk(hunk) for hunk in patched_file],
        )

    @classmethod
    def _scan_tolerant(cls, diff_content: str) -> tuple[list[FileChange], list[str]]:
        """
        Recover file and hunk structure line by line.

        Hunks are only attached to a file seen earlier; a hunk header with
        no current file is dropped together with its body.
        """
        diagnostics: list[str] = []
        files: list[FileChange] = []
        current_file: Optional[_FileBuilder] = None
        current_hunk: Optional[_HunkBuilder] = None

        def close_hunk() -> None:
            nonlocal current_hunk
            if current_hunk is None:
                return
            if not current_hunk.complete:
                diagnostics.append(
                    f"Hunk @@ -{current_hunk.source_start},{current_hunk.source_length} "
                    f"+{current_hunk.target_start},{current_hunk.target_length} @@ "
                    "is shorter than declared"
                )
            if current_file is not None:
                current_file.hunks.append(current_hunk.build())
            current_hunk = None

        def close_file() -> None:
            nonlocal current_file
            close_hunk()
            if current_file is not None:
                built = current_file.build(diagnostics)
                if built is not None:
                    files.append(built)
            current_file = None

        for line_no, raw_line in enumerate(diff_content.splitlines(), start=1):
            line = raw_line.rstrip("\r")

            # Body lines win while the open hunk still expects lines
            if current_hunk is not None and not current_hunk.complete:
                if line.startswith("\\"):
                    continue
                if not line.startswith(("diff --git ", "@@ ")) and current_hunk.accept(line):
                    continue

            if current_hunk is not None and line.startswith("\\"):
                continue

            git_header = RE_GIT_HEADER.match(line)
            if git_header:
                close_file()
                current_file = _FileBuilder(
                    source=git_header.group(1), target=git_header.group(2),
                )
                continue

            if line.startswith("diff --git "):
                close_file()
                diagnostics.append(f"Line {line_no}: unparseable file header dropped")
                continue

            hunk_header = RE_HUNK_HEADER.match(line)
            if hunk_header:
                close_hunk()
                if current_file is None:
                    diagnostics.append(
                        f"Line {line_no}: hunk header without a preceding file header dropped"
                    )
                    continue
                current_hunk = _HunkBuilder(hunk_header)
                continue

            if line.startswith("@@"):
                close_hunk()
                diagnostics.append(f"Line {line_no}: malformed hunk header dropped")
                continue

            source_header = RE_SOURCE_HEADER.match(line)
            if source_header:
                # A plain (non-git) diff starts a new file at its "---" line
                if current_file is None or current_file.hunks or current_hunk is not None:
                    close_file()
                    current_file = _FileBuilder()
                current_file.source = source_header.group(1)
                continue

            target_header = RE_TARGET_HEADER.match(line)
            if target_header and current_file is not None and current_hunk is None:
                current_file.target = target_header.group(1)
                continue

            if current_file is not None and current_hunk is None:
                if line.startswith("new file mode"):
                    current_file.new_file = True
                elif line.startswith("deleted file mode"):
                    current_file.deleted_file = True
                elif line.startswith("rename from "):
                    current_file.renamed = True
                    current_file.source = line[len("rename from "):]
                elif line.startswith("rename to "):
                    current_file.renamed = True
                    current_file.target = line[len("rename to "):]
                continue

            if current_hunk is not None and line.startswith(("+", "-", " ")):
                diagnostics.append(f"Line {line_no}: line beyond the declared hunk range dropped")

        close_file()
        return files, diagnostics

    @staticmethod
    def parse_summary(diff_content: str) -> DiffSummary:
        """
        Extract the counts from a `git diff --stat` style summary line.

        Args:
            diff_content: Diff text that may contain a summary line.

        Returns:
            DiffSummary; `present` is False when no summary line exists.
        """
        match = RE_SUMMARY.search(diff_content)
        if match is None:
            return DiffSummary()
        return DiffSummary(
            present=True,
            files_changed=int(match.group(1) or 0),
            insertions=int(match.group(2) or 0),
            deletions=int(match.group(3) or 0),
        )

    @classmethod
    def parse_string(cls, diff_content: str) -> ParsedDiff:
        """
        Parse diff content from a string.

        Never raises for malformed content; problems are reported in the
        returned diagnostics.

        Args:
            diff_content: The diff content as a string.

        Returns:
            ParsedDiff with the recovered file changes.
        """
        if not diff_content or not diff_content.strip():
            return ParsedDiff()

        diagnostics: list[str] = []
        strategy = "unidiff"
        try:
            patch_set = PatchSet(diff_content)
            files = [cls._parse_patched_file(f) for f in patch_set]
        except (UnidiffParseError, ValueError) as e:
            # ValueError covers pydantic rejecting an inconsistent file
            diagnostics.append(f"Strict parse failed, recovered with line scanner: {e}")
            strategy = "tolerant"
            files, scan_diagnostics = cls._scan_tolerant(diff_content)
            diagnostics.extend(scan_diagnostics)

        summary = cls.parse_summary(diff_content)
        if summary.present and summary.files_changed != len(files):
            diagnostics.append(
                f"Summary reports {summary.files_changed} files changed but "
                f"{len(files)} were parsed; using the parsed count"
            )

        for message in diagnostics:
            logger.warning("diff: %s", message)

        return ParsedDiff(
            files=files,
            summary=summary,
            strategy=strategy,
            diagnostics=diagnostics,
        )

    @classmethod
    def parse_file(cls, diff_path: Path, encoding: str = "utf-8") -> ParsedDiff:
        """
        Parse a diff file.

        Args:
            diff_path: Path to the diff file.
            encoding: File encoding (default: utf-8).

        Returns:
            ParsedDiff with the recovered file changes.

        Raises:
            DiffParserError: If the file cannot be read.
        """
        try:
            content = diff_path.read_text(encoding=encoding, errors="replace")
        except OSError as e:
            raise DiffParserError(f"Failed to read diff file {diff_path}: {e}") from e
        return cls.parse_string(content)

    @classmethod
    def parse(cls, source: Union[Path, str]) -> ParsedDiff:
        """
        Parse diff from a file path or string.

        Args:
            source: Either a Path to a diff file or diff content as string.

        Returns:
            ParsedDiff with the recovered file changes.
        """
        if isinstance(source, Path):
            return cls.parse_file(source)
        elif isinstance(source, str):
            return cls.parse_string(source)
        else:
            raise DiffParserError(f"Invalid source type: {type(source)}")

    @classmethod
    def extract_highlights(cls, parsed: ParsedDiff) -> DiffHighlights:
        """
        Summarize a parsed diff for a reviewer.

        Buckets files by kind and picks out changed lines that mention
        endpoints, paths or versioned API routes, and lines that mention
        interfaces, types or exports. Matching is plain substring search,
        so `typeof` or a `filepath` variable also qualify.

        Args:
            parsed: Result of one of the parse methods.

        Returns:
            DiffHighlights with line text stripped and cut to 100 characters.
        """
        new_files: list[str] = []
        deleted_files: list[str] = []
        modified_files: list[str] = []
        api_changes: list[HighlightLine] = []
        type_changes: list[HighlightLine] = []

        for fc in parsed.files:
            if fc.kind == ChangeKind.ADDED:
                new_files.append(fc.path)
            elif fc.kind == ChangeKind.DELETED:
                deleted_files.append(fc.path)
            else:
                modified_files.append(fc.path)

            for hunk in fc.hunks:
                for line in hunk.lines:
                    if line.kind == LineKind.CONTEXT:
                        continue
                    content = line.content.strip()
                    highlight = HighlightLine(
                        file_path=fc.path,
                        kind=line.kind,
                        content=content[:HIGHLIGHT_WIDTH],
                    )
                    if RE_API_HINT.search(content):
                        api_changes.append(highlight)
                    if RE_TYPE_HINT.search(content):
                        type_changes.append(highlight)

        return DiffHighlights(
            new_files=new_files,
            deleted_files=deleted_files,
            modified_files=modified_files,
            api_changes=api_changes,
            type_changes=type_changes,
        )
