"""
Diff data models.

Models representing parsed unified diffs: files, hunks and classified lines.
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ChangeKind(str, Enum):
    """Type of file change in a diff."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class LineKind(str, Enum):
    """Classification of a single line inside a hunk."""

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"


class LineChange(BaseModel):
    """One line of a hunk with its diff marker stripped."""

    kind: LineKind = Field(description="Addition, deletion or context")
    content: str = Field(description="Line text without the leading marker")
    source_line_no: Optional[int] = Field(
        default=None,
        description="Line number in the old file (None for additions)",
    )
    target_line_no: Optional[int] = Field(
        default=None,
        description="Line number in the new file (None for deletions)",
    )

    class Config:
        frozen = True


class Hunk(BaseModel):
    """Represents a hunk (section of changes) in a diff."""

    source_start: int = Field(description="Starting line in source file")
    source_length: int = Field(description="Number of lines in source")
    target_start: int = Field(description="Starting line in target file")
    target_length: int = Field(description="Number of lines in target")
    section_header: str = Field(
        default="",
        description="Text following the closing @@ marker",
    )
    lines: list[LineChange] = Field(
        default_factory=list,
        description="Classified lines in file order",
    )

    class Config:
        frozen = True

    @property
    def added_lines(self) -> list[int]:
        """Line numbers of added lines (in target)."""
        return [
            line.target_line_no for line in self.lines
            if line.kind == LineKind.ADDITION and line.target_line_no is not None
        ]

    @property
    def removed_lines(self) -> list[int]:
        """Line numbers of removed lines (in source)."""
        return [
            line.source_line_no for line in self.lines
            if line.kind == LineKind.DELETION and line.source_line_no is not None
        ]

    @property
    def source_line_count(self) -> int:
        """Context plus deletion lines, i.e. the reconstructed old range."""
        return sum(1 for line in self.lines if line.kind != LineKind.ADDITION)

    @property
    def target_line_count(self) -> int:
        """Context plus addition lines, i.e. the reconstructed new range."""
        return sum(1 for line in self.lines if line.kind != LineKind.DELETION)

    @property
    def is_consistent(self) -> bool:
        """Check that the lines reconstruct both declared ranges."""
        return (
            self.source_line_count == self.source_length
            and self.target_line_count == self.target_length
        )


class FileChange(BaseModel):
    """Represents a single file in a diff."""

    path: str = Field(description="Post-change path with VCS prefix stripped")
    kind: ChangeKind = Field(description="Type of change")
    source_path: Optional[str] = Field(
        default=None,
        description="Original path (for renames)",
    )
    hunks: list[Hunk] = Field(
        default_factory=list,
        description="Hunks in this file",
    )

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_kind_against_hunks(self) -> "FileChange":
        if self.kind == ChangeKind.ADDED and any(h.source_line_count for h in self.hunks):
            raise ValueError(f"Added file {self.path} cannot have old-version lines")
        if self.kind == ChangeKind.DELETED and any(h.target_line_count for h in self.hunks):
            raise ValueError(f"Deleted file {self.path} cannot have new-version lines")
        return self

    @property
    def added_count(self) -> int:
        """Total lines added."""
        return sum(len(h.added_lines) for h in self.hunks)

    @property
    def removed_count(self) -> int:
        """Total lines removed."""
        return sum(len(h.removed_lines) for h in self.hunks)

    @property
    def suffix(self) -> str:
        """File extension of the post-change path."""
        return PurePosixPath(self.path).suffix

    @property
    def stem(self) -> str:
        """File name without its extension(s), e.g. `UserModel` for `UserModel.d.ts`."""
        return PurePosixPath(self.path).name.split(".", 1)[0]

    def get_affected_line_ranges(self) -> list[tuple[int, int]]:
        """Get list of (start, end) line ranges affected by changes."""
        ranges: list[tuple[int, int]] = []
        for hunk in self.hunks:
            if self.kind == ChangeKind.DELETED:
                ranges.append((hunk.source_start, hunk.source_start + hunk.source_length))
            else:
                ranges.append((hunk.target_start, hunk.target_start + hunk.target_length))
        return ranges


class DiffSummary(BaseModel):
    """Counts from a `N files changed, M insertions(+), K deletions(-)` line."""

    present: bool = Field(default=False, description="Whether a summary line was found")
    files_changed: int = Field(default=0)
    insertions: int = Field(default=0)
    deletions: int = Field(default=0)

    class Config:
        frozen = True


class ParsedDiff(BaseModel):
    """Structured result of parsing one diff text."""

    files: list[FileChange] = Field(default_factory=list)
    summary: DiffSummary = Field(default_factory=DiffSummary)
    strategy: str = Field(
        default="unidiff",
        description="Which parser produced the structure ('unidiff' or 'tolerant')",
    )
    diagnostics: list[str] = Field(
        default_factory=list,
        description="Problems found in the input; parsing continued past them",
    )

    class Config:
        frozen = True

    @property
    def summary_matches(self) -> bool:
        """Cross-check the summary line against the structural file count."""
        if not self.summary.present:
            return True
        return self.summary.files_changed == len(self.files)


class HighlightLine(BaseModel):
    """An added or deleted line singled out for review."""

    file_path: str = Field(description="Post-change path of the file")
    kind: LineKind = Field(description="Addition or deletion")
    content: str = Field(description="Stripped line text, cut to the highlight width")

    class Config:
        frozen = True


class DiffHighlights(BaseModel):
    """
    Reviewer-oriented digest of a parsed diff.

    Files are bucketed as new, deleted or modified (renames count as
    modified). Changed lines that look like routing or type declarations
    are collected separately; one line may appear in both lists.
    """

    new_files: list[str] = Field(default_factory=list)
    deleted_files: list[str] = Field(default_factory=list)
    modified_files: list[str] = Field(default_factory=list)
    api_changes: list[HighlightLine] = Field(
        default_factory=list,
        description="Changed lines mentioning endpoints, paths or versioned API routes",
    )
    type_changes: list[HighlightLine] = Field(
        default_factory=list,
        description="Changed lines mentioning interfaces, types or exports",
    )

    class Config:
        frozen = True
