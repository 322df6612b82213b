"""
Source snapshot loading.

Reads a directory of TypeScript files into a path -> text mapping. Reads
run concurrently since every file is profiled independently; results are
returned sorted by path so downstream stages see a deterministic order.
Oversized files are replaced by a marker text instead of being read.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Optional

from sdk_change_analyzer.config import LoaderConfig

logger = logging.getLogger(__name__)

SIZE_MARKER_PREFIX = "// File too large for analysis"


class SourceUnavailableError(Exception):
    """The requested source directory does not exist or is not a directory."""
    pass


def size_marker(size: int) -> str:
    """Text that stands in for a file over the size limit."""
    return f"{SIZE_MARKER_PREFIX} ({size} bytes)\n// Please review manually"


def is_size_marker(text: str) -> bool:
    """Check whether a file's text is the oversized-file marker."""
    return text.startswith(SIZE_MARKER_PREFIX)


def _matches(relative: str, pattern: str) -> bool:
    # "**/x" should also match "x" at the root
    if fnmatch(relative, pattern):
        return True
    return pattern.startswith("**/") and fnmatch(relative, pattern[3:])


@dataclass
class LoadResult:
    """Files read from one directory."""

    root: Path
    files: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class SourceLoader:
    """
    Read source files from a directory with a size limit and a timeout.
    """

    def __init__(self, config: Optional[LoaderConfig] = None) -> None:
        """
        Initialize the loader.

        Args:
            config: Loader configuration (globs, size limit, workers, timeout).
        """
        self.config = config or LoaderConfig()

    def list_files(self, root: Path) -> list[Path]:
        """
        List files under `root` matching the include and exclude patterns.

        Args:
            root: Directory to search.

        Returns:
            Sorted list of matching file paths.
        """
        found: set[Path] = set()
        for path in root.rglob("*"):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if not any(_matches(relative, p) for p in self.config.include_patterns):
                continue
            if any(_matches(relative, p) for p in self.config.exclude_patterns):
                continue
            found.add(path)
        return sorted(found)

    def _read_one(self, path: Path) -> str:
        size = path.stat().st_size
        if size > self.config.max_file_size:
            return size_marker(size)
        return path.read_bytes().decode("utf-8")

    def load_directory(self, root: Path) -> LoadResult:
        """
        Read every matching file under `root`.

        Args:
            root: Directory to read.

        Returns:
            LoadResult with files keyed by POSIX path relative to `root`.

        Raises:
            SourceUnavailableError: If `root` is missing or not a directory.
        """
        if not root.is_dir():
            raise SourceUnavailableError(f"Directory not found: {root}")

        result = LoadResult(root=root)
        paths = self.list_files(root)
        contents: dict[str, str] = {}

        executor = ThreadPoolExecutor(max_workers=self.config.max_workers)
        try:
            futures: dict[Future, Path] = {
                executor.submit(self._read_one, path): path for path in paths
            }
            done, not_done = wait(futures, timeout=self.config.read_timeout)

            for future in done:
                relative = futures[future].relative_to(root).as_posix()
                try:
                    text = future.result()
                except (OSError, UnicodeDecodeError) as e:
                    message = f"Failed to read {relative}: {e}"
                    logger.warning(message)
                    result.warnings.append(message)
                    result.skipped.append(relative)
                    continue
                if is_size_marker(text):
                    message = f"Skipping large file: {relative}"
                    logger.warning(message)
                    result.warnings.append(message)
                contents[relative] = text

            for future in not_done:
                relative = futures[future].relative_to(root).as_posix()
                message = f"Timed out reading {relative}"
                logger.warning(message)
                result.warnings.append(message)
                result.skipped.append(relative)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        result.files = {path: contents[path] for path in sorted(contents)}
        result.skipped.sort()
        result.warnings.sort()
        logger.debug("Read %d files from %s", len(result.files), root)
        return result
