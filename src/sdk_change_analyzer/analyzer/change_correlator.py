"""
Change correlator - maps changed generated files to affected wrappers.

Cross-references the generated files touched by a diff with the imports
recorded in each wrapper file's profile.

Path matching is lexical: an import's location inside the generated tree
is tested as a substring of each changed path. No module resolution takes
place, so a short import path can match an unrelated file whose path
happens to contain it, and an import that reaches a changed file only
through a re-export is missed unless it is a barrel import whose symbol
names the changed file.
"""

import logging
from pathlib import PurePosixPath
from typing import Optional

from sdk_change_analyzer.config import Config
from sdk_change_analyzer.models.diff import FileChange
from sdk_change_analyzer.models.imports import ImportRecord, WrapperFileProfile
from sdk_change_analyzer.models.report import AffectedWrapper, RiskLevel
from sdk_change_analyzer.analyzer.import_graph import (
    is_generated_path,
    normalize_generated_path,
)

logger = logging.getLogger(__name__)


def _file_stem(path: str) -> str:
    return PurePosixPath(path).name.split(".", 1)[0]


class ChangeCorrelator:
    """
    Determine which wrapper files import generated code changed by a diff.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize the correlator.

        Args:
            config: Configuration supplying the generated-root marker and
                the wrapper tier thresholds.
        """
        self.config = config or Config()

    def generated_changes(self, changes: list[FileChange]) -> list[FileChange]:
        """
        Restrict a diff's file changes to the generated-code subtree.

        Args:
            changes: All file changes of a diff.

        Returns:
            The changes inside the generated subtree, in diff order.
        """
        if self.config.paths.diff_relative_to_generated:
            return list(changes)
        marker = self.config.paths.generated_marker
        return [fc for fc in changes if is_generated_path(fc.path, marker)]

    def _changed_paths(self, changes: list[FileChange]) -> list[str]:
        paths: list[str] = []
        for fc in changes:
            paths.append(fc.path)
            if fc.source_path:
                paths.append(fc.source_path)
        return paths

    def match_import(
        self,
        record: ImportRecord,
        changed_paths: list[str],
    ) -> Optional[ImportRecord]:
        """
        Test one import against the changed generated paths.

        Args:
            record: An import whose source targets the generated subtree.
            changed_paths: Paths of the changed generated files.

        Returns:
            The record (narrowed to the affected symbols for barrel imports)
            if it is affected, None otherwise.
        """
        location = normalize_generated_path(record.source, self.config.paths.generated_marker)

        if location:
            if any(location in path for path in changed_paths):
                return record
            return None

        # Barrel import: a symbol is affected when a changed file is named after it
        changed_stems = {_file_stem(path) for path in changed_paths}
        symbols = [s for s in record.symbols if s in changed_stems]
        if not symbols:
            return None
        if symbols == record.symbols:
            return record
        return record.model_copy(update={"symbols": symbols})

    def classify(self, affected_import_count: int) -> RiskLevel:
        """
        Risk tier of a wrapper from its affected-import count.

        Args:
            affected_import_count: Named symbols invalidated by the diff.

        Returns:
            HIGH, MEDIUM or LOW.
        """
        thresholds = self.config.thresholds
        if affected_import_count >= thresholds.high_imports:
            return RiskLevel.HIGH
        if affected_import_count >= thresholds.medium_imports:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def correlate(
        self,
        changes: list[FileChange],
        profiles: list[WrapperFileProfile],
    ) -> list[AffectedWrapper]:
        """
        Find the wrapper files whose generated imports were changed.

        Args:
            changes: File changes of the diff (filtered to the generated
                subtree here, so the full list may be passed).
            profiles: Profiles of all wrapper files.

        Returns:
            AffectedWrapper entries sorted alphabetically by wrapper path.
        """
        changed_paths = self._changed_paths(self.generated_changes(changes))
        if not changed_paths:
            return []

        affected: list[AffectedWrapper] = []
        for profile in sorted(profiles, key=lambda p: p.path):
            matched: list[ImportRecord] = []
            for record in profile.generated_imports:
                hit = self.match_import(record, changed_paths)
                if hit is not None:
                    matched.append(hit)

            if not matched:
                continue

            count = sum(len(record.symbols) for record in matched)
            level = self.classify(count)
            logger.debug("%s: %d affected imports (%s)", profile.path, count, level.value)
            affected.append(AffectedWrapper(
                path=profile.path,
                risk_level=level,
                affected_imports=matched,
            ))

        return affected

    @staticmethod
    def impact_level(affected: list[AffectedWrapper]) -> RiskLevel:
        """
        Aggregate tier of the wrapper layer.

        HIGH when any wrapper is HIGH, MEDIUM when any wrapper is affected
        at all, LOW otherwise.
        """
        if not affected:
            return RiskLevel.LOW
        if any(aw.risk_level == RiskLevel.HIGH for aw in affected):
            return RiskLevel.HIGH
        return RiskLevel.MEDIUM
