"""
Unit tests for correlating generated changes with wrapper imports.
"""

from typing import Optional

from sdk_change_analyzer.analyzer.change_correlator import ChangeCorrelator
from sdk_change_analyzer.analyzer.import_graph import ImportGraphAnalyzer
from sdk_change_analyzer.config import Config, PathsConfig, ThresholdsConfig
from sdk_change_analyzer.models.diff import ChangeKind, FileChange
from sdk_change_analyzer.models.imports import ImportRecord, WrapperFileProfile
from sdk_change_analyzer.models.report import AffectedWrapper, RiskLevel


def _change(path: str, kind: ChangeKind = ChangeKind.MODIFIED, source_path: Optional[str] = None) -> FileChange:
    return FileChange(path=path, kind=kind, source_path=source_path)


def _profile(path: str, text: str) -> WrapperFileProfile:
    return ImportGraphAnalyzer().profile(path, text)


FIVE_MODEL_IMPORTS = "".join(
    f"import {{ Model{i} }} from '../generated/models/Model{i}';\n" for i in range(5)
)


class TestChangeCorrelator:
    """Tests for the ChangeCorrelator class."""

    def test_single_model_change(self, users_wrapper: str, questions_wrapper: str) -> None:
        """Test that only the wrapper importing the changed model is affected."""
        changes = [_change("src/generated/models/UserAnalyticsResponseModel.ts")]
        profiles = [
            _profile("src/client/users.ts", users_wrapper),
            _profile("src/client/questions.ts", questions_wrapper),
        ]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert len(affected) == 1
        assert affected[0].path == "src/client/users.ts"
        assert affected[0].affected_import_count == 1
        assert affected[0].affected_symbols == ["UserAnalyticsResponseModel"]
        assert affected[0].risk_level == RiskLevel.LOW

    def test_many_affected_imports_is_high(self) -> None:
        """Test that five affected imports put a wrapper in the top tier."""
        changes = [_change(f"src/generated/models/Model{i}.ts") for i in range(5)]
        profiles = [_profile("src/client/models.ts", FIVE_MODEL_IMPORTS)]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert len(affected) == 1
        assert affected[0].affected_import_count == 5
        assert affected[0].risk_level == RiskLevel.HIGH

    def test_medium_tier(self) -> None:
        """Test that two affected imports give the middle tier."""
        changes = [_change(f"src/generated/models/Model{i}.ts") for i in range(2)]
        profiles = [_profile("src/client/models.ts", FIVE_MODEL_IMPORTS)]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert affected[0].affected_import_count == 2
        assert affected[0].risk_level == RiskLevel.MEDIUM

    def test_sorted_by_path(self) -> None:
        """Test that output order is alphabetical regardless of input order."""
        text = "import { UserModel } from '../generated/models/UserModel';\n"
        changes = [_change("src/generated/models/UserModel.ts")]
        profiles = [
            _profile("src/client/zeta.ts", text),
            _profile("src/client/alpha.ts", text),
            _profile("src/client/mid.ts", text),
        ]

        forward = ChangeCorrelator().correlate(changes, profiles)
        backward = ChangeCorrelator().correlate(changes, list(reversed(profiles)))

        assert [a.path for a in forward] == [
            "src/client/alpha.ts",
            "src/client/mid.ts",
            "src/client/zeta.ts",
        ]
        assert forward == backward

    def test_no_generated_changes(self, users_wrapper: str) -> None:
        """Test that changes outside the generated tree affect nothing."""
        changes = [_change("src/client/users.ts"), _change("README.md")]
        profiles = [_profile("src/client/users.ts", users_wrapper)]

        assert ChangeCorrelator().correlate(changes, profiles) == []

    def test_no_profiles(self) -> None:
        """Test correlation against an empty wrapper layer."""
        changes = [_change("src/generated/models/UserModel.ts")]

        assert ChangeCorrelator().correlate(changes, []) == []

    def test_barrel_import_is_narrowed(self) -> None:
        """Test that a barrel import keeps only the symbols whose files changed."""
        text = (
            "import { UsersMainApi, UserAnalyticsResponseModel } "
            "from '../generated/index.js';\n"
        )
        changes = [_change("src/generated/models/UserAnalyticsResponseModel.ts")]
        profiles = [_profile("src/client/users.ts", text)]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert len(affected) == 1
        assert affected[0].affected_symbols == ["UserAnalyticsResponseModel"]
        assert affected[0].affected_import_count == 1

    def test_barrel_import_unrelated_change(self) -> None:
        """Test that a barrel import is untouched when no symbol names a changed file."""
        text = "import { UsersMainApi } from '../generated';\n"
        changes = [_change("src/generated/models/TagModel.ts")]
        profiles = [_profile("src/client/users.ts", text)]

        assert ChangeCorrelator().correlate(changes, profiles) == []

    def test_rename_matches_old_path(self) -> None:
        """Test that an import of a renamed file's old path is affected."""
        text = "import { OldName } from '../generated/models/OldName';\n"
        changes = [_change(
            "src/generated/models/NewName.ts",
            kind=ChangeKind.RENAMED,
            source_path="src/generated/models/OldName.ts",
        )]
        profiles = [_profile("src/client/legacy.ts", text)]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert [a.path for a in affected] == ["src/client/legacy.ts"]

    def test_substring_matching_is_lexical(self) -> None:
        """Test that a short import path also matches a longer changed path."""
        text = "import { User } from '../generated/models/User';\n"
        changes = [_change("src/generated/models/UserGroup.ts")]
        profiles = [_profile("src/client/users.ts", text)]

        affected = ChangeCorrelator().correlate(changes, profiles)

        assert len(affected) == 1

    def test_diff_relative_to_generated(self, users_wrapper: str) -> None:
        """Test diffs taken from inside the generated directory."""
        config = Config(paths=PathsConfig(diff_relative_to_generated=True))
        changes = [_change("models/UserAnalyticsResponseModel.ts")]
        profiles = [_profile("src/client/users.ts", users_wrapper)]

        default_result = ChangeCorrelator().correlate(changes, profiles)
        relative_result = ChangeCorrelator(config).correlate(changes, profiles)

        assert default_result == []
        assert [a.path for a in relative_result] == ["src/client/users.ts"]

    def test_non_generated_imports_ignored(self) -> None:
        """Test that imports outside the generated tree never match."""
        record = ImportRecord(
            wrapper_path="src/client/users.ts",
            source="./shared/UserModel",
            symbols=["UserModel"],
            is_generated_source=False,
        )
        profile = WrapperFileProfile(path="src/client/users.ts", imports=[record])
        changes = [_change("src/generated/models/UserModel.ts")]

        assert ChangeCorrelator().correlate(changes, [profile]) == []

    def test_classify_thresholds(self) -> None:
        """Test tier boundaries, including custom thresholds."""
        correlator = ChangeCorrelator()
        assert correlator.classify(1) == RiskLevel.LOW
        assert correlator.classify(2) == RiskLevel.MEDIUM
        assert correlator.classify(4) == RiskLevel.MEDIUM
        assert correlator.classify(5) == RiskLevel.HIGH

        strict = ChangeCorrelator(Config(thresholds=ThresholdsConfig(high_imports=2, medium_imports=1)))
        assert strict.classify(1) == RiskLevel.MEDIUM
        assert strict.classify(2) == RiskLevel.HIGH

    def test_generated_changes_keeps_diff_order(self) -> None:
        """Test filtering a diff down to the generated tree."""
        changes = [
            _change("src/generated/models/B.ts"),
            _change("src/client/users.ts"),
            _change("src/generated/apis/A.ts"),
        ]

        generated = ChangeCorrelator().generated_changes(changes)

        assert [fc.path for fc in generated] == [
            "src/generated/models/B.ts",
            "src/generated/apis/A.ts",
        ]

    def test_impact_level(self) -> None:
        """Test the aggregate tier of the wrapper layer."""
        low = AffectedWrapper(path="a.ts", risk_level=RiskLevel.LOW)
        medium = AffectedWrapper(path="b.ts", risk_level=RiskLevel.MEDIUM)
        high = AffectedWrapper(path="c.ts", risk_level=RiskLevel.HIGH)

        assert ChangeCorrelator.impact_level([]) == RiskLevel.LOW
        assert ChangeCorrelator.impact_level([low]) == RiskLevel.MEDIUM
        assert ChangeCorrelator.impact_level([low, medium]) == RiskLevel.MEDIUM
        assert ChangeCorrelator.impact_level([low, high]) == RiskLevel.HIGH
