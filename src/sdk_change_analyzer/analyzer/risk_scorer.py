"""
Risk scoring for a generated-client update.

Turns three counts into a point score and a tier. The function is pure:
the same counts always produce the same assessment, and the assessment
keeps the counts so the tier can be audited.
"""

from typing import Optional

from sdk_change_analyzer.config import Config, ScoringConfig
from sdk_change_analyzer.models.report import RiskAssessment, RiskFactors, RiskLevel


def points_for(count: int, table: list[tuple[int, int]]) -> int:
    """
    Points earned by `count` under a descending (threshold, points) table.

    The first threshold strictly exceeded wins; a count sitting exactly on
    a threshold falls through to the next, lower row.
    """
    for threshold, points in table:
        if count > threshold:
            return points
    return 0


class RiskScorer:
    """
    Score how disruptive a change set is for the wrapper layer.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.scoring: ScoringConfig = (config or Config()).scoring

    def level_for(self, score: int) -> RiskLevel:
        """Map a score to a tier."""
        if score >= self.scoring.high_score:
            return RiskLevel.HIGH
        if score >= self.scoring.medium_score:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def assess(
        self,
        total_files: int,
        affected_wrappers: int,
        generated_api_changes: int,
    ) -> RiskAssessment:
        """
        Score a change set.

        Args:
            total_files: Number of files in the diff.
            affected_wrappers: Number of affected wrapper files.
            generated_api_changes: Number of changed generated API files.

        Returns:
            RiskAssessment with level, score and factor breakdown.
        """
        file_score = points_for(total_files, self.scoring.total_files)
        wrapper_score = points_for(affected_wrappers, self.scoring.affected_wrappers)
        api_score = points_for(generated_api_changes, self.scoring.generated_api_changes)
        score = file_score + wrapper_score + api_score

        return RiskAssessment(
            level=self.level_for(score),
            score=score,
            factors=RiskFactors(
                total_files=total_files,
                affected_wrappers=affected_wrappers,
                generated_api_changes=generated_api_changes,
                file_score=file_score,
                wrapper_score=wrapper_score,
                generated_api_score=api_score,
            ),
        )
