"""
Evaluation Harness Base Definitions.

Defines the Scorer protocol and the value types shared by the scoring loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ScoringWeights:
    """Weights applied to the ground-truth and criteria similarities.

    Their sum is not required to be 1.0.
    """

    ground_truth: float = 0.7
    criteria: float = 0.3


@dataclass(frozen=True)
class ScoreResult:
    """Result of scoring one model output."""

    passed: bool
    score: float  # weighted final score
    ground_truth_score: float
    criteria_score: float

    @classmethod
    def zero(cls) -> "ScoreResult":
        return cls(passed=False, score=0.0, ground_truth_score=0.0, criteria_score=0.0)


class Scorer(Protocol):
    """Protocol for a scorer (judge)."""

    async def score(self, model_output: str, ground_truth: str, criteria_text: str = "") -> ScoreResult:
        """
        Score the model output against the expected answer and rubric.

        Args:
            model_output: The text produced by the model under test.
            ground_truth: The expected answer.
            criteria_text: Optional free-text rubric; empty means no rubric.

        Returns:
            ScoreResult with the verdict and its component scores.
        """
        ...
