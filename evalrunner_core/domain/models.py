"""
Eval domain models.

- EvalCase: One prompt with its expected answer and optional rubric
- EvalResult: The scored outcome of one case, as written to the report

Both serialize with camelCase keys (``groundTruth``, ``modelOutput``, ...).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from evalrunner_core.evals.base import ScoreResult

PASS_NOTE = "✅ Pass"
FAIL_NOTE = "❌ Fail"


class EvalCase(BaseModel):
    """
    A single eval case loaded from the eval set.

    Accepts camelCase, PascalCase and snake_case keys. A missing or null
    ``evalCriteria`` becomes the empty string.
    """

    input: str = Field(validation_alias=AliasChoices("input", "Input"))
    ground_truth: str = Field(
        validation_alias=AliasChoices("groundTruth", "GroundTruth", "ground_truth")
    )
    eval_criteria: str = Field(
        default="",
        validation_alias=AliasChoices("evalCriteria", "EvalCriteria", "eval_criteria"),
    )

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("eval_criteria", mode="before")
    @classmethod
    def _none_criteria_is_empty(cls, value: str | None) -> str:
        return "" if value is None else value


class EvalResult(BaseModel):
    """
    Scored outcome of one eval case.

    Created once per case after a successful model response and successful
    scoring, then never modified.
    """

    input: str
    ground_truth: str
    model_output: str
    passed: bool
    threshold_used: float
    similarity_score: float
    ground_truth_score: float
    criteria_score: float
    notes: str

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_score(
        cls, case: EvalCase, model_output: str, score: "ScoreResult", threshold: float
    ) -> "EvalResult":
        """Build the result record for ``case`` from its score."""
        return cls(
            input=case.input,
            ground_truth=case.ground_truth,
            model_output=model_output,
            passed=score.passed,
            threshold_used=threshold,
            similarity_score=score.score,
            ground_truth_score=score.ground_truth_score,
            criteria_score=score.criteria_score,
            notes=PASS_NOTE if score.passed else FAIL_NOTE,
        )

    def to_record(self) -> dict:
        """Serialize with the report's camelCase field names."""
        return self.model_dump(by_alias=True)
