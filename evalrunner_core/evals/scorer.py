"""
Embedding-based similarity scorer.

Blends the model output's similarity to the ground truth with its similarity
to an optional rubric, then applies the pass threshold.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from evalrunner_core.domain.interfaces import EmbeddingPort

from .base import ScoreResult, ScoringWeights
from .similarity import cosine_similarity


class SimilarityScorer:
    """
    Scores model output with weighted cosine similarity.

    ``score = gt_similarity * weights.ground_truth + criteria_similarity * weights.criteria``
    and the case passes when ``score >= threshold``.

    Usage:
        scorer = SimilarityScorer(embedder, ScoringWeights(0.7, 0.3), threshold=0.75)
        result = await scorer.score("5 x 6 = 30", "30")
    """

    def __init__(self, embedder: EmbeddingPort, weights: ScoringWeights, threshold: float):
        self.embedder = embedder
        self.weights = weights
        self.threshold = threshold

    async def score(self, model_output: str, ground_truth: str, criteria_text: str = "") -> ScoreResult:
        """
        Score one model output.

        Empty or whitespace-only output or ground truth scores zero without
        calling the embedder. An empty rubric is not embedded and contributes
        a criteria score of 0.0.
        """
        if not model_output.strip() or not ground_truth.strip():
            return ScoreResult.zero()

        has_criteria = bool(criteria_text and criteria_text.strip())

        texts = [model_output, ground_truth]
        if has_criteria:
            texts.append(criteria_text)

        vectors = await asyncio.gather(*(self.embedder.embed(text) for text in texts))
        output_vec, truth_vec = vectors[0], vectors[1]

        ground_truth_score = cosine_similarity(output_vec, truth_vec)
        criteria_score = cosine_similarity(output_vec, vectors[2]) if has_criteria else 0.0

        final = ground_truth_score * self.weights.ground_truth + criteria_score * self.weights.criteria
        passed = final >= self.threshold

        logger.info(
            f"Similarity score: {final:.4f} (ground truth {ground_truth_score:.4f}, "
            f"criteria {criteria_score:.4f}, threshold {self.threshold})"
        )

        return ScoreResult(
            passed=passed,
            score=final,
            ground_truth_score=ground_truth_score,
            criteria_score=criteria_score,
        )
