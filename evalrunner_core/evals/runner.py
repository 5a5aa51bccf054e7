"""
Evaluation run orchestration.

EvalRunner drives one eval set through the model under test:
1. Gets a completion for each case (retried on failure).
2. Scores the completion against the case's ground truth and rubric.
3. Collects the results in input order.

A case whose completion never succeeds is dropped from the results rather
than recorded as a failure.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from evalrunner_core.domain.interfaces import ChatPort, EmbeddingPort
from evalrunner_core.domain.models import EvalCase, EvalResult
from evalrunner_core.runtime.errors import RetryExhaustedError
from evalrunner_core.runtime.retry import RetryingInvoker

from .base import Scorer
from .scorer import SimilarityScorer

if TYPE_CHECKING:
    from evalrunner_core.config import RunConfig


class EvalRunner:
    """
    Runs eval cases through a chat backend and scores the responses.

    Usage:
        runner = EvalRunner(chat=chat, embedder=embedder, config=run_config)
        results = await runner.run(cases)
    """

    def __init__(
        self,
        chat: ChatPort,
        embedder: EmbeddingPort,
        config: RunConfig,
        invoker: RetryingInvoker | None = None,
        scorer: Scorer | None = None,
    ):
        self.chat = chat
        self.embedder = embedder
        self.config = config
        self.invoker = invoker or RetryingInvoker(config.retry_policy)
        self.scorer = scorer or SimilarityScorer(embedder, config.weights, config.threshold)

    async def run(self, cases: Sequence[EvalCase]) -> list[EvalResult]:
        """
        Evaluate every case.

        Returns:
            Results in the same order as ``cases``, without the cases that
            were skipped.
        """
        total = len(cases)

        if self.config.concurrency <= 1:
            outcomes = []
            for index, case in enumerate(cases, 1):
                outcomes.append(await self._evaluate_case(index, total, case))
        else:
            semaphore = asyncio.Semaphore(self.config.concurrency)

            async def bounded(index: int, case: EvalCase) -> EvalResult | None:
                async with semaphore:
                    return await self._evaluate_case(index, total, case)

            tasks = [asyncio.create_task(bounded(index, case)) for index, case in enumerate(cases, 1)]
            try:
                # gather keeps input order regardless of completion order
                outcomes = await asyncio.gather(*tasks)
            except Exception:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        results = [result for result in outcomes if result is not None]

        skipped = total - len(results)
        if skipped:
            logger.warning(f"{skipped} of {total} case(s) skipped and left out of the results")

        return results

    async def _evaluate_case(self, index: int, total: int, case: EvalCase) -> EvalResult | None:
        logger.info(f"[{index}/{total}] Running eval for input: {case.input}")

        try:
            response = await self.invoker.invoke(self.chat, case.input)
        except RetryExhaustedError as e:
            logger.bind(**e.to_dict()).warning(
                f"[{e.debug_id}] No response for case {index} after {e.attempts} attempt(s), skipping: {e.cause}"
            )
            return None

        model_output = response.strip()

        try:
            score = await self.scorer.score(model_output, case.ground_truth, case.eval_criteria)
        except Exception as e:
            if not self.config.skip_on_embedding_error:
                logger.error(f"Scoring failed for case {index}, aborting run: {e}")
                raise
            logger.error(f"Scoring failed for case {index}, skipping: {e}")
            return None

        return EvalResult.from_score(case, model_output, score, self.config.threshold)
