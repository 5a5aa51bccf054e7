"""
Result report writing.

Results are written once, at the end of a run, as a pretty-printed JSON array
to ``eval_results_<YYYYMMDDTHHMMSS>.json`` (UTC).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from loguru import logger

from evalrunner_core.domain.exceptions import ReportError
from evalrunner_core.domain.models import EvalResult

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"


@dataclass(frozen=True)
class RunSummary:
    """Pass/fail counts for a finished run."""

    total_cases: int
    passed: int
    failed: int

    @property
    def skipped(self) -> int:
        return self.total_cases - self.passed - self.failed

    def line(self) -> str:
        return f"✅ Passed: {self.passed} | ❌ Failed: {self.failed} | ⏭ Skipped: {self.skipped}"


def summarize(results: Sequence[EvalResult], total_cases: int | None = None) -> RunSummary:
    """Count passes and failures; ``total_cases`` lets skipped cases be derived."""
    passed = sum(1 for r in results if r.passed)
    failed = len(results) - passed
    return RunSummary(
        total_cases=len(results) if total_cases is None else total_cases,
        passed=passed,
        failed=failed,
    )


def report_filename(now: datetime | None = None) -> str:
    """Report file name for a run finishing at ``now`` (UTC)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"eval_results_{now.strftime(TIMESTAMP_FORMAT)}.json"


def write_results(
    results: Sequence[EvalResult],
    output_dir: str | Path,
    now: datetime | None = None,
) -> Path:
    """
    Write the results report.

    Args:
        results: Results in run order.
        output_dir: Directory for the report; created if missing.
        now: Timestamp for the file name (defaults to the current UTC time).

    Returns:
        Path of the written report.

    Raises:
        ReportError: If the report cannot be written.
    """
    output_dir = Path(output_dir)
    output_path = output_dir / report_filename(now)

    payload = [result.to_record() for result in results]

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Could not write results to {output_path}: {e}") from e

    logger.info(f"Results saved to {output_path}")
    return output_path
