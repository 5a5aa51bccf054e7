"""
Eval set loading.

An eval set is either a JSON array of case objects or a JSONL file with one
case object per line.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from evalrunner_core.domain.exceptions import EvalSetError
from evalrunner_core.domain.models import EvalCase

_CASES = TypeAdapter(list[EvalCase])


def _read_records(path: Path, text: str) -> list:
    if path.suffix == ".jsonl":
        records = []
        for line_no, line in enumerate(text.splitlines(), 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise EvalSetError(f"{path}:{line_no}: invalid JSON: {e.msg}") from e
        return records

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise EvalSetError(f"{path}: invalid JSON at line {e.lineno}: {e.msg}") from e

    if not isinstance(records, list):
        raise EvalSetError(f"{path}: expected a JSON array of eval cases")
    return records


def load_eval_set(path: str | Path) -> list[EvalCase]:
    """
    Load eval cases from ``path``, keeping file order.

    Raises:
        EvalSetError: If the file is missing, unreadable or holds invalid cases.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise EvalSetError(f"Eval set not found: {path}") from e
    except OSError as e:
        raise EvalSetError(f"Could not read eval set {path}: {e}") from e

    records = _read_records(path, text)

    try:
        cases = _CASES.validate_python(records)
    except ValidationError as e:
        raise EvalSetError(f"{path}: invalid eval case(s):\n{e}") from e

    logger.info(f"Loaded {len(cases)} eval case(s) from {path}")
    return cases
