"""
Run an eval set against the configured model and write a results report.

Usage:
    python -m app.scripts.run_evals --dataset Data/evalset.json
    python -m app.scripts.run_evals --threshold 0.75 --provider ollama
"""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from app.evals.dataset import load_eval_set
from app.evals.factory import build_providers, validate_provider_settings
from app.evals.report import summarize, write_results
from evalrunner_core.config import RunConfig, Settings, settings
from evalrunner_core.domain.exceptions import EvalRunnerError
from evalrunner_core.evals.runner import EvalRunner
from evalrunner_core.logging import setup_logging
from evalrunner_core.runtime.context import RunContext


def parse_threshold_override(raw: str | None) -> float | None:
    """Parse ``--threshold``; an unparseable value is ignored."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid --threshold value: {raw!r}")
        return None
    logger.info(f"📏 Overriding similarity threshold: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run an embedding-similarity eval set against a model")
    parser.add_argument("--dataset", default=None, help="Path to eval set (.json array or .jsonl)")
    parser.add_argument("--output-dir", default=None, help="Directory for the results report")
    parser.add_argument("--threshold", default=None, help="Similarity threshold, overrides EVAL_SIMILARITY_THRESHOLD")
    parser.add_argument("--provider", choices=["openai", "ollama"], default=None, help="Chat backend")
    parser.add_argument(
        "--embedding-provider",
        choices=["openai", "ollama", "sentence_transformers"],
        default=None,
        help="Embedding backend (defaults to the chat backend)",
    )
    parser.add_argument("--concurrency", type=int, default=None, help="Cases evaluated at once")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero if any case failed or was skipped",
    )
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command-line overrides on top of the loaded settings."""
    overrides = {}
    if args.provider:
        overrides["EVAL_PROVIDER"] = args.provider
    if args.embedding_provider:
        overrides["EVAL_EMBEDDING_PROVIDER"] = args.embedding_provider
    if args.concurrency is not None:
        overrides["EVAL_CONCURRENCY"] = args.concurrency
    return base.model_copy(update=overrides)


async def run_evals(
    dataset_path: str | Path,
    output_dir: str | Path,
    run_settings: Settings,
    config: RunConfig,
    strict: bool = False,
) -> int:
    """Run the eval set end to end. Returns the process exit code."""
    logger.info("🚀 Starting evaluation run...")

    try:
        validate_provider_settings(run_settings)
        cases = load_eval_set(dataset_path)
    except EvalRunnerError as e:
        logger.error(f"❌ {e}")
        return 1

    context = RunContext.new(provider=run_settings.EVAL_PROVIDER)
    logger.info(
        f"Run {context.run_id} on '{context.provider}': {len(cases)} case(s), threshold {config.threshold}"
    )

    try:
        providers = build_providers(run_settings, context)
    except EvalRunnerError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        runner = EvalRunner(chat=providers.chat, embedder=providers.embedder, config=config)
        results = await runner.run(cases)
    except Exception as e:
        logger.exception(f"Run {context.run_id} aborted: {e}")
        return 1
    finally:
        await providers.aclose()

    try:
        output_path = write_results(results, output_dir)
    except EvalRunnerError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info(f"Run {context.run_id} finished in {context.elapsed_seconds():.1f}s")

    summary = summarize(results, total_cases=len(cases))
    print("-" * 50)
    print(f"📝 Results saved to {output_path}")
    print(summary.line())

    if strict and (summary.failed or summary.skipped):
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or settings.LOG_LEVEL)

    run_settings = resolve_settings(args, settings)
    threshold_override = parse_threshold_override(args.threshold)

    try:
        config = RunConfig.from_settings(run_settings, threshold_override=threshold_override)
    except ValidationError as e:
        logger.error(f"❌ Invalid run configuration:\n{e}")
        return 1

    return asyncio.run(
        run_evals(
            dataset_path=args.dataset or run_settings.EVAL_DATASET_PATH,
            output_dir=args.output_dir or run_settings.EVAL_OUTPUT_DIR,
            run_settings=run_settings,
            config=config,
            strict=args.strict,
        )
    )


if __name__ == "__main__":
    sys.exit(main())
