"""CLI entry point: analyze lyrics once and save the result."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
import time
from datetime import datetime
from pathlib import Path

from lyric_assistant.config import load_settings
from lyric_assistant.models.analysis import FEMALE, MALE, AnalysisRequest
from lyric_assistant.pipeline import build_pipeline

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Analyze song lyrics, synthesize them in a matching voice style and store the result."
    )
    parser.add_argument(
        "lyrics",
        nargs="?",
        default=None,
        help="Lyrics to analyze (a placeholder line is used when omitted).",
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Read lyrics from a UTF-8 text file instead.",
    )
    parser.add_argument(
        "--gender", "-g",
        choices=[MALE, FEMALE, "RANDOM"],
        default=FEMALE,
        help="Voice gender (default: FEMALE). RANDOM picks one locally.",
    )
    parser.add_argument(
        "--model", "-m",
        type=str,
        default=None,
        help="LLM model ID (default: LLM_MODEL env or gemini-2.5-flash).",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use canned analysis data instead of calling the LLM.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also log pipeline steps to stderr (they always go to execution.log).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log the full prompt, model configuration and raw model output.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (default: outputs/YYYY-MM-DD/HH-MM-SS).",
    )
    return parser.parse_args()


def resolve_gender(gender: str) -> str:
    """RANDOM is resolved here, before the request, never by the pipeline."""
    if gender == "RANDOM":
        return random.choice([MALE, FEMALE])
    return gender


def run_dir_for(custom_dir: str | None, now: datetime | None = None) -> Path:
    """Where a run's result.json, params.json and execution.log go.

    Runs without ``--output-dir`` land in ``outputs/<date>/<time>``.
    """
    if custom_dir:
        return Path(custom_dir)
    now = now or datetime.now()
    return Path("outputs", f"{now:%Y-%m-%d}", f"{now:%H-%M-%S}")


def log_levels(verbose: bool, debug: bool) -> tuple[int, int]:
    """(stderr level, execution.log level).

    stdout carries the JSON result, so stderr stays at warnings unless asked
    for more. The execution log always keeps the pipeline steps.
    """
    if debug:
        return logging.DEBUG, logging.DEBUG
    if verbose:
        return logging.INFO, logging.INFO
    return logging.WARNING, logging.INFO


def start_run_logging(run_dir: Path, verbose: bool, debug: bool) -> Path:
    run_dir.mkdir(parents=True, exist_ok=True)
    log_file = run_dir / "execution.log"
    stderr_level, file_level = log_levels(verbose, debug)

    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(min(stderr_level, file_level))
    for handler, level in (
        (logging.StreamHandler(sys.stderr), stderr_level),
        (logging.FileHandler(log_file, encoding="utf-8"), file_level),
    ):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return log_file


async def main() -> None:
    args = parse_args()

    output_dir = run_dir_for(args.output_dir)
    start_run_logging(output_dir, args.verbose, args.debug)

    lyrics = args.lyrics
    if args.file:
        lyrics = Path(args.file).read_text(encoding="utf-8")
    gender = resolve_gender(args.gender)

    settings = load_settings()
    if args.model:
        settings.llm_model = args.model
    if args.mock:
        settings.use_mock_analysis = True

    start_time = time.time()
    start_datetime = datetime.now().isoformat()

    log.info("=" * 80)
    log.info("Starting lyric analysis")
    log.info(f"  - Timestamp: {start_datetime}")
    log.info(f"  - Lyrics: {'<provided>' if lyrics else '<placeholder>'}")
    log.info(f"  - Gender: {gender} (requested {args.gender})")
    log.info(f"  - Model: {'mock' if settings.use_mock_analysis else settings.llm_model}")
    log.info(f"  - Output directory: {output_dir}")
    log.info("=" * 80)

    pipeline = build_pipeline(settings, debug=args.debug)
    analysis = await pipeline.run(AnalysisRequest(lyrics=lyrics, gender=gender))
    payload = analysis.to_payload()

    elapsed_time = time.time() - start_time
    log.info(f"Analysis completed successfully in {elapsed_time:.2f}s")

    output_file = output_dir / "result.json"
    output_file.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    log.info(f"Result saved to {output_file}")

    params_file = output_dir / "params.json"
    params = {
        "timestamp": start_datetime,
        "lyrics_file": args.file,
        "gender": gender,
        "requested_gender": args.gender,
        "model": settings.llm_model,
        "mock": settings.use_mock_analysis,
        "runtime_seconds": elapsed_time,
    }
    params_file.write_text(json.dumps(params, indent=2))
    log.info(f"Parameters saved to {params_file}")

    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
