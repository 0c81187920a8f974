"""Lookup CLI Entry Point

Command-line interface for instant answer lookups. Handles argument
parsing, logging configuration, and runs the batch pipeline from topics
(or saved raw payloads) to normalized answers and markdown.

Usage:
    python -m src.run_lookup "Elixir Language" --stdout
    python -m src.run_lookup --topics-file topics.txt --output-dir output
    python -m src.run_lookup --input saved_payloads.json --no-history
"""

import argparse
import logging
import time
from pathlib import Path

from src.instant_answer.loaders import load_topics
from src.instant_answer.pipeline import run_pipeline

LOG_DIR = Path("logs")


def configure_logging() -> None:
    """Configure logging with both console and file output.

    Sets up:
      - Root logger at DEBUG level
      - Console handler at INFO level for user-facing messages
      - File handler at DEBUG level for detailed troubleshooting
      - Reduced verbosity for httpx and httpcore loggers
    """
    LOG_DIR.mkdir(exist_ok=True)
    log_file = LOG_DIR / "lookup.log"

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Clear existing handlers to avoid duplicates if run multiple times
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)


def main(argv=None) -> int:
    """
    CLI entrypoint for instant answer lookups.

    Returns a Unix-style exit code: 0 on success, 1 on failure, 2 when
    there is nothing to look up.
    """
    configure_logging()
    logger = logging.getLogger(__name__)

    parser = argparse.ArgumentParser(
        description="Look up instant answers and render them as markdown"
    )
    parser.add_argument(
        "topics",
        nargs="*",
        help="Topics to look up.",
    )
    parser.add_argument(
        "--topics-file",
        type=Path,
        default=None,
        help="Text file with one topic per line.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON file of saved raw payloads (no lookups are made).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Directory where output files will be written.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Process answers but don't write any files",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Overwrite output files instead of creating timestamped versions",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Also print the written markdown file (ignored with --dry-run)",
    )

    args = parser.parse_args(argv)

    try:
        topics = list(args.topics)
        if args.topics_file is not None:
            topics.extend(load_topics(args.topics_file))

        if not topics and args.input is None:
            logger.error("Nothing to look up: pass topics, --topics-file or --input")
            return 2

        logger.info("=== Starting instant answer lookup ===")
        logger.info("Topics: %s", topics if args.input is None else "(from input)")
        logger.info("Input: %s", args.input)
        logger.info("Output directory: %s", args.output_dir)
        logger.info("Dry_run: %s", args.dry_run)
        logger.info("Keep history: %s", not args.no_history)

        start_time = time.time()

        total, rendered, output_paths = run_pipeline(
            topics=topics,
            input_path=args.input,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
            keep_history=not args.no_history,
        )

        elapsed_time = time.time() - start_time

        logger.info("=" * 70)
        logger.info("Lookup completed successfully in %.2fs", elapsed_time)
        logger.info("  Rendered:   %d/%d answers", rendered, total)
        for name, path in output_paths.items():
            logger.info("  %-12s %s", f"{name}:", path)
        logger.info("=" * 70)

        if args.stdout and "markdown" in output_paths:
            print(output_paths["markdown"].read_text(encoding="utf-8"))

    except Exception as e:
        logger.exception(f"Lookup failed with an unhandled exception: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
