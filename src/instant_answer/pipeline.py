"""
Batch lookup pipeline

Looks up a list of topics (or loads saved raw payloads), normalizes and
renders every answer, and writes the results to an output directory.

Features:
- Timestamped outputs, or fixed names with keep_history=False
- Dry-run mode that writes nothing
- Step-by-step progress logging
"""

from pathlib import Path
import json
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging
import time
from datetime import datetime

from .client import query
from .loaders import load_raw_answers
from .markdown import to_markdown
from .models import CanonicalModel, answer_to_dict
from .normalizer import normalize


logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n---\n\n"


def collect_payloads(
    topics: Sequence[str],
    fetch: Optional[Callable[[str], Any]] = None,
) -> List[Tuple[str, Any]]:
    """
    Fetch the raw payload for every topic, in order.

    Args:
        topics: Topics to look up
        fetch: Lookup function (defaults to client.query)

    Returns:
        List of (topic, raw payload) pairs

    Raises:
        Whatever `fetch` raises; lookups are not retried.
    """
    fetch = fetch or query
    payloads: List[Tuple[str, Any]] = []

    for idx, topic in enumerate(topics, start=1):
        logger.info("Looking up %d/%d: %r", idx, len(topics), topic)
        payloads.append((topic, fetch(topic)))

    return payloads


def run_pipeline(
    topics: Optional[Sequence[str]] = None,
    input_path: Path | str | None = None,
    output_dir: Path | str = "output",
    dry_run: bool = False,
    keep_history: bool = True,
    fetch: Optional[Callable[[str], Any]] = None,
) -> Tuple[int, int, Dict[str, Path]]:
    """
    Run lookups end to end: collect, normalize, render, save.

    Pipeline Steps:
    1. Collect raw payloads (API lookups, or saved payloads from input_path)
    2. Normalize every payload
    3. Render markdown
    4. Save answers JSON, markdown and run metadata

    Args:
        topics: Topics to look up (ignored when input_path is given)
        input_path: JSON file of saved raw payloads
        output_dir: Directory for all output files
        dry_run: If True, process everything but write no files
        keep_history: If True, timestamp output names; if False, overwrite
        fetch: Lookup function for topics (defaults to client.query)

    Returns:
        Tuple of (total_payloads, rendered_documents, output_paths_dict)

    Raises:
        FileNotFoundError: If input_path doesn't exist
        json.JSONDecodeError: If input file is invalid JSON
        httpx.HTTPError: If a lookup fails
    """
    output_dir = Path(output_dir)
    run_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    job_start = time.time()

    # ========== STEP 1: COLLECT RAW PAYLOADS ==========
    t0 = time.time()
    logger.info("STEP 1/4: Collecting raw payloads")

    try:
        if input_path is not None:
            raw_answers = load_raw_answers(input_path)
            payloads = [(None, raw) for raw in raw_answers]
        else:
            payloads = collect_payloads(list(topics or []), fetch=fetch)
    except FileNotFoundError:
        logger.exception("Input file not found: %s", input_path)
        raise
    except json.JSONDecodeError:
        logger.exception("Invalid JSON in input file: %s", input_path)
        raise
    except Exception:
        logger.exception("Failed to collect raw payloads")
        raise

    total = len(payloads)
    logger.info("✓ Collected %d payloads in %.2fs", total, time.time() - t0)

    # ========== STEP 2: NORMALIZE ==========
    t1 = time.time()
    logger.info("STEP 2/4: Normalizing %d payloads", total)

    answers: List[Tuple[Optional[str], Any]] = []
    unrecognized = 0
    for topic, raw in payloads:
        normalized = normalize(raw)
        if not isinstance(normalized, CanonicalModel):
            unrecognized += 1
            logger.warning(
                "No answer shape matched for topic=%r; keeping payload as-is",
                topic,
            )
        answers.append((topic, normalized))

    logger.info(
        "✓ Normalized %d payloads in %.2fs (unrecognized=%d)",
        len(answers),
        time.time() - t1,
        unrecognized,
    )

    # ========== STEP 3: RENDER ==========
    logger.info("STEP 3/4: Rendering markdown")
    documents = [to_markdown(normalized) for _, normalized in answers]
    rendered = sum(1 for document in documents if document)
    logger.info("✓ Rendered %d/%d documents", rendered, total)

    output_paths: Dict[str, Path] = {}

    if dry_run:
        logger.info("DRY RUN: skipping write of answers and markdown")
        return total, rendered, output_paths

    # ========== STEP 4: SAVE ==========
    logger.info("STEP 4/4: Saving outputs to %s", output_dir)
    suffix = f"_{run_timestamp}" if keep_history else ""
    answers_path = output_dir / f"answers{suffix}.json"
    markdown_path = output_dir / f"answers{suffix}.md"

    try:
        output_dir.mkdir(parents=True, exist_ok=True)

        with answers_path.open("w", encoding="utf-8") as f:
            json.dump(
                [
                    {"topic": topic, "answer": answer_to_dict(normalized)}
                    for topic, normalized in answers
                ],
                f,
                ensure_ascii=False,
                indent=2,
            )
        output_paths["answers"] = answers_path

        with markdown_path.open("w", encoding="utf-8") as f:
            f.write(DOCUMENT_SEPARATOR.join(d for d in documents if d))
        output_paths["markdown"] = markdown_path

        logger.info(
            "✓ Wrote %d answers to %s and %s",
            total,
            answers_path.name,
            markdown_path.name,
        )
    except Exception:
        logger.exception("Failed to save outputs")
        raise

    _save_metadata(output_dir, suffix, {
        "timestamp": run_timestamp,
        "input_file": str(input_path) if input_path is not None else None,
        "topics": [topic for topic, _ in answers if topic is not None],
        "total": total,
        "rendered": rendered,
        "unrecognized": unrecognized,
        "outputs": {k: str(v) for k, v in output_paths.items()},
        "duration_seconds": time.time() - job_start,
    })

    return total, rendered, output_paths


def _save_metadata(output_dir: Path, suffix: str, metadata: Dict[str, Any]) -> None:
    """Save pipeline run metadata."""
    meta_path = output_dir / f"run_metadata{suffix}.json"

    try:
        with meta_path.open("w", encoding="utf-8") as f:
            json.dump(metadata, f, ensure_ascii=False, indent=2)
        logger.info("✓ Saved: %s", meta_path.name)
    except Exception:
        logger.warning("Failed to save metadata (non-fatal)", exc_info=True)
