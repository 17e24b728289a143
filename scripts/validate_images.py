#!/usr/bin/env python3
"""
Batch Image Validation Script
=============================

Standalone script to run the validation engine over photos on disk.

Useful for retuning thresholds: run it over a folder of known-good and
known-bad card photos and compare the verdicts and metrics.

This script:
    1. Validates every given file (directories are expanded to their
       JPEG/PNG files)
    2. Logs one line per file with the verdict
    3. Reports a summary by failure kind
    4. Exits non-zero if any image was rejected

Usage:
    python scripts/validate_images.py photos/
    python scripts/validate_images.py card.jpg --min-dimension 150 --json
    python scripts/validate_images.py photos/ --workers 4
"""

import argparse
import json
import logging
import os
import sys
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Tuple

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from card_gate.engine import ImageValidator
from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.report import ValidationReport
from card_gate.models.thresholds import ValidationThresholds


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".bmp"}


def collect_paths(inputs: List[str]) -> List[Path]:
    """Expand directories into their image files, sorted by name."""
    paths: List[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            paths.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
            )
        else:
            paths.append(path)
    return paths


def validate_file(validator: ImageValidator, path: Path) -> Tuple[Path, ValidationReport]:
    """
    Read one file and run the validator on its bytes.

    A file that cannot be read is reported as UNREADABLE_IMAGE so the
    rest of the batch still runs.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return path, ValidationReport(
            outcome=ValidationOutcome.failed(FailureKind.UNREADABLE_IMAGE)
        )
    return path, validator.inspect(data)


def run_batch(
    paths: List[Path],
    thresholds: ValidationThresholds,
    workers: int,
    as_json: bool,
) -> Counter:
    """
    Validate all files.

    Args:
        paths: Image files to validate
        thresholds: Threshold set
        workers: Number of worker threads
        as_json: Print one JSON report per file to stdout

    Returns:
        Counter of verdicts ("VALID" or the failure kind)
    """
    validator = ImageValidator(thresholds)
    verdicts: Counter = Counter()

    start_time = time.time()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for path, report in pool.map(lambda p: validate_file(validator, p), paths):
            outcome = report.outcome
            verdict = "VALID" if outcome.valid else outcome.reason.value
            verdicts[verdict] += 1

            if as_json:
                print(json.dumps({"path": str(path), **report.model_dump(mode="json")}))
            elif outcome.valid:
                logger.info(f"✅ {path}")
            else:
                logger.info(f"❌ {path}: {verdict} - {outcome.message}")

    elapsed = time.time() - start_time

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Images: {len(paths)} in {elapsed:.2f}s")
    for verdict, count in verdicts.most_common():
        logger.info(f"  {verdict}: {count}")
    logger.info("=" * 60)

    return verdicts


def main():
    parser = argparse.ArgumentParser(
        description="Validate trading-card photos with the CardGate engine"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Image files or directories",
    )
    parser.add_argument(
        "--min-dimension",
        type=int,
        default=None,
        help="Override the minimum width/height (default: 200)",
    )
    parser.add_argument(
        "--max-analysis-size",
        type=int,
        default=None,
        help="Override the working-copy size cap (default: 300)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker threads (default: 1)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON report per image",
    )

    args = parser.parse_args()

    overrides = {}
    if args.min_dimension is not None:
        overrides["min_dimension"] = args.min_dimension
    if args.max_analysis_size is not None:
        overrides["max_analysis_size"] = args.max_analysis_size

    paths = collect_paths(args.paths)
    if not paths:
        logger.error("No images found")
        sys.exit(2)

    verdicts = run_batch(
        paths=paths,
        thresholds=ValidationThresholds(**overrides),
        workers=max(1, args.workers),
        as_json=args.json,
    )

    # Exit with appropriate code
    sys.exit(0 if set(verdicts) <= {"VALID"} else 1)


if __name__ == "__main__":
    main()
