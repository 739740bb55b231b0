#!/usr/bin/env python3
"""
Benchmark the generator on a large synthetic translation document.

A nested multi-language document is generated in a temporary directory and
the pipeline is run twice, once with worker processes and once inline, so
the two modes can be compared on duration and peak memory.

Usage Examples:
    Default benchmark (about 10,000 leaves, depth 5):
        python scripts/benchmark.py

    Larger document with more files:
        python scripts/benchmark.py --keys 50000 --files 4

    Keep the generated input for inspection:
        python scripts/benchmark.py --work-dir /tmp/i18n-bench
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
import tempfile
import time
import tracemalloc
from dataclasses import dataclass
from pathlib import Path

from i18n_generator.config.schema import GeneratorConfig
from i18n_generator.pipeline.orchestrator import PipelineOrchestrator

BENCHMARK_LANGUAGES: tuple[str, ...] = ("vi", "en", "ja", "ko", "zh")

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the script.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def generate_nested_document(
    num_keys: int = 10_000,
    depth: int = 5,
    languages: tuple[str, ...] = BENCHMARK_LANGUAGES,
    seed: int | None = None,
) -> dict[str, object]:
    """
    Build a nested translation document of roughly ``num_keys`` leaves.

    Args:
        num_keys: Approximate number of leaves
        depth: Number of branch levels above the leaves
        languages: Language codes present in every leaf
        seed: Random seed for reproducible key names

    Returns:
        The generated document
    """
    rng = random.Random(seed)
    document: dict[str, object] = {}
    stack: list[tuple[dict[str, object], int, int]] = [(document, depth, num_keys)]

    while stack:
        target, level, keys_remaining = stack.pop()
        child_count = min(10, max(1, -(-keys_remaining // (level * 2))))

        for index in range(child_count):
            key = f"key_{level}_{index}_{rng.randrange(36**6):06x}"
            if level <= 1 or keys_remaining <= child_count:
                target[key] = {
                    code: f"{code} text {rng.random():.6f}" for code in languages
                }
            else:
                child: dict[str, object] = {}
                target[key] = child
                stack.append((child, level - 1, keys_remaining // child_count))

    return document


def write_input_files(
    input_dir: Path, document: dict[str, object], file_count: int
) -> list[Path]:
    """Write ``file_count`` copies of ``document`` and return their paths."""
    input_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for index in range(file_count):
        path = input_dir / f"translations_{index}.json"
        _ = path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        paths.append(path)
    return paths


@dataclass(frozen=True)
class BenchmarkResult:
    """Measurements for one pipeline run."""

    name: str
    duration: float
    peak_memory_mb: float
    outputs_written: int


async def run_benchmark(name: str, config: GeneratorConfig) -> BenchmarkResult:
    """Run the pipeline once and measure duration and peak traced memory."""
    logger.info("=" * 60)
    logger.info(f"Running: {name}")
    logger.info("=" * 60)

    tracemalloc.start()
    start_time = time.perf_counter()
    try:
        summary = await PipelineOrchestrator(config).run()
    finally:
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    duration = time.perf_counter() - start_time

    result = BenchmarkResult(
        name=name,
        duration=duration,
        peak_memory_mb=peak / 1024 / 1024,
        outputs_written=summary.outputs_written,
    )
    logger.info(f"Results for {name}:")
    logger.info(f"   Duration: {result.duration:.2f}s")
    logger.info(f"   Peak memory: {result.peak_memory_mb:.2f} MB")
    return result


def parse_arguments(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Benchmark worker and inline translation generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _ = parser.add_argument("--keys", type=int, default=10_000, help="Approximate leaves per file")
    _ = parser.add_argument("--depth", type=int, default=5, help="Branch depth of each file")
    _ = parser.add_argument("--files", type=int, default=2, help="Number of input files")
    _ = parser.add_argument("--seed", type=int, default=None, help="Random seed")
    _ = parser.add_argument(
        "--work-dir", type=Path, default=None, help="Directory for generated files"
    )
    _ = parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(args)


async def run(args: argparse.Namespace) -> list[BenchmarkResult]:
    """Generate the input files and benchmark both processing modes."""
    with tempfile.TemporaryDirectory(prefix="i18n-bench-") as temp_dir:
        work_dir: Path = args.work_dir or Path(temp_dir)
        input_dir = work_dir / "input"

        document = generate_nested_document(args.keys, args.depth, seed=args.seed)
        paths = write_input_files(input_dir, document, args.files)
        size_kb = sum(path.stat().st_size for path in paths) / 1024
        logger.info(f"Generated {len(paths)} file(s), {size_kb:.2f} KB in total")

        results: list[BenchmarkResult] = []
        for name, use_workers in (("workers", True), ("inline", False)):
            config = GeneratorConfig(
                languages=list(BENCHMARK_LANGUAGES),
                input_dir=input_dir,
                output_dir=work_dir / f"output_{name}",
                use_workers=use_workers,
            )
            results.append(await run_benchmark(name, config))
        return results


def main() -> int:
    """
    Main entry point for the benchmark script.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments()
    setup_logging(args.verbose)

    try:
        results = asyncio.run(run(args))
    except Exception as e:
        logger.exception(f"Benchmark failed: {e}")
        return 1

    fastest = min(results, key=lambda result: result.duration)
    logger.info(f"Fastest mode: {fastest.name} ({fastest.duration:.2f}s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
