"""
Pipeline orchestration for translation generation.

The orchestrator discovers input documents, routes each one either to the
inline path or to the worker pool, collects the per-language results and
hands them to the batch writer in a single wave.

State machine::

    IDLE -> DISCOVERING -> DISPATCHING -> COLLECTING -> WRITING -> DONE
    (any non-idle state) -> FAILED
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final
import sys

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from ..config.schema import GeneratorConfig
from ..extraction.types import ExtractionResult, FileFailure, LanguageSet, ProcessingTask
from ..output.batch_writer import BatchWriter, WriteFailure
from ..utils.core.exceptions import ConfigurationError, GeneratorError
from ..workers.pool import WorkerPool
from ..workers.worker import extract_file

logger = logging.getLogger(__name__)

INLINE_CONCURRENCY: Final[int] = 4
DOCUMENT_SUFFIX: Final[str] = ".json"


class PipelineState(Enum):
    """Lifecycle states of one pipeline run."""

    IDLE = "idle"
    DISCOVERING = "discovering"
    DISPATCHING = "dispatching"
    COLLECTING = "collecting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineSummary:
    """Result of a pipeline run."""

    files_discovered: int = 0
    files_processed: int = 0
    outputs_written: int = 0
    failures: list[FileFailure] = field(default_factory=list)
    write_failures: list[WriteFailure] = field(default_factory=list)
    duration: float = 0.0
    skipped: bool = False

    @property
    def success(self) -> bool:
        """True when no file and no output failed."""
        return not self.failures and not self.write_failures

    @property
    def throughput(self) -> float:
        """Outputs written per second."""
        if self.duration <= 0:
            return float(self.outputs_written)
        return self.outputs_written / self.duration

    @override
    def __str__(self) -> str:
        return (
            f"Processed {self.files_processed}/{self.files_discovered} files, "
            f"{self.outputs_written} outputs written in {self.duration:.2f}s "
            f"({self.throughput:.2f} outputs/sec), "
            f"{len(self.failures)} file failure(s), "
            f"{len(self.write_failures)} write failure(s)"
        )


@dataclass
class _FileOutcome:
    file: Path
    results: list[ExtractionResult] = field(default_factory=list)
    failure: FileFailure | None = None


def discover_input_files(input_dir: Path) -> list[Path]:
    """
    List the JSON documents directly inside ``input_dir``.

    Returns:
        Document paths sorted by name

    Raises:
        ConfigurationError: If ``input_dir`` does not exist or is not a directory
    """
    if not input_dir.is_dir():
        raise ConfigurationError(
            f"Input directory not found: {input_dir}",
            context={"input_dir": str(input_dir)},
        )

    return sorted(
        path
        for path in input_dir.iterdir()
        if path.suffix == DOCUMENT_SUFFIX and path.is_file()
    )


class PipelineOrchestrator:
    """
    Runs discovery, dispatch, collection and writing for one configuration.

    Args:
        config: Validated generator configuration
        enabled: Whether the run should do anything; decided by the caller
        worker_pool: Pool used for large files (created on demand if omitted)
        writer: Output writer (created from ``config`` if omitted)
    """

    def __init__(
        self,
        config: GeneratorConfig,
        enabled: bool = True,
        worker_pool: WorkerPool | None = None,
        writer: BatchWriter | None = None,
    ) -> None:
        self.config: GeneratorConfig = config
        self.enabled: bool = enabled
        self.language_set: LanguageSet = LanguageSet(config.languages)
        self.writer: BatchWriter = writer or BatchWriter(indent=config.indent)
        self.state: PipelineState = PipelineState.IDLE
        self.inline_count: int = 0
        self._worker_pool: WorkerPool | None = worker_pool
        self._owns_pool: bool = worker_pool is None

    @property
    def concurrency(self) -> int:
        """Maximum number of files in flight at once."""
        return self.config.max_workers if self.config.use_workers else INLINE_CONCURRENCY

    @property
    def worker_pool(self) -> WorkerPool:
        if self._worker_pool is None:
            self._worker_pool = WorkerPool(
                max_workers=self.config.max_workers,
                threshold_kb=self.config.worker_threshold_kb,
            )
        return self._worker_pool

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> PipelineSummary:
        """
        Execute the full pipeline.

        Returns:
            PipelineSummary describing what was processed and written

        Raises:
            ConfigurationError: If the input directory is missing
        """
        if not self.enabled:
            logger.debug("Generator disabled for this invocation, skipping run")
            return PipelineSummary(skipped=True)

        start_time = time.perf_counter()
        summary = PipelineSummary()

        try:
            self._transition(PipelineState.DISCOVERING)
            input_files = discover_input_files(self.config.input_dir)
            summary.files_discovered = len(input_files)

            if not input_files:
                logger.warning(f"No JSON files found in {self.config.input_dir}")
            else:
                self._log_banner(len(input_files))

                self._transition(PipelineState.DISPATCHING)
                outcomes = await self._dispatch_all(input_files)

                self._transition(PipelineState.COLLECTING)
                results: list[ExtractionResult] = []
                for outcome in outcomes:
                    if outcome.failure is not None:
                        summary.failures.append(outcome.failure)
                    else:
                        summary.files_processed += 1
                        results.extend(outcome.results)

                self._transition(PipelineState.WRITING)
                report = await self.writer.write_all(results)
                summary.outputs_written = len(report.written)
                summary.write_failures = report.failed

            summary.duration = time.perf_counter() - start_time
            self._transition(PipelineState.DONE)
        except Exception:
            self._transition(PipelineState.FAILED)
            raise
        finally:
            if self._owns_pool and self._worker_pool is not None:
                await self._worker_pool.shutdown()
                self._worker_pool = None

        self._log_summary(summary)
        return summary

    async def _dispatch_all(self, input_files: list[Path]) -> list[_FileOutcome]:
        semaphore = asyncio.Semaphore(self.concurrency)
        completed = 0
        total = len(input_files)

        async def bounded(file_path: Path) -> _FileOutcome:
            nonlocal completed
            async with semaphore:
                outcome = await self._process_file(file_path)
            completed += 1
            logger.info(f"Processed {completed}/{total} files")
            return outcome

        return list(await asyncio.gather(*(bounded(path) for path in input_files)))

    async def _process_file(self, file_path: Path) -> _FileOutcome:
        task = ProcessingTask(
            file_path=file_path,
            output_dir=self.config.output_dir,
            languages=tuple(self.config.languages),
            chunk_size=self.config.chunk_size,
            use_streaming=self.config.use_streaming,
        )

        try:
            if self.config.use_workers and self.worker_pool.should_use_worker(file_path):
                results = await self.worker_pool.submit(task)
            else:
                self.inline_count += 1
                results = await extract_file(task, self.language_set)
        except Exception as e:
            message = e.message if isinstance(e, GeneratorError) else str(e)
            failure = FileFailure(file=file_path, error_type=type(e).__name__, message=message)
            logger.error(f"Failed to process {file_path}: {message}")
            return _FileOutcome(file=file_path, failure=failure)

        return _FileOutcome(file=file_path, results=results)

    def _log_banner(self, file_count: int) -> None:
        workers = str(self.config.max_workers) if self.config.use_workers else "disabled"
        logger.info(
            f"Processing {file_count} files with {len(self.language_set)} languages..."
        )
        logger.info(f"Workers: {workers}")
        logger.info(f"Chunk size: {self.config.chunk_size}")
        logger.info(f"Streaming: {'enabled' if self.config.use_streaming else 'disabled'}")

    @staticmethod
    def _log_summary(summary: PipelineSummary) -> None:
        logger.info(str(summary))

        if summary.failures:
            logger.error("Failed files:")
            for failure in summary.failures:
                logger.error(f"  {failure}")

        if summary.write_failures:
            logger.error("Failed outputs:")
            for write_failure in summary.write_failures:
                logger.error(f"  {write_failure}")
