"""
Bounded pool of isolated worker processes.

Large files are handed to a ``ProcessPoolExecutor`` so each worker owns a
private copy of the parsed document. Communication is by message passing
only: a task message goes in and a result-or-failure message comes out.
Submissions beyond the pool size wait in the executor's FIFO queue.
"""

from __future__ import annotations

import asyncio
import logging
import multiprocessing
import os
from collections.abc import Iterable
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from multiprocessing.context import BaseContext
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from ..extraction.chunk_scheduler import DEFAULT_CHUNK_SIZE
from ..extraction.types import ExtractionResult, ProcessingTask
from ..utils.core.exceptions import (
    ErrorCategory,
    GeneratorError,
    ParseError,
    WorkerCrashError,
)
from .worker import process_file_task

logger = logging.getLogger(__name__)

DEFAULT_WORKER_THRESHOLD_KB: Final[int] = 100


def default_max_workers() -> int:
    """Available CPUs minus one, never fewer than two."""
    return max(2, (os.cpu_count() or 1) - 1)


class WorkerPool:
    """
    Routes large files to worker processes.

    The executor is created lazily on the first dispatch, so runs that only
    see small files never start a process.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        threshold_kb: float = DEFAULT_WORKER_THRESHOLD_KB,
        mp_context: BaseContext | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.max_workers: int = max_workers or default_max_workers()
        self.threshold_bytes: int = int(threshold_kb * 1024)
        self._mp_context: BaseContext = mp_context or multiprocessing.get_context("spawn")
        self._executor: ProcessPoolExecutor | None = None
        self.dispatch_count: int = 0

    def should_use_worker(self, file_path: Path) -> bool:
        """True when the file is at or above the size threshold."""
        return file_path.stat().st_size >= self.threshold_bytes

    def _get_executor(self) -> ProcessPoolExecutor:
        if self._executor is None:
            logger.debug(f"Starting worker pool with {self.max_workers} process(es)")
            self._executor = ProcessPoolExecutor(
                max_workers=self.max_workers, mp_context=self._mp_context
            )
        return self._executor

    def _discard_executor(self, executor: ProcessPoolExecutor) -> None:
        # Several tasks can observe the same broken pool; replace it once
        if self._executor is executor:
            self._executor = None
            executor.shutdown(wait=False, cancel_futures=True)

    async def submit(self, task: ProcessingTask) -> list[ExtractionResult]:
        """
        Process one file in a worker process.

        Args:
            task: The file to process

        Returns:
            One ExtractionResult per requested language

        Raises:
            ParseError: If the worker reported a malformed document
            WorkerCrashError: If the worker process died
            GeneratorError: For any other failure reported by the worker
        """
        executor = self._get_executor()
        self.dispatch_count += 1
        loop = asyncio.get_running_loop()

        logger.debug(f"Dispatching {task.file_path} to worker pool")
        try:
            reply = await loop.run_in_executor(
                executor, process_file_task, task.to_message()
            )
        except BrokenProcessPool as e:
            self._discard_executor(executor)
            raise WorkerCrashError(
                f"Worker process terminated abruptly while processing {task.file_path}",
                file=str(task.file_path),
            ) from e

        return self._unpack_reply(task, reply)

    async def run_file(
        self,
        file_path: Path,
        languages: Iterable[str],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        output_dir: Path,
        use_streaming: bool = True,
    ) -> list[ExtractionResult]:
        """Build a task for ``file_path`` and process it in a worker."""
        task = ProcessingTask(
            file_path=file_path,
            output_dir=output_dir,
            languages=tuple(languages),
            chunk_size=chunk_size,
            use_streaming=use_streaming,
        )
        return await self.submit(task)

    @staticmethod
    def _unpack_reply(
        task: ProcessingTask, reply: dict[str, object]
    ) -> list[ExtractionResult]:
        if reply.get("ok"):
            raw_results = reply.get("results", [])
            if not isinstance(raw_results, list):
                raise WorkerCrashError(
                    f"Worker returned a malformed reply for {task.file_path}",
                    file=str(task.file_path),
                )
            return [ExtractionResult.from_message(item) for item in raw_results]  # pyright: ignore[reportUnknownArgumentType,reportUnknownVariableType]

        error_type = str(reply.get("error_type", "Exception"))
        error = str(reply.get("error", "unknown error"))
        logger.debug(f"Worker reported {error_type} for {task.file_path}: {error}")

        if error_type == "ParseError":
            raise ParseError(error, file=str(task.file_path))
        raise GeneratorError(
            f"{error_type}: {error}",
            category=ErrorCategory.WORKER,
            context={"file": str(task.file_path), "error_type": error_type},
        )

    async def shutdown(self) -> None:
        """Wait for running tasks and stop all worker processes."""
        executor, self._executor = self._executor, None
        if executor is not None:
            logger.debug("Shutting down worker pool")
            await asyncio.to_thread(executor.shutdown, True)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.shutdown()
