"""
Tests for the worker pool.

A thread pool stands in for the process pool where only the message flow is
under test; real worker processes are exercised by the integration suite.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from pathlib import Path
import sys
from unittest.mock import patch

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

import pytest

from i18n_generator.extraction.types import ProcessingTask
from i18n_generator.utils.core.exceptions import (
    ErrorCategory,
    GeneratorError,
    ParseError,
    WorkerCrashError,
)
from i18n_generator.workers.pool import WorkerPool, default_max_workers
from tests.utils.file_helpers import write_json


class BrokenExecutor(Executor):
    """Executor whose every submission fails as if a worker process died."""

    def __init__(self) -> None:
        self.shutdown_called: bool = False

    @override
    def submit(self, fn: Callable[..., object], /, *args: object, **kwargs: object) -> Future[object]:
        future: Future[object] = Future()
        future.set_exception(BrokenProcessPool("A process in the process pool was terminated abruptly"))
        return future

    @override
    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.shutdown_called = True


def make_task(file_path: Path, output_dir: Path) -> ProcessingTask:
    return ProcessingTask(file_path=file_path, output_dir=output_dir, languages=("vi", "en"))


class TestDefaultMaxWorkers:
    """Test the default_max_workers function."""

    @pytest.mark.parametrize(
        ("cpu_count", "expected"),
        [(None, 2), (1, 2), (2, 2), (3, 2), (8, 7), (16, 15)],
    )
    def test_cpu_count_minus_one_with_floor_of_two(
        self, cpu_count: int | None, expected: int
    ) -> None:
        with patch("i18n_generator.workers.pool.os.cpu_count", return_value=cpu_count):
            assert default_max_workers() == expected


class TestWorkerPool:
    """Test the WorkerPool class."""

    def test_rejects_invalid_max_workers(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            _ = WorkerPool(max_workers=0)

    def test_threshold_routing(self, tmp_path: Path) -> None:
        pool = WorkerPool(max_workers=2, threshold_kb=1)
        small = tmp_path / "small.json"
        _ = small.write_bytes(b"x" * 1023)
        exact = tmp_path / "exact.json"
        _ = exact.write_bytes(b"x" * 1024)

        assert pool.should_use_worker(small) is False
        assert pool.should_use_worker(exact) is True

    def test_executor_is_created_lazily(self) -> None:
        pool = WorkerPool(max_workers=2)

        assert pool._executor is None  # pyright: ignore[reportPrivateUsage]
        assert pool.dispatch_count == 0

    @pytest.mark.asyncio
    async def test_submit_returns_results(self, tmp_path: Path) -> None:
        source = write_json(tmp_path / "common.json", {"a": {"vi": "X", "en": "Y"}})
        pool = WorkerPool(max_workers=2)
        pool._executor = ThreadPoolExecutor(max_workers=2)  # pyright: ignore[reportPrivateUsage]

        async with pool:
            results = await pool.submit(make_task(source, tmp_path / "out"))

        assert pool.dispatch_count == 1
        assert [result.content for result in results] == [{"a": "X"}, {"a": "Y"}]
        assert results[0].destination == tmp_path / "out" / "vi" / "common.json"
        assert pool._executor is None  # pyright: ignore[reportPrivateUsage]

    @pytest.mark.asyncio
    async def test_run_file_builds_task(self, tmp_path: Path) -> None:
        source = write_json(tmp_path / "common.json", {"g": {"a": {"vi": "X"}}})
        pool = WorkerPool(max_workers=2)
        pool._executor = ThreadPoolExecutor(max_workers=1)  # pyright: ignore[reportPrivateUsage]

        async with pool:
            results = await pool.run_file(
                source, ["vi", "en"], chunk_size=1, output_dir=tmp_path / "out"
            )

        assert {result.language: result.content for result in results} == {
            "vi": {"g": {"a": "X"}},
            "en": {"g": {}},
        }

    @pytest.mark.asyncio
    async def test_parse_failure_becomes_parse_error(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.json"
        _ = source.write_text("{", encoding="utf-8")
        pool = WorkerPool(max_workers=2)
        pool._executor = ThreadPoolExecutor(max_workers=1)  # pyright: ignore[reportPrivateUsage]

        async with pool:
            with pytest.raises(ParseError) as exc_info:
                _ = await pool.submit(make_task(source, tmp_path / "out"))

        assert exc_info.value.file == str(source)

    @pytest.mark.asyncio
    async def test_other_worker_failure_becomes_generator_error(self, tmp_path: Path) -> None:
        pool = WorkerPool(max_workers=2)
        pool._executor = ThreadPoolExecutor(max_workers=1)  # pyright: ignore[reportPrivateUsage]

        async with pool:
            with pytest.raises(GeneratorError, match="FileNotFoundError") as exc_info:
                _ = await pool.submit(make_task(tmp_path / "missing.json", tmp_path / "out"))

        assert exc_info.value.category is ErrorCategory.WORKER
        assert exc_info.value.context["file"] == str(tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_broken_pool_becomes_worker_crash(self, tmp_path: Path) -> None:
        pool = WorkerPool(max_workers=2)
        broken = BrokenExecutor()
        pool._executor = broken  # pyright: ignore[reportPrivateUsage,reportAttributeAccessIssue]
        source = tmp_path / "large.json"

        with pytest.raises(WorkerCrashError) as exc_info:
            _ = await pool.submit(make_task(source, tmp_path / "out"))

        assert exc_info.value.file == str(source)
        assert exc_info.value.category is ErrorCategory.WORKER
        # The broken executor is discarded so later files get a fresh pool
        assert broken.shutdown_called
        assert pool._executor is None  # pyright: ignore[reportPrivateUsage]

    def test_malformed_ok_reply_is_a_crash(self, tmp_path: Path) -> None:
        task = make_task(tmp_path / "a.json", tmp_path / "out")

        with pytest.raises(WorkerCrashError, match="malformed reply"):
            _ = WorkerPool._unpack_reply(task, {"ok": True, "results": "nope"})  # pyright: ignore[reportPrivateUsage]
