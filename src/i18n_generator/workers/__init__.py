"""Isolated worker processes for large translation documents."""

from .pool import DEFAULT_WORKER_THRESHOLD_KB, WorkerPool, default_max_workers
from .worker import extract_file, process_file_task

__all__ = [
    "DEFAULT_WORKER_THRESHOLD_KB",
    "WorkerPool",
    "default_max_workers",
    "extract_file",
    "process_file_task",
]
