"""
Concurrent persistence of extraction results.

Every result of a processing wave is written by an independent task; the
call settles only once all writes have finished, and each failure is kept
with its destination so partial success can be told apart from success.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
import sys

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from ..extraction.types import ExtractedDocument, ExtractionResult
from ..utils.core.exceptions import WriteError

logger = logging.getLogger(__name__)


def serialize_document(content: ExtractedDocument, indent: int | None = 2) -> str:
    """Serialise a reshaped document as UTF-8 friendly, indented JSON."""
    return json.dumps(content, ensure_ascii=False, indent=indent)


@dataclass(frozen=True)
class WriteFailure:
    """An output that could not be written."""

    destination: Path
    language: str
    source: Path
    message: str

    @override
    def __str__(self) -> str:
        return f"{self.destination} ({self.language}, from {self.source.name}): {self.message}"


@dataclass
class WriteReport:
    """Outcome of one ``BatchWriter.write_all`` call."""

    written: list[Path] = field(default_factory=list)
    failed: list[WriteFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.written) + len(self.failed)

    @property
    def success(self) -> bool:
        """True when every output was written."""
        return not self.failed

    @property
    def partial(self) -> bool:
        """True when some, but not all, outputs were written."""
        return bool(self.failed) and bool(self.written)

    @override
    def __str__(self) -> str:
        return f"Write Results: {len(self.written)} written, {len(self.failed)} failed"


class BatchWriter:
    """Writes extraction results to ``output_dir/<language>/<file name>``."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent: int | None = indent

    def _write_sync(self, result: ExtractionResult) -> Path:
        destination = result.destination
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            _ = destination.write_text(
                serialize_document(result.content, self.indent), encoding="utf-8"
            )
        except OSError as e:
            raise WriteError(
                f"Failed to write {destination}: {e}",
                destination=str(destination),
                language=result.language,
                source=str(result.source),
            ) from e
        return destination

    async def write_one(self, result: ExtractionResult) -> Path:
        """
        Write a single result.

        Raises:
            WriteError: If the directory or file cannot be written
        """
        return await asyncio.to_thread(self._write_sync, result)

    async def write_all(self, results: Sequence[ExtractionResult]) -> WriteReport:
        """
        Write all results concurrently.

        Args:
            results: Extraction results with unique destinations

        Returns:
            WriteReport listing written paths and failures
        """
        report = WriteReport()
        if not results:
            return report

        outcomes = await asyncio.gather(
            *(self.write_one(result) for result in results), return_exceptions=True
        )

        for result, outcome in zip(results, outcomes):
            if isinstance(outcome, Path):
                report.written.append(outcome)
                continue
            if not isinstance(outcome, Exception):
                raise outcome

            failure = WriteFailure(
                destination=result.destination,
                language=result.language,
                source=result.source,
                message=outcome.message if isinstance(outcome, WriteError) else str(outcome),
            )
            logger.error(f"Write failed: {failure}")
            report.failed.append(failure)

        logger.debug(str(report))
        return report
