"""
Per-file extraction, shared by the inline path and worker processes.

``process_file_task`` is the entry point executed inside an isolated worker
process. It receives a plain task message and always answers with a plain
reply message; failures are reported in the reply rather than raised, so a
malformed document never takes the process down.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from ..extraction.chunk_scheduler import process_languages_in_chunks
from ..extraction.types import ExtractionResult, LanguageSet, ProcessingTask
from ..output.document_reader import read_document
from ..utils.core.exceptions import GeneratorError

logger = logging.getLogger(__name__)


async def extract_file(
    task: ProcessingTask, language_set: LanguageSet | None = None
) -> list[ExtractionResult]:
    """
    Read one document and extract every requested language from it.

    All languages are computed from the same parsed snapshot.

    Args:
        task: The file to process and where its outputs go
        language_set: Codes used to recognise leaves (defaults to the task's languages)

    Returns:
        One ExtractionResult per requested language, in request order

    Raises:
        ParseError: If the document is not a valid JSON object
        OSError: If the document cannot be read
    """
    document = await read_document(task.file_path, task.use_streaming)
    extracted = await process_languages_in_chunks(
        document,
        task.languages,
        language_set if language_set is not None else task.languages,
        task.chunk_size,
    )

    return [
        ExtractionResult(
            language=code,
            source=task.file_path,
            destination=task.destination_for(code),
            content=content,
        )
        for code, content in extracted.items()
    ]


def process_file_task(message: Mapping[str, object]) -> dict[str, object]:
    """
    Worker process entry point.

    Args:
        message: A ``ProcessingTask.to_message()`` payload

    Returns:
        ``{"ok": True, "file": ..., "results": [...]}`` on success, or
        ``{"ok": False, "file": ..., "error_type": ..., "error": ...}``
    """
    file_path = str(message.get("file_path", "<unknown>"))

    try:
        task = ProcessingTask.from_message(message)
        results = asyncio.run(extract_file(task))
    except GeneratorError as e:
        return {
            "ok": False,
            "file": file_path,
            "error_type": type(e).__name__,
            "error": e.message,
        }
    except Exception as e:  # noqa: BLE001
        return {
            "ok": False,
            "file": file_path,
            "error_type": type(e).__name__,
            "error": str(e),
        }

    return {
        "ok": True,
        "file": file_path,
        "results": [result.to_message() for result in results],
    }
