"""
Reading and parsing of input translation documents.

File reads run in a worker thread via ``asyncio.to_thread()`` so the event
loop stays free while large documents are loaded.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Final

from ..extraction.types import TranslationDocument
from ..utils.core.exceptions import ParseError

logger = logging.getLogger(__name__)

STREAM_BLOCK_SIZE: Final[int] = 64 * 1024


def _read_streaming(path: Path) -> str:
    """Read a text file block by block."""
    parts: list[str] = []
    with path.open("r", encoding="utf-8-sig") as f:
        while block := f.read(STREAM_BLOCK_SIZE):
            parts.append(block)
    return "".join(parts)


def _read_whole(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


def parse_document(text: str, path: Path | str) -> TranslationDocument:
    """
    Parse JSON text into a translation document.

    Args:
        text: Raw JSON text
        path: Source path, used for error context

    Returns:
        The parsed top-level JSON object

    Raises:
        ParseError: If the text cannot be decoded as a JSON object
    """
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {path}: {e}", file=str(path)) from e
    except (ValueError, RecursionError) as e:
        # Too deep for the decoder, or an integer literal over the digit limit
        raise ParseError(f"Could not decode {path}: {e}", file=str(path)) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object at the top level of {path}, got {type(data).__name__}",
            file=str(path),
        )
    return data  # pyright: ignore[reportUnknownVariableType]


async def read_document(path: Path, use_streaming: bool = True) -> TranslationDocument:
    """
    Read and parse one translation document.

    Args:
        path: Path to the JSON document
        use_streaming: Read in 64 KiB blocks instead of all at once

    Returns:
        The parsed document

    Raises:
        ParseError: If the file is not valid UTF-8 JSON object text
        OSError: If the file cannot be read
    """
    reader = _read_streaming if use_streaming else _read_whole
    try:
        text = await asyncio.to_thread(reader, path)
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}", file=str(path)) from e

    logger.debug(f"Read {len(text)} characters from {path}")
    return parse_document(text, path)
