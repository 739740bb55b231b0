"""
Cooperative, chunked extraction.

A document's top-level entries are split into groups of at most
``chunk_size`` entries. Each group is extracted synchronously and control is
handed back to the event loop between groups, so no single stretch of work
exceeds one chunk regardless of document size. Chunking never changes the
result: top-level keys are disjoint, so merging partial results is a union.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator, Mapping
from itertools import islice

from .tree_extractor import extract_languages
from .types import (
    DEFAULT_CHUNK_SIZE,
    ExtractedDocument,
    LanguageSet,
    TranslationDocument,
)

logger = logging.getLogger(__name__)


def iter_chunks(
    document: Mapping[str, object], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[TranslationDocument]:
    """
    Yield consecutive groups of at most ``chunk_size`` top-level entries.

    Raises:
        ValueError: If ``chunk_size`` is less than 1
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}")

    entries = iter(document.items())
    while chunk := dict(islice(entries, chunk_size)):
        yield chunk


async def process_languages_in_chunks(
    document: Mapping[str, object],
    languages: Iterable[str],
    language_set: LanguageSet | Iterable[str] | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> dict[str, ExtractedDocument]:
    """
    Extract every requested language from one parsed snapshot, chunk by chunk.

    Args:
        document: Parsed translation document
        languages: Language codes to produce output for
        language_set: Codes used to recognise leaves (defaults to ``languages``)
        chunk_size: Maximum number of top-level entries per synchronous step

    Returns:
        Mapping of language code to its reshaped document
    """
    requested = tuple(dict.fromkeys(languages))
    results: dict[str, ExtractedDocument] = {code: {} for code in requested}

    chunk_count = 0
    for chunk in iter_chunks(document, chunk_size):
        if chunk_count:
            await asyncio.sleep(0)

        partial = extract_languages(chunk, requested, language_set)
        for code, extracted in partial.items():
            results[code].update(extracted)
        chunk_count += 1

    logger.debug(
        f"Extracted {len(requested)} language(s) from {len(document)} top-level "
        + f"keys in {chunk_count} chunk(s)"
    )
    return results


async def process_in_chunks(
    document: Mapping[str, object],
    language: str,
    language_set: LanguageSet | Iterable[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ExtractedDocument:
    """Chunked equivalent of ``extract_translations`` for a single language."""
    results = await process_languages_in_chunks(
        document, (language,), language_set, chunk_size
    )
    return results[language]
