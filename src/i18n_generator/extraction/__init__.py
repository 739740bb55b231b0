"""
Translation tree extraction.

Splits multi-language translation documents into per-language documents,
either in one pass or cooperatively in bounded chunks.
"""

from .chunk_scheduler import (
    DEFAULT_CHUNK_SIZE,
    iter_chunks,
    process_in_chunks,
    process_languages_in_chunks,
)
from .tree_extractor import classify_node, extract_languages, extract_translations
from .types import (
    ExtractedDocument,
    ExtractionResult,
    FileFailure,
    LanguageSet,
    NodeKind,
    ProcessingTask,
    TranslationDocument,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ExtractedDocument",
    "ExtractionResult",
    "FileFailure",
    "LanguageSet",
    "NodeKind",
    "ProcessingTask",
    "TranslationDocument",
    "classify_node",
    "extract_languages",
    "extract_translations",
    "iter_chunks",
    "process_in_chunks",
    "process_languages_in_chunks",
]
