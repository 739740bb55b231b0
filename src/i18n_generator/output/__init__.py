"""Input document reading and batched output writing."""

from .batch_writer import BatchWriter, WriteFailure, WriteReport, serialize_document
from .document_reader import parse_document, read_document

__all__ = [
    "BatchWriter",
    "WriteFailure",
    "WriteReport",
    "parse_document",
    "read_document",
    "serialize_document",
]
