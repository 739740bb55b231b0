"""
Shared data types for translation extraction.

A translation document is plain parsed JSON: a mapping whose values are
either leaves (language code -> translated string) or branches (key -> nested
mapping). Whether a mapping is a leaf or a branch is decided from its keys
against the configured ``LanguageSet``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final
import sys

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

# Parsed JSON object and the reshaped per-language output.
TranslationDocument = dict[str, object]
ExtractedDocument = dict[str, object]

DEFAULT_CHUNK_SIZE: Final[int] = 1000


class NodeKind(Enum):
    """Classification of a value found under a branch key."""

    LEAF = "leaf"
    BRANCH = "branch"
    SKIP = "skip"


class LanguageSet:
    """Ordered language codes with constant-time membership tests."""

    __slots__: tuple[str, ...] = ("_codes", "_members")

    def __init__(self, codes: Iterable[str]) -> None:
        ordered: list[str] = []
        for code in codes:
            if code not in ordered:
                ordered.append(code)
        self._codes: tuple[str, ...] = tuple(ordered)
        self._members: frozenset[str] = frozenset(ordered)

    @property
    def codes(self) -> tuple[str, ...]:
        """Language codes in the order they were requested."""
        return self._codes

    @property
    def members(self) -> frozenset[str]:
        """Unordered view used for classification."""
        return self._members

    def intersects(self, keys: Iterable[str]) -> bool:
        """Return True if any of ``keys`` is a configured language code."""
        return any(key in self._members for key in keys)

    def with_code(self, code: str) -> LanguageSet:
        """Return a set that also contains ``code``."""
        if code in self._members:
            return self
        return LanguageSet((*self._codes, code))

    def __contains__(self, code: object) -> bool:
        return code in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LanguageSet):
            return NotImplemented
        return self._codes == other._codes

    @override
    def __hash__(self) -> int:
        return hash(self._codes)

    @override
    def __repr__(self) -> str:
        return f"LanguageSet({list(self._codes)!r})"


def as_language_set(languages: LanguageSet | Iterable[str]) -> LanguageSet:
    """Coerce a plain iterable of codes into a ``LanguageSet``."""
    if isinstance(languages, LanguageSet):
        return languages
    return LanguageSet(languages)


@dataclass(frozen=True)
class ProcessingTask:
    """One input file handed to either the inline path or a worker."""

    file_path: Path
    output_dir: Path
    languages: tuple[str, ...]
    chunk_size: int = DEFAULT_CHUNK_SIZE
    use_streaming: bool = True

    @property
    def file_name(self) -> str:
        return self.file_path.name

    def destination_for(self, language: str) -> Path:
        """Output path ``output_dir/<language>/<file name>``."""
        return self.output_dir / language / self.file_path.name

    def to_message(self) -> dict[str, object]:
        """Serialise the task for transfer to a worker process."""
        return {
            "file_path": str(self.file_path),
            "output_dir": str(self.output_dir),
            "languages": list(self.languages),
            "chunk_size": self.chunk_size,
            "use_streaming": self.use_streaming,
        }

    @classmethod
    def from_message(cls, message: Mapping[str, object]) -> ProcessingTask:
        languages = message["languages"]
        chunk_size = message.get("chunk_size", DEFAULT_CHUNK_SIZE)
        if not isinstance(languages, list) or not isinstance(chunk_size, int):
            raise TypeError(f"Malformed task message: {message!r}")
        return cls(
            file_path=Path(str(message["file_path"])),
            output_dir=Path(str(message["output_dir"])),
            languages=tuple(str(code) for code in languages),  # pyright: ignore[reportUnknownVariableType,reportUnknownArgumentType]
            chunk_size=chunk_size,
            use_streaming=bool(message.get("use_streaming", True)),
        )


@dataclass
class ExtractionResult:
    """Reshaped document for one (input file, language) pair."""

    language: str
    source: Path
    destination: Path
    content: ExtractedDocument = field(default_factory=dict)

    def to_message(self) -> dict[str, object]:
        return {
            "language": self.language,
            "source": str(self.source),
            "destination": str(self.destination),
            "content": self.content,
        }

    @classmethod
    def from_message(cls, message: Mapping[str, object]) -> ExtractionResult:
        content = message.get("content", {})
        if not isinstance(content, dict):
            raise TypeError(f"Malformed result message: {message!r}")
        return cls(
            language=str(message["language"]),
            source=Path(str(message["source"])),
            destination=Path(str(message["destination"])),
            content=content,  # pyright: ignore[reportUnknownArgumentType]
        )


@dataclass(frozen=True)
class FileFailure:
    """A file whose outputs could not be produced."""

    file: Path
    error_type: str
    message: str

    @override
    def __str__(self) -> str:
        return f"{self.file}: {self.error_type}: {self.message}"
