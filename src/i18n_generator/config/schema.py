"""Configuration schema for the i18n generator using Pydantic models."""

from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..extraction.chunk_scheduler import DEFAULT_CHUNK_SIZE
from ..workers.pool import DEFAULT_WORKER_THRESHOLD_KB, default_max_workers

DEFAULT_LANGUAGES: tuple[str, ...] = ("vi", "en")


class GeneratorConfig(BaseModel):
    """
    Configuration for one generator run.

    Keys are accepted in snake_case or in the camelCase spelling used by
    ``i18n.config.js`` style configs (``inputDir``, ``chunkSize``...).
    """

    languages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LANGUAGES),
        description="Ordered language codes to generate",
        min_length=1,
    )
    input_dir: Path = Field(
        ...,
        alias="inputDir",
        description="Directory containing multi-language JSON documents",
    )
    output_dir: Path = Field(
        ...,
        alias="outputDir",
        description="Directory receiving <language>/<file name> outputs",
    )
    max_workers: int = Field(
        default_factory=default_max_workers,
        alias="maxWorkers",
        description="Maximum number of files processed concurrently",
        ge=1,
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        alias="chunkSize",
        description="Top-level keys extracted per cooperative step",
        ge=1,
    )
    use_streaming: bool = Field(
        default=True,
        alias="useStreaming",
        description="Read documents in 64 KiB blocks",
    )
    use_workers: bool = Field(
        default=True,
        alias="useWorkers",
        description="Hand large documents to worker processes",
    )
    worker_threshold_kb: float = Field(
        default=DEFAULT_WORKER_THRESHOLD_KB,
        alias="workerThresholdKb",
        description="Documents at or above this size (KiB) go to a worker",
        gt=0,
    )
    indent: int | None = Field(
        default=2,
        description="JSON indentation of generated files, null for compact output",
        ge=0,
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: list[str]) -> list[str]:
        """Reject empty codes and drop duplicates, keeping the first occurrence."""
        codes: list[str] = []
        for code in v:
            code = code.strip()
            if not code:
                raise ValueError("Language codes must not be empty")
            if code not in codes:
                codes.append(code)
        return codes
