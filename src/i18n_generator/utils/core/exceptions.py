"""
Basic exception classes for the i18n generator.

This module contains the exception hierarchy shared by the extraction,
worker, output and pipeline layers without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    CONFIGURATION = "configuration"
    PARSE = "parse"
    WRITE = "write"
    WORKER = "worker"
    UNKNOWN = "unknown"


class GeneratorError(Exception):
    """Base exception class for i18n generator specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: dict[str, object] | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: dict[str, object] = context or {}
        self.recoverable: bool = recoverable


class ConfigurationError(GeneratorError):
    """Missing or invalid configuration, including a missing input directory."""

    def __init__(
        self,
        message: str,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            recoverable=False,
        )


class ParseError(GeneratorError):
    """Malformed input document. Fatal for that single file only."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.HIGH,
            context={"file": file},
            recoverable=True,
        )
        self.file: str | None = file


class WriteError(GeneratorError):
    """A destination could not be written."""

    def __init__(
        self,
        message: str,
        destination: str,
        language: str | None = None,
        source: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.WRITE,
            severity=ErrorSeverity.MEDIUM,
            context={
                "destination": destination,
                "language": language,
                "source": source,
            },
            recoverable=True,
        )
        self.destination: str = destination
        self.language: str | None = language
        self.source: str | None = source


class WorkerCrashError(GeneratorError):
    """An isolated worker process died while handling a file."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.WORKER,
            severity=ErrorSeverity.HIGH,
            context={"file": file, "exit_code": exit_code},
            recoverable=False,
        )
        self.file: str | None = file
        self.exit_code: int | None = exit_code
