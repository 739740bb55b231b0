"""Discovery, dispatch and writing of a full generator run."""

from .orchestrator import (
    PipelineOrchestrator,
    PipelineState,
    PipelineSummary,
    discover_input_files,
)

__all__ = [
    "PipelineOrchestrator",
    "PipelineState",
    "PipelineSummary",
    "discover_input_files",
]
