"""
Data Models Layer.

This package contains the Pydantic input models and the result types
passed between the pipeline stages and the command-line layer.
"""

from .config import (
    AemHelperConfig,
    ImportZipConfig,
    MountpointConfig,
    XwalkUploadConfig,
)
from .credentials import ServiceCredentials
from .results import (
    ArchiveEntry,
    ExtractionProgress,
    ExtractionResult,
    ImportResult,
    LogEvent,
    PipelineStage,
)

__all__ = [
    "AemHelperConfig",
    "ArchiveEntry",
    "ExtractionProgress",
    "ExtractionResult",
    "ImportResult",
    "ImportZipConfig",
    "LogEvent",
    "MountpointConfig",
    "PipelineStage",
    "ServiceCredentials",
    "XwalkUploadConfig",
]
