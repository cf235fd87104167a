"""Rendering surface, capture and packaging of exported images."""

from word_stamp.export.surface import RenderSurface, Presentation, CAPTURE_PRESENTATION
from word_stamp.export.capture import (
    CaptureBackend,
    CaptureError,
    CaptureOptions,
    PillowCapture,
)
from word_stamp.export.archive import ArchiveBuilder, ArchiveEncodingError
from word_stamp.export.orchestrator import BatchExportOrchestrator, ExportState

__all__ = [
    "RenderSurface",
    "Presentation",
    "CAPTURE_PRESENTATION",
    "CaptureBackend",
    "CaptureError",
    "CaptureOptions",
    "PillowCapture",
    "ArchiveBuilder",
    "ArchiveEncodingError",
    "BatchExportOrchestrator",
    "ExportState",
]
