# mat2nwb/core/exceptions.py
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .record import FieldDiagnostic


class ConversionError(Exception):
    """Base error for all mat2nwb exceptions."""


# ---- Invocation errors ----
class UsageError(ConversionError):
    """Raised when the converter is invoked with missing or invalid arguments."""


class InvalidFileName(UsageError, ValueError):
    """Raised when a source file name does not follow animal_[signal_]session_tag."""


class SourceNotFound(ConversionError, FileNotFoundError):
    """Raised when the source path does not exist."""


# ---- File-level errors (abort the run) ----
class LoadError(ConversionError):
    """Raised when a source file is unreadable or not shaped as channel records."""


class ExportError(ConversionError):
    """Raised when the NWB file cannot be written."""


# ---- Validation errors ----
class InvalidTimeSeries(ConversionError, ValueError):
    """Raised when a timestamp sequence cannot be classified."""


# ---- Per-channel errors (recovered locally) ----
class ClassificationSkipped(ConversionError):
    """Raised when a channel record holds no usable numeric field."""

    def __init__(
        self,
        channel: str,
        reason: str,
        diagnostics: Sequence["FieldDiagnostic"] = (),
    ) -> None:
        super().__init__(f"{channel}: {reason}")
        self.channel = channel
        self.reason = reason
        self.diagnostics = tuple(diagnostics)
