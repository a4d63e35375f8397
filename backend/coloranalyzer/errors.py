"""
Color Analyzer Errors
Exception hierarchy shared by the pipeline, the CLI and the HTTP service.
"""
from typing import Optional


class ColorAnalysisError(Exception):
    """Base error for every failure raised by the analysis pipeline."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message


class DecodeError(ColorAnalysisError):
    """Input could not be interpreted as an image."""


class ValidationError(ColorAnalysisError):
    """Invalid option value or pixel buffer shape."""


class ImageIOError(ColorAnalysisError):
    """File missing, unreadable, or save target unwritable."""


class AnalysisError(ColorAnalysisError):
    """Unexpected failure inside a pipeline stage."""


class UploadValidationError(ColorAnalysisError):
    """Rejected upload (missing file, bad extension, too large)."""
