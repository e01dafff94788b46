from collections.abc import Sequence
from pathlib import Path


class FloatingWatermarkError(Exception):
    """Base class for all pipeline errors."""


class InputNotFoundError(FloatingWatermarkError, FileNotFoundError):
    """Raised when the input media file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Input file not found: {path}")


class ConfigValidationError(FloatingWatermarkError, ValueError):
    """Raised with every violated field of a WatermarkConfig at once."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid watermark config: {'; '.join(self.errors)}")


class EncodingError(FloatingWatermarkError):
    """
    Raised when ffmpeg fails to start or exits with a non-zero code.

    The output file may be partially written when this is raised.
    """

    def __init__(self, returncode: int | None, stderr: str):
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"ffmpeg failed to start: {stderr}"
        else:
            message = f"ffmpeg failed with code {returncode}: {stderr}"
        super().__init__(message)
