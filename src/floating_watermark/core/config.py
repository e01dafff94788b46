from dataclasses import dataclass

from . import (
    DEFAULT_AMPLITUDE,
    DEFAULT_COLOR,
    DEFAULT_COUNT,
    DEFAULT_FONT_SIZE,
    DEFAULT_OPACITY,
    DEFAULT_SPEED,
    DEFAULT_VIDEO_DURATION,
    DEFAULT_VIDEO_HEIGHT,
    DEFAULT_VIDEO_WIDTH,
    MAX_AMPLITUDE,
    MAX_COUNT,
    MAX_FONT_SIZE,
    MAX_OPACITY,
    MAX_SPEED,
    MIN_AMPLITUDE,
    MIN_COUNT,
    MIN_FONT_SIZE,
    MIN_OPACITY,
    MIN_SPEED,
    TEXT_HEIGHT_FACTOR,
    TEXT_WIDTH_FACTOR,
)
from ..errors import ConfigValidationError


@dataclass(frozen=True)
class WatermarkConfig:
    """Settings shared by every watermark drawn in one run."""

    text: str
    font_size: int = DEFAULT_FONT_SIZE
    color: str = DEFAULT_COLOR  # Hex ('#FFFFFF') or ffmpeg color name
    opacity: float = DEFAULT_OPACITY
    speed: float = DEFAULT_SPEED
    amplitude: float = DEFAULT_AMPLITUDE  # Drift in pixels
    count: int = DEFAULT_COUNT
    font_file: str | None = None
    include_time: bool = False

    @property
    def text_width(self) -> float:
        """Estimated rendered text width in pixels."""
        return self.font_size * len(self.text) * TEXT_WIDTH_FACTOR

    @property
    def text_height(self) -> float:
        """Estimated rendered line height in pixels."""
        return self.font_size * TEXT_HEIGHT_FACTOR


@dataclass(frozen=True)
class VideoInfo:
    """Frame metadata of the source video."""

    width: int = DEFAULT_VIDEO_WIDTH
    height: int = DEFAULT_VIDEO_HEIGHT
    duration: float = DEFAULT_VIDEO_DURATION  # Seconds, 0 when unknown


def _out_of_range(value: float, low: float, high: float) -> bool:
    return not low <= value <= high


def validate_config(config: WatermarkConfig) -> None:
    """
    Check every field of the config and report all violations together.

    Raises:
        ConfigValidationError: if any field is out of range
    """
    errors = []

    if not config.text or not config.text.strip():
        errors.append("text must not be empty")

    if _out_of_range(config.font_size, MIN_FONT_SIZE, MAX_FONT_SIZE):
        errors.append(f"font_size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE} (got {config.font_size})")

    if _out_of_range(config.opacity, MIN_OPACITY, MAX_OPACITY):
        errors.append(f"opacity must be between {MIN_OPACITY} and {MAX_OPACITY} (got {config.opacity})")

    if _out_of_range(config.speed, MIN_SPEED, MAX_SPEED):
        errors.append(f"speed must be between {MIN_SPEED} and {MAX_SPEED} (got {config.speed})")

    if _out_of_range(config.amplitude, MIN_AMPLITUDE, MAX_AMPLITUDE):
        errors.append(f"amplitude must be between {MIN_AMPLITUDE} and {MAX_AMPLITUDE} (got {config.amplitude})")

    if not isinstance(config.count, int) or _out_of_range(config.count, MIN_COUNT, MAX_COUNT):
        errors.append(f"count must be an integer between {MIN_COUNT} and {MAX_COUNT} (got {config.count})")

    if errors:
        raise ConfigValidationError(errors)
