import logging
from collections.abc import Callable
from pathlib import Path

import numpy as np

from ..core import OUTPUT_SUFFIX
from ..core.config import VideoInfo, WatermarkConfig, validate_config
from ..core.filter_graph import build_filter_graph
from ..core.motion import synthesize_layers
from ..errors import InputNotFoundError
from .encoder import EncoderDriver
from .probe import probe_video

logger = logging.getLogger(__name__)


def watermarked_output_path(input_path: Path, output_dir: Path, suffix: str = OUTPUT_SUFFIX) -> Path:
    """<output_dir>/<input stem><suffix><input extension>"""
    return output_dir / f"{input_path.stem}{suffix}{input_path.suffix}"


def build_watermark_filter(
    config: WatermarkConfig,
    video_info: VideoInfo,
    rng: np.random.Generator | None = None,
) -> str:
    """Lay out the watermarks, synthesize their motion and return the -vf filter graph."""
    if rng is None:
        rng = np.random.default_rng()

    layers = synthesize_layers(config, video_info, rng)
    return build_filter_graph(layers, config)


def process_video(
    input_path: Path,
    output_dir: Path,
    config: WatermarkConfig,
    rng: np.random.Generator | None = None,
    ffmpeg_cmd: str = "ffmpeg",
    ffprobe_cmd: str = "ffprobe",
    progress_callback: Callable[[float, float], None] | None = None,
) -> Path:
    """
    Overlay floating text watermarks onto a video.

    The input is checked and the config validated before anything touches
    the disk. If encoding fails the output file may be left half written.

    Args:
        input_path: Source video
        output_dir: Directory for the result, created if missing
        config: Watermark settings
        rng: Random source, a fresh generator if None
        ffmpeg_cmd: ffmpeg executable
        ffprobe_cmd: ffprobe executable
        progress_callback: Optional callback(encoded_seconds, total_seconds);
            total is 0 when the duration is unknown

    Returns:
        Path to the watermarked video

    Raises:
        InputNotFoundError: if input_path does not exist
        ConfigValidationError: if the config is out of range
        EncodingError: if ffmpeg fails
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir)

    if not input_path.exists():
        raise InputNotFoundError(input_path)

    validate_config(config)

    output_path = watermarked_output_path(input_path, output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    video_info = probe_video(input_path, cmd=ffprobe_cmd)
    filter_graph = build_watermark_filter(config, video_info, rng)

    def encoder_progress(seconds: float) -> None:
        progress_callback(seconds, video_info.duration)

    EncoderDriver(ffmpeg_cmd).run(
        input_path,
        output_path,
        filter_graph,
        encoder_progress if progress_callback else None,
    )

    logger.info("Video saved: %s", output_path)
    return output_path
