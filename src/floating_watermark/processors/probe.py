import logging
from pathlib import Path

import ffmpeg

from ..core.config import VideoInfo

logger = logging.getLogger(__name__)

FALLBACK_VIDEO_INFO = VideoInfo()


def parse_video_info(probe: dict) -> VideoInfo:
    """
    Extract frame size and duration from ffprobe JSON output.

    Duration is read from the first video stream and falls back to the
    container duration (MKV/WebM streams often carry none), then to 0.

    Raises:
        ValueError: if there is no video stream or its size is unusable
    """
    streams = probe.get("streams") or []
    if not streams:
        raise ValueError("No video stream found")

    stream = streams[0]
    width = int(stream["width"])
    height = int(stream["height"])
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid frame size {width}x{height}")

    duration = stream.get("duration") or (probe.get("format") or {}).get("duration") or 0
    return VideoInfo(width=width, height=height, duration=max(0.0, float(duration)))


def probe_video(input_path: Path, cmd: str = "ffprobe") -> VideoInfo:
    """
    Get frame size and duration of the first video stream using ffprobe.

    Never raises: when ffprobe is missing, fails, or returns something
    unusable, a 1920x1080 frame with zero duration is assumed.
    """
    try:
        probe = ffmpeg.probe(str(input_path), cmd=cmd, v="quiet", select_streams="v:0")
        info = parse_video_info(probe)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode(errors="replace").strip() if e.stderr else ""
        logger.warning("ffprobe failed, using default video info: %s", stderr or e)
        return FALLBACK_VIDEO_INFO
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Could not read video info, using defaults: %s", e)
        return FALLBACK_VIDEO_INFO

    logger.info("Video: %dx%d, %.2fs", info.width, info.height, info.duration)
    return info
