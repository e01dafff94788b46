from .encoder import EncoderDriver
from .probe import probe_video
from .video import build_watermark_filter, process_video, watermarked_output_path

__all__ = [
    "EncoderDriver",
    "probe_video",
    "build_watermark_filter",
    "process_video",
    "watermarked_output_path",
]
