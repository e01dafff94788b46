import logging
import re
import subprocess
from collections.abc import Callable
from pathlib import Path

import ffmpeg

from ..core import AUDIO_CODEC, VIDEO_CODEC, VIDEO_CRF, VIDEO_PRESET
from ..errors import EncodingError

logger = logging.getLogger(__name__)

# ffmpeg status lines look like "frame=  120 fps= 60 ... time=00:00:04.00 bitrate=..."
PROGRESS_PATTERN = re.compile(r"time=(\d{2}):(\d{2}):(\d{2}\.\d{2})")


def parse_progress(line: str) -> float | None:
    """Return the encoded timestamp in seconds from an ffmpeg status line, if any."""
    match = PROGRESS_PATTERN.search(line)
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


class EncoderDriver:
    """Runs ffmpeg once to burn a filter graph into a video."""

    def __init__(self, cmd: str | list[str] = "ffmpeg"):
        self.cmd = cmd

    def build_args(self, input_path: Path, output_path: Path, filter_graph: str) -> list[str]:
        """Full ffmpeg command line: H.264 video, audio copied, output overwritten."""
        return (
            ffmpeg.input(str(input_path))
            .output(
                str(output_path),
                vf=filter_graph,
                vcodec=VIDEO_CODEC,
                preset=VIDEO_PRESET,
                crf=VIDEO_CRF,
                acodec=AUDIO_CODEC,
            )
            .overwrite_output()
            .compile(cmd=self.cmd)
        )

    def run(
        self,
        input_path: Path,
        output_path: Path,
        filter_graph: str,
        progress_callback: Callable[[float], None] | None = None,
    ) -> Path:
        """
        Encode the video and wait for ffmpeg to exit.

        stderr is read line by line while ffmpeg runs; every "time=" token
        is reported to progress_callback in seconds. There is no timeout.

        Args:
            input_path: Source video
            output_path: Destination video (overwritten)
            filter_graph: Value for -vf
            progress_callback: Optional callback(encoded_seconds)

        Returns:
            output_path

        Raises:
            EncodingError: if ffmpeg cannot be started or exits non-zero
        """
        args = self.build_args(input_path, output_path, filter_graph)
        logger.debug("Running %s", " ".join(args))

        try:
            process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise EncodingError(None, str(e)) from e

        stderr_lines = []
        with process:
            # Text mode splits ffmpeg's carriage-return status updates into lines
            for line in process.stderr:
                stderr_lines.append(line)
                seconds = parse_progress(line)
                if seconds is None:
                    continue
                logger.debug("Encoded %.2fs", seconds)
                if progress_callback:
                    progress_callback(seconds)
            returncode = process.wait()

        stderr = "".join(stderr_lines)
        if returncode != 0:
            logger.error("ffmpeg failed with code %d", returncode)
            raise EncodingError(returncode, stderr)

        logger.info("ffmpeg finished: %s", output_path)
        return output_path
