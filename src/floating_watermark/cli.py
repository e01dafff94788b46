import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from .core import (
    DEFAULT_AMPLITUDE,
    DEFAULT_COLOR,
    DEFAULT_COUNT,
    DEFAULT_FONT_SIZE,
    DEFAULT_OPACITY,
    DEFAULT_SPEED,
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
)
from .core.config import WatermarkConfig, validate_config
from .errors import FloatingWatermarkError
from .processors.probe import probe_video
from .processors.video import build_watermark_filter, process_video

app = typer.Typer(
    name="fwm",
    help="Overlay floating, semi-transparent text watermarks onto videos.",
    add_completion=True,
)
console = Console()
err_console = Console(stderr=True)

MEDIA_ARGUMENT = typer.Argument(..., help="Video file to watermark", exists=True, dir_okay=False)
TEXT_OPTION = typer.Option(..., "--text", "-t", help="Watermark text")
COUNT_OPTION = typer.Option(DEFAULT_COUNT, "--count", "-n", help=f"Number of watermarks ({MIN_COUNT}-{MAX_COUNT})")
COLOR_OPTION = typer.Option(DEFAULT_COLOR, "--color", "-c", help="Text color, hex ('#FFFFFF') or name ('white')")
OPACITY_OPTION = typer.Option(DEFAULT_OPACITY, "--opacity", help=f"Text opacity ({MIN_OPACITY}-{MAX_OPACITY})")
FONT_SIZE_OPTION = typer.Option(
    DEFAULT_FONT_SIZE, "--font-size", "-f", help=f"Font size ({MIN_FONT_SIZE}-{MAX_FONT_SIZE})"
)
SPEED_OPTION = typer.Option(DEFAULT_SPEED, "--speed", help=f"Drift speed ({MIN_SPEED}-{MAX_SPEED})")
AMPLITUDE_OPTION = typer.Option(
    DEFAULT_AMPLITUDE, "--amplitude", help=f"Drift amplitude in pixels ({MIN_AMPLITUDE}-{MAX_AMPLITUDE})"
)
FONT_FILE_OPTION = typer.Option(None, "--font-file", help="Font file for drawtext")
INCLUDE_TIME_OPTION = typer.Option(False, "--include-time", help="Append a live local clock to the text")
SEED_OPTION = typer.Option(None, "--seed", help="Random seed for a reproducible layout")
FFPROBE_OPTION = typer.Option("ffprobe", "--ffprobe", envvar="FWM_FFPROBE", help="ffprobe executable")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug output, including ffmpeg progress")


def configure_logging(verbose: bool = False, log_console: Console = console) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=log_console, show_path=False)],
        force=True,
    )


def build_config(
    text: str,
    count: int,
    color: str,
    opacity: float,
    font_size: int,
    speed: float,
    amplitude: float,
    font_file: Optional[Path],
    include_time: bool,
) -> WatermarkConfig:
    return WatermarkConfig(
        text=text,
        font_size=font_size,
        color=color,
        opacity=opacity,
        speed=speed,
        amplitude=amplitude,
        count=count,
        font_file=str(font_file) if font_file else None,
        include_time=include_time,
    )


@app.command()
def process(
    media: Path = MEDIA_ARGUMENT,
    text: str = TEXT_OPTION,
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Output directory. Defaults to the input's directory.",
    ),
    count: int = COUNT_OPTION,
    color: str = COLOR_OPTION,
    opacity: float = OPACITY_OPTION,
    font_size: int = FONT_SIZE_OPTION,
    speed: float = SPEED_OPTION,
    amplitude: float = AMPLITUDE_OPTION,
    font_file: Optional[Path] = FONT_FILE_OPTION,
    include_time: bool = INCLUDE_TIME_OPTION,
    seed: Optional[int] = SEED_OPTION,
    ffmpeg_bin: str = typer.Option("ffmpeg", "--ffmpeg", envvar="FWM_FFMPEG", help="ffmpeg executable"),
    ffprobe_bin: str = FFPROBE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Add floating text watermarks to a video.

    The result is written as <name>_watermarked<ext> next to the input
    or in --output-dir.

    Examples:
        fwm process clip.mp4 -t "SAMPLE"
        fwm process clip.mp4 -t "CONFIDENTIAL" -n 3 --opacity 0.5 -o ./out
        fwm process clip.mp4 -t "LIVE" --include-time --seed 42
    """
    configure_logging(verbose)
    config = build_config(text, count, color, opacity, font_size, speed, amplitude, font_file, include_time)

    console.print(
        Panel(
            f"Adding {count} floating watermark(s) to {media.name}",
            title="Floating Watermark",
            border_style="blue",
        )
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(f"Encoding {media.name}...", total=None)

        def encode_progress(seconds: float, total: float):
            if total > 0:
                progress.update(task, total=total, completed=min(seconds, total))

        try:
            result = process_video(
                media,
                output_dir or media.parent,
                config,
                rng=np.random.default_rng(seed),
                ffmpeg_cmd=ffmpeg_bin,
                ffprobe_cmd=ffprobe_bin,
                progress_callback=encode_progress,
            )
        except FloatingWatermarkError as e:
            progress.stop()
            console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
            raise typer.Exit(1)

    console.print(f"[green]Video saved:[/green] {result}")


@app.command("filter")
def show_filter(
    media: Path = MEDIA_ARGUMENT,
    text: str = TEXT_OPTION,
    count: int = COUNT_OPTION,
    color: str = COLOR_OPTION,
    opacity: float = OPACITY_OPTION,
    font_size: int = FONT_SIZE_OPTION,
    speed: float = SPEED_OPTION,
    amplitude: float = AMPLITUDE_OPTION,
    font_file: Optional[Path] = FONT_FILE_OPTION,
    include_time: bool = INCLUDE_TIME_OPTION,
    seed: Optional[int] = SEED_OPTION,
    ffprobe_bin: str = FFPROBE_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Print the ffmpeg filter graph for a video without encoding it."""
    configure_logging(verbose, err_console)
    config = build_config(text, count, color, opacity, font_size, speed, amplitude, font_file, include_time)

    try:
        validate_config(config)
    except FloatingWatermarkError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    video_info = probe_video(media, cmd=ffprobe_bin)
    typer.echo(build_watermark_filter(config, video_info, np.random.default_rng(seed)))


@app.command()
def info():
    """Display information about watermark motion and limits."""
    console.print(
        Panel(
            "[bold]Floating Watermark[/bold]\n\n"
            "Draws text watermarks that drift smoothly around the frame.\n"
            "Each watermark gets its own non-overlapping spot and a random motion.\n\n"
            "[cyan]Motion Types:[/cyan]\n"
            "  - Horizontal (30%): wide sine drift on x, slight bob on y\n"
            "  - Vertical (30%): wide sine drift on y, slight sway on x\n"
            "  - Elliptical (40%): sine on x and cosine on y\n\n"
            f"[cyan]Watermarks:[/cyan] {MIN_COUNT}-{MAX_COUNT}\n"
            f"[cyan]Font Size:[/cyan] {MIN_FONT_SIZE}-{MAX_FONT_SIZE}\n"
            f"[cyan]Opacity:[/cyan] {MIN_OPACITY}-{MAX_OPACITY}\n"
            f"[cyan]Speed:[/cyan] {MIN_SPEED}-{MAX_SPEED}\n"
            f"[cyan]Amplitude:[/cyan] {MIN_AMPLITUDE}-{MAX_AMPLITUDE}px\n"
            "[cyan]Video Output:[/cyan] H.264 (audio copied)\n\n"
            "[dim]Drift is capped at 15% of the shorter frame side[/dim]",
            title="About",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    app()
