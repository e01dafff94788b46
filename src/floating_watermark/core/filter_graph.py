from collections.abc import Sequence

from . import CLOCK_TOKEN, SHADOW_COLOR, SHADOW_OFFSET
from .config import WatermarkConfig
from .motion import WatermarkLayer


def escape_text(text: str) -> str:
    """Escape literal text for a single-quoted drawtext value.

    The value passes through the filtergraph parser, then the option parser,
    then drawtext's own text expansion. Quoted content survives the first
    level untouched, so a backslash that must reach drawtext is doubled once
    for the option parser and once more for drawtext. A quote cannot appear
    inside quotes: it closes the quote, adds an escaped ``\\'`` for the option
    parser and reopens.
    """
    return (
        text.replace("\\", "\\\\\\\\")
        .replace("'", "'\\\\\\''")
        .replace(":", "\\:")
        .replace("%", "\\\\%")
        .replace("\r\n", " ")
        .replace("\n", " ")
    )


def escape_font_path(path: str) -> str:
    """Escape a font file path for a single-quoted filter argument."""
    return path.replace("\\", "/").replace(":", "\\:").replace("'", "'\\\\\\''")


def display_text(config: WatermarkConfig) -> str:
    """Escaped watermark text, with a live local clock appended if requested."""
    text = escape_text(config.text)
    if config.include_time:
        text = f"{text} {CLOCK_TOKEN}"
    return text


def build_drawtext(layer: WatermarkLayer, config: WatermarkConfig) -> str:
    """Build the drawtext filter for a single watermark."""
    options = [
        f"text='{display_text(config)}'",
        f"x='{layer.x_expression}'",
        f"y='{layer.y_expression}'",
        f"fontsize={config.font_size}",
        f"fontcolor={config.color}@{config.opacity}",
        f"shadowcolor={SHADOW_COLOR}",
        f"shadowx={SHADOW_OFFSET}",
        f"shadowy={SHADOW_OFFSET}",
    ]
    if config.font_file:
        options.append(f"fontfile='{escape_font_path(config.font_file)}'")

    return "drawtext=" + ":".join(options)


def build_filter_graph(layers: Sequence[WatermarkLayer], config: WatermarkConfig) -> str:
    """
    Chain one drawtext filter per watermark into a single -vf argument.

    Filters appear in watermark index order. The result depends only on
    its inputs, so rebuilding from the same layers gives the same string.
    """
    return ",".join(build_drawtext(layer, config) for layer in layers)
