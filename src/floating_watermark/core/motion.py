"""Randomized drift trajectories rendered as ffmpeg expressions of time `t`."""

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from . import (
    AMPLITUDE_MULTIPLIER_MIN,
    AMPLITUDE_MULTIPLIER_SPAN,
    EXPRESSION_PRECISION,
    HORIZONTAL_THRESHOLD,
    SEED_X_STEP,
    SEED_Y_SCALE,
    SEED_Y_STEP,
    SPEED_MULTIPLIER_MIN,
    SPEED_MULTIPLIER_SPAN,
    VERTICAL_THRESHOLD,
)
from .config import VideoInfo, WatermarkConfig
from .layout import Placement, plan_layout

logger = logging.getLogger(__name__)


class MotionType(Enum):
    HORIZONTAL_DOMINANT = "horizontal"
    VERTICAL_DOMINANT = "vertical"
    ELLIPTICAL = "elliptical"


@dataclass(frozen=True)
class MotionParams:
    """Per-watermark random draws that shape its trajectory."""

    phase_offset: float
    seed_x: float
    seed_y: float
    direction_x: int  # +1 or -1
    direction_y: int
    speed_x: float  # (0.3-0.7)
    speed_y: float
    amplitude_x: float  # (0.8-1.2)
    amplitude_y: float
    motion_type: MotionType


@dataclass(frozen=True)
class Harmonic:
    """One oscillating term: amplitude * direction * func(speed * t + phase)."""

    amplitude: float  # Fraction of the frame dimension
    speed: float
    phase: float
    direction: int | None = None
    function: str = "sin"


@dataclass(frozen=True)
class Trajectory:
    """Position along one axis: dimension * center + sum of harmonics."""

    dimension: str  # 'w' or 'h'
    center: float
    harmonics: tuple[Harmonic, ...]


def select_motion_type(value: float) -> MotionType:
    if value < HORIZONTAL_THRESHOLD:
        return MotionType.HORIZONTAL_DOMINANT
    elif value < VERTICAL_THRESHOLD:
        return MotionType.VERTICAL_DOMINANT
    else:
        return MotionType.ELLIPTICAL


def draw_motion_params(index: int, count: int, rng: np.random.Generator) -> MotionParams:
    """
    Draw the random parameters for one watermark.

    Watermarks are spread evenly in phase; seeds, directions, speed and
    amplitude jitter and the motion type are drawn independently.
    """
    phase_offset = index * math.pi * 2 / count
    random_seed = rng.random() * math.pi * 2

    return MotionParams(
        phase_offset=phase_offset,
        seed_x=index * SEED_X_STEP + random_seed,
        seed_y=index * SEED_Y_STEP + random_seed * SEED_Y_SCALE,
        direction_x=1 if rng.random() > 0.5 else -1,
        direction_y=1 if rng.random() > 0.5 else -1,
        speed_x=SPEED_MULTIPLIER_MIN + rng.random() * SPEED_MULTIPLIER_SPAN,
        speed_y=SPEED_MULTIPLIER_MIN + rng.random() * SPEED_MULTIPLIER_SPAN,
        amplitude_x=AMPLITUDE_MULTIPLIER_MIN + rng.random() * AMPLITUDE_MULTIPLIER_SPAN,
        amplitude_y=AMPLITUDE_MULTIPLIER_MIN + rng.random() * AMPLITUDE_MULTIPLIER_SPAN,
        motion_type=select_motion_type(rng.random()),
    )


def synthesize_trajectories(
    placement: Placement,
    params: MotionParams,
    speed: float,
    amplitude_percent: float,
) -> tuple[Trajectory, Trajectory]:
    """
    Build the x and y trajectories for one watermark.

    Each axis gets a primary harmonic plus a weaker secondary one at a
    different frequency, so the drift never looks perfectly periodic.

    Args:
        placement: Where the watermark is centered
        params: Random draws for this watermark
        speed: Base speed from the config
        amplitude_percent: Drift amplitude as a fraction of the frame

    Returns:
        (x trajectory, y trajectory)
    """
    a = amplitude_percent
    p = params
    speed_x = speed * p.speed_x
    speed_y = speed * p.speed_y
    amp_x = a * p.amplitude_x
    amp_y = a * p.amplitude_y

    if p.motion_type is MotionType.HORIZONTAL_DOMINANT:
        x_terms = (
            Harmonic(amp_x, speed_x, p.phase_offset + p.seed_x, p.direction_x),
            Harmonic(amp_x * 0.2, speed_x * 1.7, p.seed_x),
        )
        y_terms = (Harmonic(amp_y * 0.1, speed_y * 2.1, p.seed_y, p.direction_y),)
    elif p.motion_type is MotionType.VERTICAL_DOMINANT:
        x_terms = (Harmonic(amp_x * 0.1, speed_x * 1.9, p.seed_x, p.direction_x),)
        y_terms = (
            Harmonic(amp_y, speed_y, p.phase_offset + p.seed_y, p.direction_y),
            Harmonic(amp_y * 0.3, speed_y * 1.4, p.seed_y),
        )
    else:
        x_terms = (
            Harmonic(amp_x, speed_x, p.phase_offset + p.seed_x, p.direction_x),
            Harmonic(amp_x * 0.3, speed_x * 1.7, p.seed_x, p.direction_x),
        )
        y_terms = (
            Harmonic(amp_y, speed_y * 0.8, p.phase_offset + p.seed_y, p.direction_y, "cos"),
            Harmonic(amp_y * 0.4, speed_y * 1.3, p.seed_y, p.direction_y, "cos"),
        )

    return (
        Trajectory("w", placement.center_x, x_terms),
        Trajectory("h", placement.center_y, y_terms),
    )


def format_number(value: float, precision: int = EXPRESSION_PRECISION) -> str:
    text = f"{value:.{precision}f}"
    # Avoid '-0.000000' from tiny negative values
    return text[1:] if text.startswith("-") and float(text) == 0 else text


def render_harmonic(dimension: str, harmonic: Harmonic) -> str:
    parts = [dimension, format_number(harmonic.amplitude)]
    if harmonic.direction is not None:
        parts.append(str(harmonic.direction))
    parts.append(f"{harmonic.function}({format_number(harmonic.speed)}*t+{format_number(harmonic.phase)})")
    return "*".join(parts)


def render_expression(trajectory: Trajectory) -> str:
    """Render a trajectory as ffmpeg expression text, e.g. 'w*0.500000+w*0.050000*1*sin(1.000000*t+0.300000)'."""
    terms = [f"{trajectory.dimension}*{format_number(trajectory.center)}"]
    terms.extend(render_harmonic(trajectory.dimension, h) for h in trajectory.harmonics)
    return "+".join(terms)


@dataclass(frozen=True)
class WatermarkLayer:
    """One watermark ready to be drawn: where it sits and how it drifts."""

    placement: Placement
    params: MotionParams
    x: Trajectory
    y: Trajectory

    @property
    def x_expression(self) -> str:
        return render_expression(self.x)

    @property
    def y_expression(self) -> str:
        return render_expression(self.y)


def synthesize_layers(
    config: WatermarkConfig,
    video_info: VideoInfo,
    rng: np.random.Generator,
) -> tuple[WatermarkLayer, ...]:
    """Plan the layout and derive a trajectory pair for every watermark, in index order."""
    plan = plan_layout(config, video_info, rng)

    layers = []
    for placement in plan.placements:
        params = draw_motion_params(placement.index, config.count, rng)
        x, y = synthesize_trajectories(placement, params, config.speed, plan.amplitude_percent)
        layers.append(WatermarkLayer(placement, params, x, y))

        logger.debug("Watermark %d: %s motion", placement.index + 1, params.motion_type.value)

    return tuple(layers)
