"""Non-overlapping placement of watermark centers using rejection sampling."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from . import MAX_AMPLITUDE_PERCENT, MAX_PLACEMENT_ATTEMPTS, MAX_SAFE_MARGIN, SAFE_MARGIN_PADDING
from .config import VideoInfo, WatermarkConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """Normalized bounding box (fractions of frame width/height)."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def around(cls, center_x: float, center_y: float, width: float, height: float) -> "Region":
        """Build a region centered on a point, clipped to the unit frame."""
        left = max(0.0, center_x - width / 2)
        top = max(0.0, center_y - height / 2)
        right = min(1.0, center_x + width / 2)
        bottom = min(1.0, center_y + height / 2)
        return cls(x=left, y=top, width=max(0.0, right - left), height=max(0.0, bottom - top))

    def overlaps(self, other: "Region") -> bool:
        """AABB test: regions overlap unless one lies fully beside, above or below the other."""
        return not (
            self.x >= other.x + other.width
            or other.x >= self.x + self.width
            or self.y >= other.y + other.height
            or other.y >= self.y + self.height
        )


class PlacementOutcome(Enum):
    CLEAN = "clean"
    OVERLAPPING = "overlapping"  # Attempt budget exhausted


@dataclass(frozen=True)
class Placement:
    """Normalized center of one watermark and the region it reserves."""

    index: int
    center_x: float
    center_y: float
    region: Region
    outcome: PlacementOutcome
    attempts: int


@dataclass(frozen=True)
class LayoutPlan:
    placements: tuple[Placement, ...]
    amplitude_percent: float
    text_width: float
    text_height: float

    @property
    def regions(self) -> tuple[Region, ...]:
        return tuple(p.region for p in self.placements)

    @property
    def exhausted(self) -> bool:
        """True when at least one watermark had to be placed over another."""
        return any(p.outcome is PlacementOutcome.OVERLAPPING for p in self.placements)


def calculate_amplitude_percent(amplitude: float, video_info: VideoInfo) -> float:
    """Convert a pixel drift amplitude into a fraction of the shorter frame side, capped at 15%."""
    return min(amplitude / min(video_info.width, video_info.height), MAX_AMPLITUDE_PERCENT)


def calculate_safe_margins(
    text_width: float,
    text_height: float,
    amplitude: float,
    video_info: VideoInfo,
) -> tuple[float, float]:
    """
    Calculate normalized margins that keep drifting text inside the frame.

    Margins are capped at 0.5; a capped axis always places the center mid-frame.
    """
    margin_x = (text_width + amplitude + SAFE_MARGIN_PADDING) / video_info.width
    margin_y = (text_height + amplitude + SAFE_MARGIN_PADDING) / video_info.height
    return min(margin_x, MAX_SAFE_MARGIN), min(margin_y, MAX_SAFE_MARGIN)


def overlaps_any(region: Region, occupied: Sequence[Region]) -> bool:
    return any(region.overlaps(area) for area in occupied)


def place_watermark(
    index: int,
    occupied: Sequence[Region],
    footprint: tuple[float, float],
    margins: tuple[float, float],
    rng: np.random.Generator,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Placement:
    """
    Pick a center for one watermark that avoids every occupied region.

    Candidates are drawn uniformly inside the safe margins. The first
    candidate that does not overlap is accepted. When every attempt
    overlaps, the last candidate is accepted anyway and the placement is
    marked OVERLAPPING.

    Args:
        index: Watermark index
        occupied: Regions already committed by earlier watermarks
        footprint: Normalized (width, height) the watermark reserves
        margins: Normalized (x, y) safe margins
        rng: Random source
        max_attempts: Attempt budget

    Returns:
        Placement for this watermark
    """
    margin_x, margin_y = margins
    footprint_w, footprint_h = footprint

    for attempt in range(1, max_attempts + 1):
        center_x = margin_x + rng.random() * (1 - 2 * margin_x)
        center_y = margin_y + rng.random() * (1 - 2 * margin_y)
        region = Region.around(center_x, center_y, footprint_w, footprint_h)

        if not overlaps_any(region, occupied):
            return Placement(index, center_x, center_y, region, PlacementOutcome.CLEAN, attempt)

    logger.warning("Watermark %d: no free spot after %d attempts, using last position", index + 1, max_attempts)
    return Placement(index, center_x, center_y, region, PlacementOutcome.OVERLAPPING, max_attempts)


def plan_layout(config: WatermarkConfig, video_info: VideoInfo, rng: np.random.Generator) -> LayoutPlan:
    """Place config.count watermarks in index order, each avoiding the ones before it."""
    text_width, text_height = config.text_width, config.text_height
    amplitude_percent = calculate_amplitude_percent(config.amplitude, video_info)
    margins = calculate_safe_margins(text_width, text_height, config.amplitude, video_info)

    # Reserved area covers the text plus drift on both sides
    footprint = (
        (text_width + config.amplitude * 2) / video_info.width,
        (text_height + config.amplitude * 2) / video_info.height,
    )

    logger.debug("Estimated text size %.0fx%.0fpx", text_width, text_height)
    logger.debug("Drift amplitude %spx = %.1f%%", config.amplitude, amplitude_percent * 100)

    occupied: tuple[Region, ...] = ()
    placements = []
    for index in range(config.count):
        placement = place_watermark(index, occupied, footprint, margins, rng)
        occupied = (*occupied, placement.region)
        placements.append(placement)

        logger.info(
            "Watermark %d: center (%.1f%%, %.1f%%)",
            index + 1,
            placement.center_x * 100,
            placement.center_y * 100,
        )

    return LayoutPlan(
        placements=tuple(placements),
        amplitude_percent=amplitude_percent,
        text_width=text_width,
        text_height=text_height,
    )
