import itertools

import numpy as np
import pytest

from floating_watermark.core.config import VideoInfo, WatermarkConfig
from floating_watermark.core.layout import (
    PlacementOutcome,
    Region,
    calculate_amplitude_percent,
    calculate_safe_margins,
    place_watermark,
    plan_layout,
)


class TestRegion:
    def test_separate_regions_do_not_overlap(self):
        a = Region(0.0, 0.0, 0.2, 0.2)
        b = Region(0.5, 0.5, 0.2, 0.2)
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_touching_edges_do_not_overlap(self):
        a = Region(0.0, 0.0, 0.5, 0.5)
        assert not a.overlaps(Region(0.5, 0.0, 0.5, 0.5))
        assert not a.overlaps(Region(0.0, 0.5, 0.5, 0.5))

    def test_partial_and_contained_overlap(self):
        a = Region(0.1, 0.1, 0.4, 0.4)
        assert a.overlaps(Region(0.3, 0.3, 0.4, 0.4))
        assert a.overlaps(Region(0.2, 0.2, 0.1, 0.1))
        assert Region(0.2, 0.2, 0.1, 0.1).overlaps(a)

    def test_around_clips_to_frame(self):
        region = Region.around(0.1, 0.9, 0.4, 0.4)
        assert region.x == 0.0
        assert region.y == pytest.approx(0.7)
        assert region.width == pytest.approx(0.3)
        assert region.height == pytest.approx(0.3)

    def test_around_inside_frame(self):
        region = Region.around(0.5, 0.5, 0.2, 0.1)
        assert region.x == pytest.approx(0.4)
        assert region.y == pytest.approx(0.45)
        assert region.width == pytest.approx(0.2)
        assert region.height == pytest.approx(0.1)


@pytest.mark.parametrize(
    "amplitude,width,height,expected",
    [
        (60, 1280, 720, 60 / 720),
        (10, 1920, 1080, 10 / 1080),
        (200, 1280, 720, 0.15),
        (200, 100, 100, 0.15),
        (10, 8, 8, 0.15),
    ],
)
def test_amplitude_percent_is_capped(amplitude, width, height, expected):
    percent = calculate_amplitude_percent(amplitude, VideoInfo(width, height))
    assert percent == pytest.approx(expected)
    assert percent <= 0.15


def test_safe_margins():
    margin_x, margin_y = calculate_safe_margins(144, 48, 60, VideoInfo(1280, 720))
    assert margin_x == pytest.approx((144 + 60 + 20) / 1280)
    assert margin_y == pytest.approx((48 + 60 + 20) / 720)


def test_safe_margins_capped_at_half():
    assert calculate_safe_margins(144, 48, 60, VideoInfo(100, 100)) == (0.5, 0.5)


@pytest.mark.parametrize("count", range(1, 11))
def test_plan_has_one_placement_per_index(count, hd_video):
    config = WatermarkConfig(text="SAMPLE", font_size=20, amplitude=20, count=count)
    plan = plan_layout(config, hd_video, np.random.default_rng(count))

    assert [p.index for p in plan.placements] == list(range(count))
    for region in plan.regions:
        assert 0.0 <= region.x <= 1.0
        assert 0.0 <= region.y <= 1.0
        assert region.x + region.width <= 1.0 + 1e-9
        assert region.y + region.height <= 1.0 + 1e-9


@pytest.mark.parametrize("seed", range(20))
def test_clean_placements_never_overlap_earlier_ones(seed):
    config = WatermarkConfig(text="SAMPLE", font_size=24, amplitude=30, count=6)
    plan = plan_layout(config, VideoInfo(1920, 1080), np.random.default_rng(seed))

    for earlier, later in itertools.combinations(plan.placements, 2):
        if later.outcome is PlacementOutcome.CLEAN:
            assert not later.region.overlaps(earlier.region)


def test_roomy_frame_places_everything_cleanly():
    config = WatermarkConfig(text="A", font_size=8, amplitude=10, count=3)
    plan = plan_layout(config, VideoInfo(3840, 2160), np.random.default_rng(7))

    assert not plan.exhausted
    for a, b in itertools.combinations(plan.regions, 2):
        assert not a.overlaps(b)


def test_centers_stay_inside_safe_margins(hd_video):
    config = WatermarkConfig(text="SAMPLE", count=5)
    margin_x, margin_y = calculate_safe_margins(config.text_width, config.text_height, config.amplitude, hd_video)

    for seed in range(10):
        plan = plan_layout(config, hd_video, np.random.default_rng(seed))
        for p in plan.placements:
            assert margin_x <= p.center_x <= 1 - margin_x
            assert margin_y <= p.center_y <= 1 - margin_y


def test_tiny_frame_terminates_with_overlaps():
    config = WatermarkConfig(text="SAMPLE", font_size=40, amplitude=60, count=3)
    plan = plan_layout(config, VideoInfo(100, 100), np.random.default_rng(0))

    assert len(plan.placements) == 3
    assert plan.exhausted
    assert [p.outcome for p in plan.placements] == [
        PlacementOutcome.CLEAN,
        PlacementOutcome.OVERLAPPING,
        PlacementOutcome.OVERLAPPING,
    ]
    assert [p.attempts for p in plan.placements] == [1, 50, 50]
    for p in plan.placements:
        assert (p.center_x, p.center_y) == (0.5, 0.5)
        assert p.region == Region(0.0, 0.0, 1.0, 1.0)


def test_tiny_frame_with_small_text_still_places_three():
    config = WatermarkConfig(text="A", font_size=8, amplitude=10, count=3)
    plan = plan_layout(config, VideoInfo(100, 100), np.random.default_rng(3))
    assert len(plan.placements) == 3


def test_place_watermark_on_empty_frame_takes_first_candidate(rng):
    placement = place_watermark(0, (), (0.1, 0.1), (0.2, 0.2), rng)
    assert placement.outcome is PlacementOutcome.CLEAN
    assert placement.attempts == 1


def test_place_watermark_gives_up_after_budget(rng):
    occupied = (Region(0.0, 0.0, 1.0, 1.0),)
    placement = place_watermark(1, occupied, (0.1, 0.1), (0.2, 0.2), rng, max_attempts=5)
    assert placement.outcome is PlacementOutcome.OVERLAPPING
    assert placement.attempts == 5
    assert placement.index == 1


def test_same_seed_same_layout(hd_video):
    config = WatermarkConfig(text="SAMPLE", count=4)
    first = plan_layout(config, hd_video, np.random.default_rng(99))
    second = plan_layout(config, hd_video, np.random.default_rng(99))
    assert first == second


def test_plan_reports_amplitude_percent(config, hd_video, rng):
    plan = plan_layout(config, hd_video, rng)
    assert plan.amplitude_percent == pytest.approx(60 / 720)
    assert plan.text_width == pytest.approx(144)
