"""Unit tests for the smear composite."""

import numpy as np
import pytest

from config import ScoringConfig, SmearConfig
from frame_stats import FrameStats, compute_frame_stats
from errors import InvalidArgumentError
from smear import BandThresholds, band_thresholds, intensity_score, remap_combined_score, smear_breakdown, smear_score


def _stats(mean, stddev=0.0, variance=0.0, edges=0.0, dark=0.0, mid=0.0, bright=0.0) -> FrameStats:
    return FrameStats(
        histogram=np.zeros(256, dtype=np.int64),
        mean_intensity=mean,
        stddev_intensity=stddev,
        laplacian_variance=variance,
        edge_density=edges,
        dark_pct=dark,
        mid_pct=mid,
        bright_pct=bright,
    )


def test_remap_keeps_discontinuity_at_breakpoint():
    assert remap_combined_score(20.0) == pytest.approx(10.0)
    assert remap_combined_score(20.0 + 1e-9) == pytest.approx(20.0)
    assert remap_combined_score(0.0) == 0.0
    assert remap_combined_score(30.0) == pytest.approx(35.0)
    assert remap_combined_score(80.0) == 100.0


def test_band_terms_are_not_exclusive():
    # factor 0.5: dark threshold 9.5, mid threshold 16, bright threshold 9.5
    stats = _stats(mean=60.0, dark=50.0, mid=50.0)
    assert intensity_score(stats) == pytest.approx(50.0 * 0.5 + 50.0 * 0.3)


def test_bright_mean_adds_to_intensity_score():
    stats = _stats(mean=200.0, bright=100.0)
    assert intensity_score(stats) == pytest.approx(80.0 * 0.8 + 100.0 * 0.5)


def test_thresholds_follow_brightness():
    dim = smear_breakdown(_stats(mean=0.0, dark=100.0))
    assert dim.brightness_factor == 0.0
    assert dim.dark_threshold == pytest.approx(8.0)
    assert dim.bright_threshold == pytest.approx(11.0)
    assert dim.mid_threshold == pytest.approx(15.0)

    bright = smear_breakdown(_stats(mean=240.0, bright=100.0))
    assert bright.brightness_factor == 1.0
    assert bright.dark_threshold == pytest.approx(11.0)
    assert bright.bright_threshold == pytest.approx(8.0)
    assert bright.mid_threshold == pytest.approx(17.0)


def test_breakdown_of_known_frame():
    stats = _stats(mean=128.0, stddev=5.0, variance=500.0, edges=0.1, mid=100.0)
    result = smear_breakdown(stats)
    assert result.blur_score == pytest.approx(50.0)
    assert result.contrast_score == pytest.approx(50.0)
    assert result.edge_score == pytest.approx(85.0)
    assert result.base_score == pytest.approx(57.0)
    assert result.intensity_score == pytest.approx(6.4 + 30.0)
    assert result.combined_score == pytest.approx(57.0 + 36.4 * 0.4)
    assert result.smear_score == pytest.approx(20.0 + (71.56 - 20.0) * 1.5)
    assert set(result.to_dict()) >= {"smear_score", "combined_score"}


@pytest.mark.parametrize("value", [0, 60, 128, 255])
def test_constant_frame_is_fully_smeared(value):
    stats = compute_frame_stats(np.full((16, 16), value, dtype=np.uint8))
    result = smear_breakdown(stats)
    assert result.blur_score == 100.0
    assert result.contrast_score == 100.0
    assert result.edge_score == 100.0
    assert result.smear_score == 100.0


def test_textured_frame_scores_low():
    gray = (np.indices((64, 64)).sum(axis=0) % 2 * 255).astype(np.uint8)
    stats = _stats(
        mean=127.5,
        stddev=127.5,
        variance=1e6,
        edges=0.9,
        dark=50.0,
        bright=50.0,
    )
    # base 0, intensity 6 + 25 + 25 = 56 -> combined 22.4 -> 23.6
    assert smear_score(stats) == pytest.approx(20.0 + 2.4 * 1.5)
    assert 0.0 <= smear_score(compute_frame_stats(gray)) <= 100.0


def test_smear_needs_edge_density():
    stats = compute_frame_stats(np.zeros((4, 4), dtype=np.uint8), with_edges=False)
    with pytest.raises(InvalidArgumentError):
        smear_score(stats)


def test_custom_breakpoint():
    config = ScoringConfig(smear=SmearConfig(breakpoint=50.0))
    assert remap_combined_score(40.0, config.smear) == pytest.approx(20.0)


def test_band_thresholds_at_half_brightness():
    assert band_thresholds(0.5, SmearConfig()) == BandThresholds(dark=9.5, mid=16.0, bright=9.5)


def test_intensity_score_uses_given_thresholds():
    stats = _stats(mean=60.0, dark=50.0, mid=50.0)
    assert intensity_score(stats, SmearConfig(), BandThresholds(dark=60.0, mid=60.0, bright=60.0)) == 0.0
    assert intensity_score(stats, SmearConfig(), BandThresholds(dark=40.0, mid=60.0, bright=60.0)) == pytest.approx(25.0)
