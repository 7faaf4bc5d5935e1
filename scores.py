"""Blur, blackout, flash and scene-change score calculators.

Every score is a float in ``[0, 100]`` where higher means "more tampered".
"""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from config import BlackoutConfig, BlurConfig, FlashConfig, SceneChangeConfig
from errors import InvalidArgumentError
from frame_stats import FrameStats
from histogram import HISTOGRAM_BINS, band_percentage


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def blur_score(stats: FrameStats, config: Optional[BlurConfig] = None) -> float:
    """100 for a frame with no high-frequency content, 0 once the Laplacian variance hits the ceiling."""

    config = config or BlurConfig()
    return 100.0 - clamp(stats.laplacian_variance / config.variance_ceiling * 100.0)


def blackout_score(stats: FrameStats, config: Optional[BlackoutConfig] = None) -> float:
    """Low mean intensity and a large dark-pixel share both push the score up."""

    config = config or BlackoutConfig()
    dark_pct = band_percentage(stats.histogram, 0, config.dark_level)
    intensity_term = max(0.0, (config.mean_pivot - stats.mean_intensity) * config.mean_weight)
    pixel_term = dark_pct * config.dark_pct_weight
    return clamp(intensity_term + pixel_term)


def flash_score(stats: FrameStats, config: Optional[FlashConfig] = None) -> float:
    config = config or FlashConfig()
    bright_pct = band_percentage(stats.histogram, config.bright_level, HISTOGRAM_BINS)
    return clamp(bright_pct * config.bright_pct_weight)


def scene_change_score(
    current: np.ndarray,
    previous: Optional[np.ndarray],
    config: Optional[SceneChangeConfig] = None,
) -> float:
    """Normalized mean absolute difference between two grayscale frames.

    Returns 0 when there is no previous frame. Frames of different shapes are
    rejected rather than resized.
    """

    if previous is None:
        return 0.0
    if current.shape != previous.shape:
        raise InvalidArgumentError(
            f"Frame dimensions differ: current {current.shape} vs previous {previous.shape}"
        )
    config = config or SceneChangeConfig()
    avg_diff = float(np.mean(cv2.absdiff(current, previous)))
    return clamp(avg_diff / config.full_change_diff * 100.0)
