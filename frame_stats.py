"""Per-frame statistics shared by the score calculators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from config import EdgeConfig, ScoringConfig
from histogram import band_percentage, compute_histogram


@dataclass(frozen=True, eq=False)
class FrameStats:
    """Read-only aggregate of the metrics computed for one frame."""

    histogram: np.ndarray
    mean_intensity: float
    stddev_intensity: float
    laplacian_variance: float
    edge_density: Optional[float]
    dark_pct: float
    mid_pct: float
    bright_pct: float

    @property
    def pixel_count(self) -> int:
        return int(self.histogram.sum())


def mean_stddev(gray: np.ndarray) -> Tuple[float, float]:
    """Population mean and standard deviation of pixel intensities."""

    return float(gray.mean()), float(gray.std())


def laplacian_variance(gray: np.ndarray) -> float:
    """Variance of the 4-neighbour Laplacian response, borders replicated."""

    response = cv2.Laplacian(gray, cv2.CV_64F, ksize=1, borderType=cv2.BORDER_REPLICATE)
    return float(response.var())


def edge_density(gray: np.ndarray, config: Optional[EdgeConfig] = None) -> float:
    """Fraction of pixels marked as edges by Canny hysteresis thresholding."""

    config = config or EdgeConfig()
    edges = cv2.Canny(gray, config.low_threshold, config.high_threshold)
    return float(np.count_nonzero(edges)) / float(edges.size)


def compute_frame_stats(
    gray: np.ndarray,
    config: Optional[ScoringConfig] = None,
    with_edges: bool = True,
) -> FrameStats:
    """Compute every metric the scorers need from a non-empty grayscale buffer.

    Edge detection is the most expensive pass and only the smear composite
    uses it, so callers that skip smear can pass ``with_edges=False``.
    """

    config = config or ScoringConfig()
    hist = compute_histogram(gray)
    mean, stddev = mean_stddev(gray)
    smear = config.smear
    return FrameStats(
        histogram=hist,
        mean_intensity=mean,
        stddev_intensity=stddev,
        laplacian_variance=laplacian_variance(gray),
        edge_density=edge_density(gray, config.edges) if with_edges else None,
        dark_pct=band_percentage(hist, 0, smear.mid_band_start),
        mid_pct=band_percentage(hist, smear.mid_band_start, smear.bright_band_start),
        bright_pct=band_percentage(hist, smear.bright_band_start, 256),
    )
