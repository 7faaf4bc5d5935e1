"""256-bin intensity histograms and band percentages."""

from __future__ import annotations

import numpy as np

HISTOGRAM_BINS = 256


def compute_histogram(gray: np.ndarray) -> np.ndarray:
    """Count pixels per intensity level of a ``uint8`` grayscale buffer."""

    if gray.size == 0:
        return np.zeros(HISTOGRAM_BINS, dtype=np.int64)
    return np.bincount(gray.ravel(), minlength=HISTOGRAM_BINS)[:HISTOGRAM_BINS].astype(np.int64)


def band_percentage(hist: np.ndarray, lo: int, hi: int) -> float:
    """Percentage of pixels with intensity in ``[lo, hi)``."""

    total = int(hist.sum())
    if total == 0:
        return 0.0
    return float(hist[max(lo, 0):min(hi, HISTOGRAM_BINS)].sum()) / total * 100.0
