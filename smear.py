"""Composite smear score: sharpness, contrast, edges and intensity bands."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, NamedTuple, Optional

from config import ScoringConfig, SmearConfig
from errors import InvalidArgumentError
from frame_stats import FrameStats
from scores import blur_score, clamp


class BandThresholds(NamedTuple):
    """Brightness-adapted percentage thresholds of the three intensity bands."""

    dark: float
    mid: float
    bright: float


@dataclass(frozen=True)
class SmearBreakdown:
    """Intermediate values of the smear composite for one frame."""

    blur_score: float
    contrast_score: float
    edge_score: float
    base_score: float
    brightness_factor: float
    dark_threshold: float
    mid_threshold: float
    bright_threshold: float
    intensity_score: float
    combined_score: float
    smear_score: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def remap_combined_score(combined: float, config: Optional[SmearConfig] = None) -> float:
    """Stretch scores above the breakpoint, compress those at or below it.

    The two branches do not meet: just above the breakpoint the result tends
    to the breakpoint itself, at the breakpoint it is ``breakpoint * low_factor``.
    """

    config = config or SmearConfig()
    if combined > config.breakpoint:
        return min(100.0, config.breakpoint + (combined - config.breakpoint) * config.high_slope)
    return combined * config.low_factor


def intensity_score(
    stats: FrameStats,
    config: Optional[SmearConfig] = None,
    thresholds: Optional[BandThresholds] = None,
) -> float:
    config = config or SmearConfig()
    if thresholds is None:
        thresholds = band_thresholds(brightness_factor(stats, config), config)

    score = 0.0
    if stats.mean_intensity > config.brightness_pivot:
        score += (stats.mean_intensity - config.brightness_pivot) * config.bright_mean_weight
    # not exclusive: several bands may fire for the same frame
    if stats.dark_pct > thresholds.dark:
        score += stats.dark_pct * config.dark_pct_weight
    if stats.bright_pct > thresholds.bright:
        score += stats.bright_pct * config.bright_pct_weight
    if stats.mid_pct > thresholds.mid:
        score += stats.mid_pct * config.mid_pct_weight
    return score


def brightness_factor(stats: FrameStats, config: SmearConfig) -> float:
    return min(1.0, stats.mean_intensity / config.brightness_pivot)


def band_thresholds(factor: float, config: SmearConfig) -> BandThresholds:
    return BandThresholds(
        dark=config.dark_threshold_base + factor * config.dark_threshold_span,
        mid=config.mid_threshold_base + factor * config.mid_threshold_span,
        bright=config.bright_threshold_base + (1.0 - factor) * config.bright_threshold_span,
    )


def smear_breakdown(stats: FrameStats, config: Optional[ScoringConfig] = None) -> SmearBreakdown:
    """Evaluate the smear composite and keep every intermediate term."""

    config = config or ScoringConfig()
    smear = config.smear
    if stats.edge_density is None:
        raise InvalidArgumentError("smear scoring needs edge density; compute stats with with_edges=True")

    blur = blur_score(stats, config.blur)
    contrast = 100.0 - clamp(stats.stddev_intensity / smear.contrast_stddev_ceiling * 100.0)
    edge = 100.0 - clamp(stats.edge_density * smear.edge_density_weight)
    base = blur * smear.blur_weight + contrast * smear.contrast_weight + edge * smear.edge_weight

    factor = brightness_factor(stats, smear)
    thresholds = band_thresholds(factor, smear)
    intensity = intensity_score(stats, smear, thresholds)
    combined = base + intensity * smear.intensity_weight

    return SmearBreakdown(
        blur_score=blur,
        contrast_score=contrast,
        edge_score=edge,
        base_score=base,
        brightness_factor=factor,
        dark_threshold=thresholds.dark,
        mid_threshold=thresholds.mid,
        bright_threshold=thresholds.bright,
        intensity_score=intensity,
        combined_score=combined,
        smear_score=remap_combined_score(combined, smear),
    )


def smear_score(stats: FrameStats, config: Optional[ScoringConfig] = None) -> float:
    return smear_breakdown(stats, config).smear_score
