"""Public scoring entry points: sabotage, scene-change and smear reports."""

from __future__ import annotations

from typing import Dict, Optional

from config import ScoringConfig
from errors import InvalidArgumentError
from frame_decoder import FrameSource, decode_frame
from frame_stats import compute_frame_stats
from logging_utils import get_logger
from scores import blackout_score, blur_score, flash_score, scene_change_score
from smear import smear_score

LOGGER = get_logger(__name__)

ScoreResult = Dict[str, float]

BLUR_SCORE = "blurScore"
BLACKOUT_SCORE = "blackoutScore"
FLASH_SCORE = "flashScore"
SMEAR_SCORE = "smearScore"
SCENE_CHANGE_SCORE = "sceneChangeScore"


def detect_sabotage(
    source: FrameSource,
    include_smear: bool = True,
    config: Optional[ScoringConfig] = None,
) -> ScoreResult:
    """Blur, blackout, flash and optionally smear scores for one frame."""

    config = config or ScoringConfig()
    gray = decode_frame(source)
    stats = compute_frame_stats(gray, config, with_edges=include_smear)
    result = {
        BLUR_SCORE: blur_score(stats, config.blur),
        BLACKOUT_SCORE: blackout_score(stats, config.blackout),
        FLASH_SCORE: flash_score(stats, config.flash),
    }
    if include_smear:
        result[SMEAR_SCORE] = smear_score(stats, config)
    LOGGER.debug("Sabotage scores: %s", result)
    return result


def detect_scene_change(
    current: FrameSource,
    previous: Optional[FrameSource],
    config: Optional[ScoringConfig] = None,
) -> ScoreResult:
    """Scene-change score between two frames of identical dimensions."""

    if previous is None:
        raise InvalidArgumentError("Scene change detection needs a previous frame")
    config = config or ScoringConfig()
    current_gray = decode_frame(current)
    previous_gray = decode_frame(previous)
    result = {SCENE_CHANGE_SCORE: scene_change_score(current_gray, previous_gray, config.scene_change)}
    LOGGER.debug("Scene change scores: %s", result)
    return result


def detect_smear(source: FrameSource, config: Optional[ScoringConfig] = None) -> ScoreResult:
    """Smear score for one frame, decoded in colour and reduced to grayscale."""

    config = config or ScoringConfig()
    gray = decode_frame(source, color=True)
    stats = compute_frame_stats(gray, config, with_edges=True)
    result = {SMEAR_SCORE: smear_score(stats, config)}
    LOGGER.debug("Smear scores: %s", result)
    return result
