"""Video reading and frame sampling for tamper scans."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

from config import SamplingConfig
from errors import DecodeFailureError, InvalidArgumentError
from logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass
class SampledFrame:
    """DTO for frames emitted by the sampling iterator."""

    frame_index: int
    timestamp_ms: float
    gray: np.ndarray


def _budget_exhausted(frames_emitted: int, config: SamplingConfig) -> bool:
    return config.max_frames is not None and frames_emitted >= config.max_frames


def _should_emit(timestamp_ms: float, next_allowed_ms: float, frames_emitted: int, config: SamplingConfig) -> bool:
    """Decide whether current frame should be emitted."""

    if _budget_exhausted(frames_emitted, config):
        return False
    return timestamp_ms >= next_allowed_ms


def iter_sampled_frames(video_path: str, config: SamplingConfig) -> Iterator[SampledFrame]:
    """Iterate grayscale frames from a video at roughly ``config.target_fps``."""

    if not Path(video_path).is_file():
        raise InvalidArgumentError(f"Video path does not exist: {video_path}")
    cap = cv2.VideoCapture(str(video_path))
    if not cap.isOpened():
        raise DecodeFailureError(f"Failed to open video {video_path}")

    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
    if fps <= 0:
        fps = 30.0
    target_interval = 1000.0 / config.target_fps
    next_allowed = 0.0
    frames_emitted = 0
    frame_idx = -1

    try:
        while not _budget_exhausted(frames_emitted, config):
            ret, frame = cap.read()
            if not ret:
                break
            frame_idx += 1
            # position is unreliable for some containers; derive it from fps
            timestamp_ms = frame_idx * 1000.0 / fps
            if not _should_emit(timestamp_ms, next_allowed, frames_emitted, config):
                continue
            if frame is None or frame.size == 0:
                raise DecodeFailureError(f"Empty frame {frame_idx} in {video_path}")
            yield SampledFrame(
                frame_index=frame_idx,
                timestamp_ms=timestamp_ms,
                gray=cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY),
            )
            frames_emitted += 1
            next_allowed = timestamp_ms + target_interval
    finally:
        cap.release()
    LOGGER.info("Sampled %d frames from %s", frames_emitted, video_path)
