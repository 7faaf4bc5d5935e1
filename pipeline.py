"""Batch orchestration: score many images, or the sampled frames of a video."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Literal, Optional, Sequence

import numpy as np
from tqdm import tqdm

from config import ScoringConfig
from detector import SCENE_CHANGE_SCORE, detect_sabotage, detect_smear
from errors import TamperScoringError
from frame_decoder import FrameSource
from logging_utils import get_logger
from scores import scene_change_score
from video_reader import iter_sampled_frames
from writer import ScoreRecord

LOGGER = get_logger(__name__)

ScoreMode = Literal["sabotage", "smear"]


def _describe(source: FrameSource, index: int) -> str:
    if isinstance(source, (bytes, bytearray, memoryview, np.ndarray)):
        return f"<{type(source).__name__}#{index}>"
    return str(source)


def score_one(
    source: FrameSource,
    mode: ScoreMode = "sabotage",
    config: Optional[ScoringConfig] = None,
    include_smear: bool = True,
    label: Optional[str] = None,
) -> ScoreRecord:
    """Score a single source, capturing scoring errors in the record."""

    label = label or _describe(source, 0)
    try:
        if mode == "smear":
            scores = detect_smear(source, config)
        else:
            scores = detect_sabotage(source, include_smear=include_smear, config=config)
    except TamperScoringError as err:
        LOGGER.warning("Failed to score %s: %s", label, err)
        return ScoreRecord(source=label, error_kind=err.kind.value, error=str(err))
    return ScoreRecord(source=label, scores=scores)


def score_images(
    sources: Sequence[FrameSource],
    mode: ScoreMode = "sabotage",
    config: Optional[ScoringConfig] = None,
    include_smear: bool = True,
    progress: bool = False,
) -> List[ScoreRecord]:
    """Score every source on a thread pool; output order matches input order."""

    config = config or ScoringConfig()
    labels = [_describe(source, idx) for idx, source in enumerate(sources)]

    def _run(idx: int) -> ScoreRecord:
        return score_one(sources[idx], mode, config, include_smear, labels[idx])

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        results: Iterable[ScoreRecord] = pool.map(_run, range(len(sources)))
        if progress:
            results = tqdm(results, total=len(sources), desc=f"Scoring [{mode}]", leave=False)
        records = list(results)

    failed = sum(1 for record in records if not record.ok)
    LOGGER.info("Scored %d sources (%d failed)", len(records), failed)
    return records


def scan_video(
    video_path: Path,
    config: Optional[ScoringConfig] = None,
    include_smear: bool = True,
    on_record: Optional[Callable[[ScoreRecord], None]] = None,
    progress: bool = False,
) -> List[ScoreRecord]:
    """Score sampled frames of a video, including change versus the previous sample."""

    config = config or ScoringConfig()
    records: List[ScoreRecord] = []
    prev_gray: Optional[np.ndarray] = None
    frames = iter_sampled_frames(str(video_path), config.sampling)
    if progress:
        frames = tqdm(frames, total=config.sampling.max_frames, desc=f"Scanning {Path(video_path).name}", leave=False)

    for sampled in frames:
        scores = detect_sabotage(sampled.gray, include_smear=include_smear, config=config)
        scores[SCENE_CHANGE_SCORE] = scene_change_score(sampled.gray, prev_gray, config.scene_change)
        prev_gray = sampled.gray
        record = ScoreRecord(
            source=str(video_path),
            scores=scores,
            frame_index=sampled.frame_index,
            timestamp_ms=sampled.timestamp_ms,
        )
        records.append(record)
        if on_record:
            on_record(record)

    LOGGER.info("Scanned %d frames of %s", len(records), video_path)
    return records
