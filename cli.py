#!/usr/bin/env python
"""Command line entry point: score images, frame pairs or video files."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from config import ScoringConfig, default_config, load_config
from detector import detect_scene_change
from errors import DecodeFailureError, InvalidArgumentError
from logging_utils import get_logger, setup_logging
from pipeline import scan_video, score_images
from writer import ScoreRecord, format_for_path, write_report

LOGGER = get_logger(__name__)

EXIT_INVALID_ARGUMENT = 2
EXIT_DECODE_FAILURE = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="tamper-score",
        description="Camera tamper scores (blur, blackout, flash, smear, scene change) for images and videos.",
    )
    p.add_argument("--config", type=Path, help="JSON or YAML scoring config.")
    p.add_argument("--output", type=Path, help="Report file (.jsonl, .csv or .parquet). Prints JSON lines if omitted.")
    p.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-dir", type=Path, help="Also write logs to this directory.")
    p.add_argument("--workers", type=int, help="Worker threads for batch scoring.")
    p.add_argument("--progress", action="store_true", help="Show a progress bar.")

    sub = p.add_subparsers(dest="command", required=True)

    image = sub.add_parser("image", help="Score one or more image files.")
    image.add_argument("paths", nargs="+", type=Path)
    group = image.add_mutually_exclusive_group()
    group.add_argument("--no-smear", action="store_true", help="Skip the smear composite.")
    group.add_argument("--smear-only", action="store_true", help="Only compute the smear score.")

    scene = sub.add_parser("scene", help="Scene change between two frames.")
    scene.add_argument("current", type=Path)
    scene.add_argument("previous", type=Path)

    video = sub.add_parser("video", help="Scan sampled frames of a video file.")
    video.add_argument("path", type=Path)
    video.add_argument("--target-fps", type=float, help="Frames per second to sample.")
    video.add_argument("--max-frames", type=int, help="Stop after this many sampled frames.")
    video.add_argument("--no-smear", action="store_true", help="Skip the smear composite.")
    return p.parse_args(argv)


def _load_base_config(path: Optional[Path]) -> ScoringConfig:
    if path is None:
        return default_config()
    try:
        return load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as err:
        raise InvalidArgumentError(f"Cannot load config {path}: {err}") from err


def _build_config(args: argparse.Namespace) -> ScoringConfig:
    cfg = _load_base_config(args.config).dict()
    if args.log_level:
        cfg["log_level"] = args.log_level
    if args.workers:
        cfg["max_workers"] = args.workers
    if args.command == "video":
        if args.target_fps:
            cfg["sampling"]["target_fps"] = args.target_fps
        if args.max_frames:
            cfg["sampling"]["max_frames"] = args.max_frames
    try:
        return ScoringConfig(**cfg)
    except ValueError as err:
        raise InvalidArgumentError(f"Invalid option: {err}") from err


def _emit(records: List[ScoreRecord], args: argparse.Namespace, config: ScoringConfig) -> None:
    if args.output:
        write_report(
            records,
            args.output,
            format_for_path(args.output, config.output.report_format),
            config.output.batch_size,
        )
        return
    for record in records:
        print(json.dumps(record.to_row()))


def run(args: argparse.Namespace) -> int:
    config = _build_config(args)
    setup_logging(config.log_level, args.log_dir)

    if args.command == "image":
        mode = "smear" if args.smear_only else "sabotage"
        records = score_images(
            [str(path) for path in args.paths],
            mode=mode,
            config=config,
            include_smear=not args.no_smear,
            progress=args.progress,
        )
    elif args.command == "scene":
        scores = detect_scene_change(str(args.current), str(args.previous), config)
        records = [ScoreRecord(source=f"{args.current}|{args.previous}", scores=scores)]
    else:
        records = scan_video(args.path, config, include_smear=not args.no_smear, progress=args.progress)

    _emit(records, args, config)
    failures = [record for record in records if not record.ok]
    if not failures:
        return 0
    if any(record.error_kind == DecodeFailureError.kind.value for record in failures):
        return EXIT_DECODE_FAILURE
    return EXIT_INVALID_ARGUMENT


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return run(args)
    except InvalidArgumentError as err:
        LOGGER.error("Invalid input: %s", err)
        return EXIT_INVALID_ARGUMENT
    except DecodeFailureError as err:
        LOGGER.error("Unreadable image: %s", err)
        return EXIT_DECODE_FAILURE


if __name__ == "__main__":
    sys.exit(main())
