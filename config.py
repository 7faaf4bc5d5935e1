"""Configuration models for the camera tamper scoring engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, validator


class BlurConfig(BaseModel):
    """Laplacian-variance ceiling mapped to a blur score of 0."""

    variance_ceiling: float = Field(1000.0, gt=0.0)


class BlackoutConfig(BaseModel):
    """Dark-frame heuristics."""

    dark_level: int = Field(75, ge=0, le=256)
    mean_pivot: float = Field(60.0, ge=0.0, le=255.0)
    mean_weight: float = Field(1.5, ge=0.0)
    dark_pct_weight: float = Field(0.6, ge=0.0)


class FlashConfig(BaseModel):
    """Over-exposure heuristics."""

    bright_level: int = Field(200, ge=0, le=255)
    bright_pct_weight: float = Field(3.0, ge=0.0)


class SceneChangeConfig(BaseModel):
    """Mean absolute difference treated as a full scene change."""

    full_change_diff: float = Field(50.0, gt=0.0)


class EdgeConfig(BaseModel):
    """Canny hysteresis thresholds used for edge density."""

    low_threshold: float = Field(50.0, ge=0.0)
    high_threshold: float = Field(150.0, ge=0.0)

    @validator("high_threshold")
    def _validate_thresholds(cls, value: float, values: Dict[str, float]) -> float:
        """Ensure the high threshold is above the low one."""

        if "low_threshold" in values and value <= values["low_threshold"]:
            raise ValueError("high_threshold must be greater than low_threshold")
        return value


class SmearConfig(BaseModel):
    """Weights and thresholds of the smear composite."""

    contrast_stddev_ceiling: float = Field(10.0, gt=0.0)
    edge_density_weight: float = Field(150.0, ge=0.0)
    blur_weight: float = Field(0.5, ge=0.0)
    contrast_weight: float = Field(0.3, ge=0.0)
    edge_weight: float = Field(0.2, ge=0.0)

    mid_band_start: int = Field(85, ge=1, le=255)
    bright_band_start: int = Field(170, ge=1, le=255)

    brightness_pivot: float = Field(120.0, gt=0.0)
    bright_mean_weight: float = Field(0.8, ge=0.0)
    dark_threshold_base: float = Field(8.0, ge=0.0)
    dark_threshold_span: float = Field(3.0, ge=0.0)
    bright_threshold_base: float = Field(8.0, ge=0.0)
    bright_threshold_span: float = Field(3.0, ge=0.0)
    mid_threshold_base: float = Field(15.0, ge=0.0)
    mid_threshold_span: float = Field(2.0, ge=0.0)
    dark_pct_weight: float = Field(0.5, ge=0.0)
    bright_pct_weight: float = Field(0.5, ge=0.0)
    mid_pct_weight: float = Field(0.3, ge=0.0)
    intensity_weight: float = Field(0.4, ge=0.0)

    breakpoint: float = Field(20.0, ge=0.0, le=100.0)
    high_slope: float = Field(1.5, ge=0.0)
    low_factor: float = Field(0.5, ge=0.0)

    @validator("bright_band_start")
    def _validate_bands(cls, value: int, values: Dict[str, int]) -> int:
        """Ensure band edges are ascending."""

        if "mid_band_start" in values and value <= values["mid_band_start"]:
            raise ValueError("bright_band_start must be greater than mid_band_start")
        return value


class SamplingConfig(BaseModel):
    """Frame sampling when scanning video files."""

    target_fps: float = Field(2.0, ge=0.1, le=120.0)
    max_frames: Optional[PositiveInt] = None


class OutputConfig(BaseModel):
    """How score reports are persisted."""

    report_format: Literal["jsonl", "csv", "parquet"] = "jsonl"
    batch_size: PositiveInt = 256


class ScoringConfig(BaseModel):
    """Top-level configuration tying everything together."""

    blur: BlurConfig = BlurConfig()
    blackout: BlackoutConfig = BlackoutConfig()
    flash: FlashConfig = FlashConfig()
    scene_change: SceneChangeConfig = SceneChangeConfig()
    edges: EdgeConfig = EdgeConfig()
    smear: SmearConfig = SmearConfig()
    sampling: SamplingConfig = SamplingConfig()
    output: OutputConfig = OutputConfig()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    max_workers: PositiveInt = 4


def default_config() -> ScoringConfig:
    """Return a ready-to-use default configuration."""

    return ScoringConfig()


def config_to_dict(config: ScoringConfig) -> Dict[str, Any]:
    """Plain, JSON-serializable representation of *config*."""

    return json.loads(config.json())


def load_config(path: Path) -> ScoringConfig:
    """Load config from a JSON or YAML file."""

    path = Path(path)
    if path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    return ScoringConfig(**data)


def save_config(config: ScoringConfig, path: Path) -> None:
    """Persist config to disk."""

    path = Path(path)
    data = config_to_dict(config)
    if path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
    else:
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
