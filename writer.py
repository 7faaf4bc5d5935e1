"""Report writer for per-frame score records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from detector import BLACKOUT_SCORE, BLUR_SCORE, FLASH_SCORE, SCENE_CHANGE_SCORE, SMEAR_SCORE
from logging_utils import get_logger

LOGGER = get_logger(__name__)

SCORE_COLUMNS = [BLUR_SCORE, BLACKOUT_SCORE, FLASH_SCORE, SMEAR_SCORE, SCENE_CHANGE_SCORE]
REPORT_COLUMNS = ["source", "frame_index", "timestamp_ms", *SCORE_COLUMNS, "error_kind", "error"]
REPORT_FORMATS = {".jsonl": "jsonl", ".csv": "csv", ".parquet": "parquet"}


@dataclass
class ScoreRecord:
    """Scores (or the failure) for one image or video frame."""

    source: str
    scores: Dict[str, float] = field(default_factory=dict)
    frame_index: Optional[int] = None
    timestamp_ms: Optional[float] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def to_row(self) -> Dict[str, object]:
        row: Dict[str, object] = {
            "source": self.source,
            "frame_index": self.frame_index,
            "timestamp_ms": self.timestamp_ms,
            "error_kind": self.error_kind,
            "error": self.error,
        }
        for name in SCORE_COLUMNS:
            row[name] = self.scores.get(name)
        return row


def format_for_path(path: Path, default: str = "jsonl") -> str:
    """Infer report format from a file suffix."""

    return REPORT_FORMATS.get(path.suffix.lower(), default)


class ReportWriter:
    """Batching helper for report persistence."""

    def __init__(self, report_path: Path, report_format: Optional[str] = None, batch_size: int = 256):
        self.report_path = report_path
        self.report_format = report_format or format_for_path(report_path)
        self.batch_size = batch_size
        self._buffer: List[ScoreRecord] = []
        self._pq_writer = None
        self._csv_has_header = False
        self.rows_written = 0
        report_path.parent.mkdir(parents=True, exist_ok=True)
        if report_path.exists():
            report_path.unlink()

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def add(self, record: ScoreRecord) -> None:
        self._buffer.append(record)
        if len(self._buffer) >= self.batch_size:
            self._flush_buffer()

    def close(self) -> None:
        self._flush_buffer()
        if self._pq_writer is not None:
            self._pq_writer.close()
            self._pq_writer = None
        LOGGER.info("Wrote %d report rows to %s", self.rows_written, self.report_path)

    def _flush_buffer(self) -> None:
        if not self._buffer:
            return
        df = pd.DataFrame([record.to_row() for record in self._buffer], columns=REPORT_COLUMNS)
        if self.report_format == "parquet":
            self._write_parquet(df)
        elif self.report_format == "csv":
            df.to_csv(
                self.report_path,
                mode="a",
                header=not self._csv_has_header,
                index=False,
            )
            self._csv_has_header = True
        else:  # jsonl
            with self.report_path.open("a", encoding="utf-8") as f:
                for record in self._buffer:
                    f.write(json.dumps(record.to_row()))
                    f.write("\n")
        self.rows_written += len(self._buffer)
        self._buffer.clear()

    def _write_parquet(self, df: pd.DataFrame) -> None:
        import pyarrow as pa
        import pyarrow.parquet as pq

        schema = pa.schema(
            [
                ("source", pa.string()),
                ("frame_index", pa.int64()),
                ("timestamp_ms", pa.float64()),
                *[(name, pa.float64()) for name in SCORE_COLUMNS],
                ("error_kind", pa.string()),
                ("error", pa.string()),
            ]
        )
        df = df.astype({"frame_index": "Int64"})
        table = pa.Table.from_pandas(df, schema=schema, preserve_index=False)
        if self._pq_writer is None:
            self._pq_writer = pq.ParquetWriter(self.report_path, schema=schema)
        self._pq_writer.write_table(table)


def write_report(
    records: Iterable[ScoreRecord],
    report_path: Path,
    report_format: Optional[str] = None,
    batch_size: int = 256,
) -> Path:
    """One-shot helper writing all *records* to *report_path*."""

    with ReportWriter(report_path, report_format, batch_size) as writer:
        for record in records:
            writer.add(record)
    return report_path
