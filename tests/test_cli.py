"""Tests for the command line entry point."""

import json

import cv2
import numpy as np
import pandas as pd

from cli import EXIT_DECODE_FAILURE, EXIT_INVALID_ARGUMENT, main


def _write(path, value, shape=(16, 16)):
    cv2.imwrite(str(path), np.full(shape, value, dtype=np.uint8))
    return path


def test_image_command_prints_json_lines(tmp_path, capsys):
    black = _write(tmp_path / "black.png", 0)
    assert main(["image", str(black)]) == 0
    row = json.loads(capsys.readouterr().out.strip())
    assert row["source"] == str(black)
    assert row["blackoutScore"] == 100.0
    assert row["smearScore"] == 100.0


def test_image_command_writes_report(tmp_path):
    images = [_write(tmp_path / f"f{idx}.png", idx * 100) for idx in range(3)]
    report = tmp_path / "report.csv"
    assert main(["--output", str(report), "image", "--no-smear", *map(str, images)]) == 0
    df = pd.read_csv(report)
    assert len(df) == 3
    assert df["smearScore"].isna().all()


def test_smear_only_command(tmp_path, capsys):
    image = _write(tmp_path / "grey.png", 128)
    assert main(["image", "--smear-only", str(image)]) == 0
    row = json.loads(capsys.readouterr().out.strip())
    assert row["blurScore"] is None
    assert row["smearScore"] is not None


def test_scene_command(tmp_path, capsys):
    current = _write(tmp_path / "cur.png", 100)
    previous = _write(tmp_path / "prev.png", 50)
    assert main(["scene", str(current), str(previous)]) == 0
    assert json.loads(capsys.readouterr().out.strip())["sceneChangeScore"] == 100.0


def test_scene_command_rejects_mismatched_frames(tmp_path):
    current = _write(tmp_path / "cur.png", 100, shape=(16, 16))
    previous = _write(tmp_path / "prev.png", 50, shape=(8, 16))
    assert main(["scene", str(current), str(previous)]) == EXIT_INVALID_ARGUMENT


def test_unreadable_image_exit_code(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not a png")
    assert main(["image", str(broken)]) == EXIT_DECODE_FAILURE


def test_missing_config_file_is_invalid_argument(tmp_path):
    image = _write(tmp_path / "grey.png", 128)
    assert main(["--config", str(tmp_path / "absent.yaml"), "image", str(image)]) == EXIT_INVALID_ARGUMENT


def test_invalid_config_values_are_invalid_argument(tmp_path):
    image = _write(tmp_path / "grey.png", 128)
    config_path = tmp_path / "bad.json"
    config_path.write_text(json.dumps({"blur": {"variance_ceiling": -1}}), encoding="utf-8")
    assert main(["--config", str(config_path), "image", str(image)]) == EXIT_INVALID_ARGUMENT


def test_malformed_yaml_config_is_invalid_argument(tmp_path):
    image = _write(tmp_path / "grey.png", 128)
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("blur: [unclosed\n", encoding="utf-8")
    assert main(["--config", str(config_path), "image", str(image)]) == EXIT_INVALID_ARGUMENT
