"""Turn image paths, encoded bytes or raw arrays into grayscale pixel buffers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from errors import DecodeFailureError, InvalidArgumentError
from logging_utils import get_logger

LOGGER = get_logger(__name__)

FrameSource = Union[str, "os.PathLike[str]", bytes, bytearray, memoryview, np.ndarray]


def _validate_array(frame: np.ndarray) -> np.ndarray:
    if frame.dtype != np.uint8:
        raise InvalidArgumentError(f"Expected uint8 pixels, got {frame.dtype}")
    if frame.ndim == 3 and frame.shape[2] == 1:
        frame = frame[:, :, 0]
    if frame.ndim not in (2, 3) or (frame.ndim == 3 and frame.shape[2] != 3):
        raise InvalidArgumentError(f"Expected a (rows, cols) or (rows, cols, 3) array, got shape {frame.shape}")
    if frame.size == 0:
        raise DecodeFailureError("Frame has no pixels")
    return frame


def _read_path(path: Path, flags: int) -> np.ndarray:
    if not path.is_file():
        raise InvalidArgumentError(f"Image path does not exist: {path}")
    image = cv2.imread(str(path), flags)
    if image is None or image.size == 0:
        raise DecodeFailureError(f"Failed to decode image {path}")
    return image


def _read_buffer(data: Union[bytes, bytearray, memoryview], flags: int) -> np.ndarray:
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        raise DecodeFailureError("Image buffer is empty")
    image = cv2.imdecode(buffer, flags)
    if image is None or image.size == 0:
        raise DecodeFailureError(f"Failed to decode {buffer.size}-byte image buffer")
    return image


def decode_frame(source: FrameSource, color: bool = False) -> np.ndarray:
    """Decode *source* and return a non-empty grayscale ``uint8`` buffer.

    Paths and byte buffers are decoded with OpenCV. With ``color=True`` the
    image is decoded as BGR first and reduced to grayscale afterwards, which
    can differ by a rounding step from decoding straight to grayscale.
    Arrays are validated and reduced the same way when they carry 3 channels.
    """

    flags = cv2.IMREAD_COLOR if color else cv2.IMREAD_GRAYSCALE
    if isinstance(source, np.ndarray):
        image = _validate_array(source)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        image = _read_buffer(source, flags)
    elif isinstance(source, (str, os.PathLike)):
        image = _read_path(Path(source), flags)
    else:
        raise InvalidArgumentError(
            f"Expected a path, an encoded image buffer or a uint8 array, got {type(source).__name__}"
        )

    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    image = np.ascontiguousarray(image)
    LOGGER.debug("Decoded frame %dx%d", image.shape[1], image.shape[0])
    return image
