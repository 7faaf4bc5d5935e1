"""Exception types raised at the public scoring boundary."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Coarse failure category reported to callers."""

    INVALID_ARGUMENT = "invalid_argument"
    DECODE_FAILURE = "decode_failure"


class TamperScoringError(Exception):
    """Base exception for all scoring errors."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT


class InvalidArgumentError(TamperScoringError, ValueError):
    """Raised when inputs are missing, of the wrong type or mismatched."""

    kind = ErrorKind.INVALID_ARGUMENT


class DecodeFailureError(TamperScoringError):
    """Raised when a source cannot be decoded into a non-empty pixel buffer."""

    kind = ErrorKind.DECODE_FAILURE
