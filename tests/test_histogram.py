"""Unit tests for histogram helpers."""

import numpy as np

from histogram import band_percentage, compute_histogram


def test_histogram_counts_every_pixel():
    gray = np.arange(256, dtype=np.uint8).reshape(16, 16)
    hist = compute_histogram(gray)
    assert hist.shape == (256,)
    assert int(hist.sum()) == gray.size
    assert (hist == 1).all()


def test_histogram_of_constant_frame():
    gray = np.full((10, 20), 42, dtype=np.uint8)
    hist = compute_histogram(gray)
    assert hist[42] == 200
    assert int(hist.sum()) == 200


def test_empty_buffer_gives_zero_histogram():
    hist = compute_histogram(np.zeros((0, 5), dtype=np.uint8))
    assert hist.shape == (256,)
    assert int(hist.sum()) == 0
    assert band_percentage(hist, 0, 256) == 0.0


def test_band_percentage_is_half_open():
    gray = np.array([[74, 75, 199, 200]], dtype=np.uint8)
    hist = compute_histogram(gray)
    assert band_percentage(hist, 0, 75) == 25.0
    assert band_percentage(hist, 200, 256) == 25.0
    assert band_percentage(hist, 75, 200) == 50.0
