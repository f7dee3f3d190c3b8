# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Tests for pixel sampling and buffer validation."""

import numpy as np
import pytest

from colorbuddy.errors import MalformedImageError
from colorbuddy.quantize.sampler import (
    TRANSPARENT_ALPHA_THRESHOLD,
    as_sample_array,
    color_histogram,
    iter_samples,
    sample_pixels,
)
from colorbuddy.schema import ChannelLayout, Color


def _rgb_2x2():
    return np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [10, 20, 30]],
        ],
        dtype=np.uint8,
    )


class TestSamplePixels:

    def test_row_major_order(self):
        samples = sample_pixels(_rgb_2x2())
        assert samples.shape == (4, 3)
        assert samples.tolist() == [
            [255, 0, 0],
            [0, 255, 0],
            [0, 0, 255],
            [10, 20, 30],
        ]

    def test_flat_bytes_with_declared_shape(self):
        raw = _rgb_2x2().tobytes()
        samples = sample_pixels(raw, width=2, height=2, layout=ChannelLayout.RGB)
        np.testing.assert_array_equal(samples, sample_pixels(_rgb_2x2()))

    def test_transparent_pixels_skipped(self):
        img = np.zeros((1, 4, 4), dtype=np.uint8)
        img[0, 0] = [255, 0, 0, 255]
        img[0, 1] = [0, 255, 0, 0]
        img[0, 2] = [0, 0, 255, TRANSPARENT_ALPHA_THRESHOLD - 1]
        img[0, 3] = [9, 9, 9, TRANSPARENT_ALPHA_THRESHOLD]
        samples = sample_pixels(img)
        assert samples.tolist() == [
            [255, 0, 0, 255],
            [9, 9, 9, TRANSPARENT_ALPHA_THRESHOLD],
        ]

    def test_custom_alpha_threshold(self):
        img = np.full((2, 2, 4), [1, 2, 3, 100], dtype=np.uint8)
        assert len(sample_pixels(img, alpha_threshold=101)) == 0
        assert len(sample_pixels(img, alpha_threshold=100)) == 4

    def test_rgb_keeps_every_pixel(self):
        img = np.zeros((5, 7, 3), dtype=np.uint8)
        assert len(sample_pixels(img)) == 35


class TestMalformedBuffers:

    def test_size_mismatch_raises(self):
        raw = bytes(11)
        with pytest.raises(MalformedImageError, match="expected 12"):
            sample_pixels(raw, width=2, height=2, layout=ChannelLayout.RGB)

    def test_flat_buffer_needs_dimensions(self):
        with pytest.raises(MalformedImageError, match="width, height and layout"):
            sample_pixels(bytes(12))

    def test_declared_shape_must_match_array(self):
        with pytest.raises(MalformedImageError):
            sample_pixels(_rgb_2x2(), width=3, height=2)

    def test_declared_layout_must_match_array(self):
        with pytest.raises(MalformedImageError):
            sample_pixels(_rgb_2x2(), layout=ChannelLayout.RGBA)

    def test_wrong_dtype_raises(self):
        with pytest.raises(MalformedImageError, match="uint8"):
            sample_pixels(np.zeros((2, 2, 3), dtype=np.float32))

    def test_wrong_channel_count_raises(self):
        with pytest.raises(MalformedImageError):
            sample_pixels(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            sample_pixels(bytes(5), width=2, height=2, layout=ChannelLayout.RGB)

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError, match="Expected numpy array or bytes"):
            sample_pixels([1, 2, 3])


class TestIterSamples:

    def test_yields_colors_lazily(self):
        it = iter_samples(_rgb_2x2())
        assert next(it) == Color(255, 0, 0)
        assert list(it) == [Color(0, 255, 0), Color(0, 0, 255), Color(10, 20, 30)]
        # Not restartable
        assert list(it) == []

    def test_skips_transparent(self):
        img = np.array([[[1, 2, 3, 0], [4, 5, 6, 255]]], dtype=np.uint8)
        assert list(iter_samples(img)) == [Color(4, 5, 6, 255)]

    def test_malformed_fails_on_creation(self):
        with pytest.raises(MalformedImageError):
            iter_samples(bytes(3), width=2, height=2, layout=ChannelLayout.RGB)


class TestSampleHelpers:

    def test_as_sample_array_from_colors(self):
        arr = as_sample_array([Color(1, 2, 3), Color(4, 5, 6)])
        assert arr.dtype == np.uint8
        assert arr.tolist() == [[1, 2, 3], [4, 5, 6]]

    def test_as_sample_array_from_tuples(self):
        arr = as_sample_array([(1, 2, 3, 4)])
        assert arr.shape == (1, 4)

    def test_as_sample_array_empty(self):
        assert len(as_sample_array([])) == 0

    def test_histogram_counts(self):
        samples = np.array([[1, 1, 1], [2, 2, 2], [1, 1, 1]], dtype=np.uint8)
        colors, counts = color_histogram(samples)
        assert colors.tolist() == [[1, 1, 1], [2, 2, 2]]
        assert counts.tolist() == [2, 1]
