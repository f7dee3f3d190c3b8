# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Tests for the extraction API.

Covers configuration validation, the supported input forms (array, flat
buffer, image file) and the properties every palette must satisfy.
"""

import numpy as np
import pytest
from PIL import Image

from colorbuddy import (
    ExtractionConfig,
    GeometryRequest,
    InvalidParameterError,
    MalformedImageError,
    PaletteMode,
    QuantizationMethod,
    extract_palette,
    format_palette,
    standalone_palette,
)
from colorbuddy.quantize import load_image
from colorbuddy.schema import ChannelLayout, Color, PaletteHeight


METHODS = [QuantizationMethod.KMEANS, QuantizationMethod.MEDIAN_CUT]


def _solid_image(rgb, size=(10, 10)):
    """Create a solid-color (H, W, C) image."""
    img = np.zeros((size[0], size[1], len(rgb)), dtype=np.uint8)
    img[:, :] = rgb
    return img


def _random_image(seed=0, size=(24, 24)):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(size[0], size[1], 3), dtype=np.uint8)


class TestExtractionConfig:

    def test_defaults(self):
        cfg = ExtractionConfig()
        assert cfg.method is QuantizationMethod.KMEANS
        assert cfg.n_colors == 8

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"n_colors": 0},
            {"n_colors": -3},
            {"max_iterations": 0},
            {"tolerance": -0.5},
            {"workers": 0},
            {"alpha_threshold": 300},
            {"method": "k-means"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidParameterError):
            ExtractionConfig(**kwargs)

    def test_frozen(self):
        cfg = ExtractionConfig()
        with pytest.raises(AttributeError):
            cfg.n_colors = 3


class TestExtractPalette:

    @pytest.mark.parametrize("method", METHODS)
    def test_solid_image(self, method):
        palette = extract_palette(
            _solid_image((200, 100, 50)),
            ExtractionConfig(method=method, n_colors=8),
        )
        assert len(palette) == 1
        assert palette[0].color == Color(200, 100, 50)
        assert palette[0].weight == 100
        assert palette.method is method

    def test_flat_buffer(self):
        img = _solid_image((1, 2, 3), size=(3, 4))
        palette = extract_palette(
            img.tobytes(),
            ExtractionConfig(method=QuantizationMethod.MEDIAN_CUT),
            width=4,
            height=3,
            layout=ChannelLayout.RGB,
        )
        assert palette[0].weight == 12

    def test_flat_buffer_wrong_size(self):
        with pytest.raises(MalformedImageError):
            extract_palette(bytes(10), width=4, height=3, layout=ChannelLayout.RGB)

    def test_transparent_pixels_ignored(self):
        img = np.array(
            [
                [[255, 0, 0, 255], [255, 0, 0, 255]],
                [[0, 0, 255, 0], [0, 0, 255, 3]],
            ],
            dtype=np.uint8,
        )
        for method in METHODS:
            palette = extract_palette(img, ExtractionConfig(method=method, n_colors=4))
            assert [(wc.color, wc.weight) for wc in palette] == [
                (Color(255, 0, 0, 255), 2),
            ]

    def test_fully_transparent_image(self):
        img = np.zeros((4, 4, 4), dtype=np.uint8)
        palette = extract_palette(img)
        assert len(palette) == 0
        with pytest.raises(InvalidParameterError, match="empty palette"):
            format_palette(palette)

    @pytest.mark.parametrize("method", METHODS)
    def test_weights_sum_to_pixel_count(self, method):
        palette = extract_palette(
            _random_image(),
            ExtractionConfig(method=method, n_colors=7),
        )
        assert palette.total_weight == 24 * 24
        assert 1 <= len(palette) <= 7

    @pytest.mark.parametrize("method", METHODS)
    def test_round_trip_through_strip(self, method):
        cfg = ExtractionConfig(method=method, n_colors=5)
        palette = extract_palette(_random_image(seed=4), cfg)

        strip = standalone_palette(
            palette,
            GeometryRequest(
                height=PaletteHeight.pixels(20),
                width=256,
                mode=PaletteMode.STANDALONE,
            ),
        )
        again = extract_palette(strip, cfg)
        assert set(again.colors) == set(palette.colors)


class TestLoadImage:

    def test_rgb_png(self, tmp_path):
        img = _random_image(size=(6, 9))
        path = tmp_path / "rgb.png"
        Image.fromarray(img).save(path)

        loaded = load_image(path)
        assert loaded.shape == (6, 9, 3)
        np.testing.assert_array_equal(loaded, img)

    def test_rgba_png_keeps_alpha(self, tmp_path):
        img = _solid_image((10, 20, 30, 128), size=(2, 3))
        path = tmp_path / "rgba.png"
        Image.fromarray(img).save(path)

        loaded = load_image(path)
        assert loaded.shape == (2, 3, 4)
        assert loaded[0, 0].tolist() == [10, 20, 30, 128]

    def test_palette_from_path(self, tmp_path):
        path = tmp_path / "solid.png"
        Image.fromarray(_solid_image((9, 99, 199))).save(path)

        palette = extract_palette(str(path), ExtractionConfig(n_colors=3))
        assert palette.colors == (Color(9, 99, 199),)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_image(tmp_path / "missing.png")

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "notes.png"
        path.write_text("not an image")
        with pytest.raises(OSError):
            load_image(path)

    def test_decompression_bomb(self, tmp_path, monkeypatch):
        path = tmp_path / "big.png"
        Image.fromarray(_solid_image((1, 2, 3), size=(8, 8))).save(path)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        with pytest.raises(MalformedImageError, match="too large"):
            load_image(path)
