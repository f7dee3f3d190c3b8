# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Tests for schema value types."""

import pytest

from colorbuddy.errors import ColorBuddyError, InvalidParameterError
from colorbuddy.schema import (
    ChannelLayout,
    Color,
    Palette,
    PaletteHeight,
    QuantizationMethod,
    WeightedColor,
    palette_sort_key,
)


class TestColor:

    @pytest.mark.parametrize(
        "color,expected",
        [
            (Color(255, 128, 64), "#ff8040"),
            (Color(0, 0, 0), "#000000"),
            (Color(255, 255, 255), "#ffffff"),
            (Color(128, 64, 32), "#804020"),
            (Color(1, 2, 3), "#010203"),
            (Color(1, 2, 3, 0), "#010203"),
        ],
    )
    def test_hex(self, color, expected):
        assert color.hex == expected

    def test_from_hex(self):
        assert Color.from_hex("#FF8040") == Color(255, 128, 64)
        assert Color.from_hex("010203") == Color(1, 2, 3)

    def test_from_hex_invalid(self):
        with pytest.raises(ValueError):
            Color.from_hex("#fff")

    @pytest.mark.parametrize("values", [(256, 0, 0), (0, -1, 0), (0, 0, 0, 300)])
    def test_out_of_range(self, values):
        with pytest.raises(ValueError, match="0-255"):
            Color(*values)

    def test_channels_and_layout(self):
        assert Color(1, 2, 3).channels == (1, 2, 3)
        assert Color(1, 2, 3).layout is ChannelLayout.RGB
        assert Color(1, 2, 3, 4).channels == (1, 2, 3, 4)
        assert Color(1, 2, 3, 4).layout is ChannelLayout.RGBA

    def test_with_alpha(self):
        assert Color(1, 2, 3).with_alpha() == Color(1, 2, 3, 255)
        assert Color(1, 2, 3, 9).with_alpha() == Color(1, 2, 3, 9)

    def test_from_channels(self):
        assert Color.from_channels([4, 5, 6]) == Color(4, 5, 6)
        assert Color.from_channels((4, 5, 6, 7)) == Color(4, 5, 6, 7)
        with pytest.raises(ValueError):
            Color.from_channels([1, 2])

    def test_frozen(self):
        c = Color(1, 2, 3)
        with pytest.raises(AttributeError):
            c.red = 9


class TestPalette:

    def test_sort_key(self):
        entries = [
            WeightedColor(Color(9, 9, 9), 1),
            WeightedColor(Color(5, 5, 5), 3),
            WeightedColor(Color(0, 0, 1), 3),
        ]
        ordered = sorted(entries, key=palette_sort_key)
        assert [wc.color for wc in ordered] == [
            Color(0, 0, 1),
            Color(5, 5, 5),
            Color(9, 9, 9),
        ]

    def test_sequence_protocol(self):
        entries = (WeightedColor(Color(1, 1, 1), 2), WeightedColor(Color(2, 2, 2), 1))
        palette = Palette(entries=entries, method=QuantizationMethod.KMEANS)
        assert len(palette) == 2
        assert palette[1].color == Color(2, 2, 2)
        assert list(palette) == list(entries)
        assert palette.total_weight == 3
        assert palette.layout is ChannelLayout.RGB

    def test_empty_palette(self):
        palette = Palette(entries=(), method=QuantizationMethod.MEDIAN_CUT)
        assert len(palette) == 0
        assert palette.layout is None

    def test_negative_weight(self):
        with pytest.raises(ValueError):
            WeightedColor(Color(0, 0, 0), -1)

    def test_method_names(self):
        assert str(QuantizationMethod.KMEANS) == "k-means"
        assert QuantizationMethod("median-cut") is QuantizationMethod.MEDIAN_CUT


class TestPaletteHeight:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("235", PaletteHeight.pixels(235)),
            ("130px", PaletteHeight.pixels(130)),
            ("0", PaletteHeight.pixels(0)),
            ("50%", PaletteHeight.percentage(50)),
            ("100%", PaletteHeight.percentage(100)),
            ("99.9%", PaletteHeight.percentage(99.9)),
            ("0%", PaletteHeight.percentage(0)),
        ],
    )
    def test_parse_valid(self, text, expected):
        assert PaletteHeight.parse(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "foo",
            "",
            "%",
            "px",
            "150%",
            "100.1%",
            "-10%",
            "-5",
            "100%%",
            "100pxpx",
            "100PX",
            "50+px",
            "１２３",
            "12.5px",
        ],
    )
    def test_parse_invalid(self, text):
        with pytest.raises(InvalidParameterError):
            PaletteHeight.parse(text)

    def test_percentage_error_message(self):
        with pytest.raises(InvalidParameterError, match="between 0 and 100"):
            PaletteHeight.parse("150%")

    def test_errors_share_base_class(self):
        with pytest.raises(ColorBuddyError):
            PaletteHeight.parse("foo")
        with pytest.raises(ValueError):
            PaletteHeight.parse("foo")

    @pytest.mark.parametrize(
        "height,source,expected",
        [
            (PaletteHeight.pixels(40), 1000, 40),
            (PaletteHeight.pixels(0), 1000, 1),
            (PaletteHeight.percentage(50), 200, 100),
            (PaletteHeight.percentage(25), 10, 3),
            (PaletteHeight.percentage(1), 10, 1),
            (PaletteHeight.percentage(0), 10, 1),
        ],
    )
    def test_resolve(self, height, source, expected):
        assert height.resolve(source) == expected

    def test_str(self):
        assert str(PaletteHeight.pixels(20)) == "20px"
        assert str(PaletteHeight.percentage(12.5)) == "12.5%"
