# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Schema definitions for palettes.

All types in this module are immutable (frozen dataclasses).
A palette is produced once per quantization run and never altered.
"""

from colorbuddy.schema.palette import (
    DEFAULT_PALETTE_HEIGHT,
    DEFAULT_STANDALONE_WIDTH,
    ChannelLayout,
    Color,
    ColorRecord,
    ImageDimensions,
    Palette,
    PaletteGeometry,
    PaletteHeight,
    PaletteMetadata,
    PaletteMode,
    PaletteOutput,
    QuantizationMethod,
    WeightedColor,
    palette_sort_key,
)

__all__ = [
    # Core types
    "ChannelLayout",
    "Color",
    "WeightedColor",
    "Palette",
    "palette_sort_key",
    "QuantizationMethod",
    # Geometry
    "PaletteMode",
    "PaletteHeight",
    "PaletteGeometry",
    "DEFAULT_PALETTE_HEIGHT",
    "DEFAULT_STANDALONE_WIDTH",
    # Structured output
    "ColorRecord",
    "ImageDimensions",
    "PaletteMetadata",
    "PaletteOutput",
]
