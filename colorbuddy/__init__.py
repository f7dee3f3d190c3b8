# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Color Buddy -- color palette extraction from images.

Reduces an image to a small weighted palette with median-cut or k-means
quantization, and renders the palette as structured records or as a
strip of color bands.

Quick start::

    from colorbuddy import ExtractionConfig, extract_palette, format_palette, to_json

    palette = extract_palette("image.png", ExtractionConfig(n_colors=5))
    format_palette(palette)  # ordered {r, g, b, hex, weight} records
    to_json(palette, requested_colors=5, image_width=640, image_height=480)
"""

from __future__ import annotations

__version__ = "1.0.1"

from colorbuddy.errors import (
    ColorBuddyError,
    InvalidParameterError,
    MalformedImageError,
)
from colorbuddy.quantize import (
    ExtractionConfig,
    extract_palette,
    kmeans_quantize,
    median_cut_quantize,
    sample_pixels,
)
from colorbuddy.render import (
    GeometryRequest,
    overlay_palette,
    render_strip,
    standalone_palette,
)
from colorbuddy.runtime import format_palette, to_json
from colorbuddy.schema import (
    ChannelLayout,
    Color,
    ColorRecord,
    Palette,
    PaletteHeight,
    PaletteMode,
    QuantizationMethod,
    WeightedColor,
)

__all__ = [
    # Core API
    "extract_palette",
    "ExtractionConfig",
    "sample_pixels",
    "median_cut_quantize",
    "kmeans_quantize",
    # Rendering
    "GeometryRequest",
    "render_strip",
    "overlay_palette",
    "standalone_palette",
    # Structured output
    "format_palette",
    "to_json",
    # Types (commonly needed)
    "ChannelLayout",
    "Color",
    "WeightedColor",
    "Palette",
    "ColorRecord",
    "PaletteHeight",
    "PaletteMode",
    "QuantizationMethod",
    # Errors
    "ColorBuddyError",
    "MalformedImageError",
    "InvalidParameterError",
    # Version
    "__version__",
]
