# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Quantization core for Color Buddy.

Deterministic palette extraction from in-memory pixel buffers.
Nothing in this package writes files.
"""

from colorbuddy.quantize.extract import (
    DEFAULT_NUMBER_OF_COLORS,
    ExtractionConfig,
    extract_palette,
    load_image,
    quantize,
)
from colorbuddy.quantize.kmeans import kmeans_quantize
from colorbuddy.quantize.median_cut import median_cut_quantize
from colorbuddy.quantize.sampler import iter_samples, sample_pixels

__all__ = [
    "extract_palette",
    "quantize",
    "load_image",
    "ExtractionConfig",
    "DEFAULT_NUMBER_OF_COLORS",
    "median_cut_quantize",
    "kmeans_quantize",
    "sample_pixels",
    "iter_samples",
]
