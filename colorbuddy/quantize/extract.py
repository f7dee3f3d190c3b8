# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Main palette extraction API.

This is the primary entry point for the quantization core: it loads or
validates a pixel buffer, samples it, and dispatches to the configured
quantizer.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from colorbuddy.errors import InvalidParameterError, MalformedImageError
from colorbuddy.schema import ChannelLayout, Palette, QuantizationMethod
from colorbuddy.quantize.kmeans import (
    KMEANS_MAX_ITERATIONS,
    KMEANS_TOLERANCE,
    kmeans_quantize,
)
from colorbuddy.quantize.median_cut import median_cut_quantize
from colorbuddy.quantize.sampler import (
    TRANSPARENT_ALPHA_THRESHOLD,
    PixelBuffer,
    sample_pixels,
)

logger = logging.getLogger(__name__)

DEFAULT_NUMBER_OF_COLORS = 8


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for one quantization run."""

    # Algorithm used to reduce the samples
    method: QuantizationMethod = QuantizationMethod.KMEANS

    # Target palette size; the result may be shorter for images with
    # fewer distinct colors
    n_colors: int = DEFAULT_NUMBER_OF_COLORS

    # K-means only: iteration cap and convergence tolerance (8-bit units)
    max_iterations: int = KMEANS_MAX_ITERATIONS
    tolerance: float = KMEANS_TOLERANCE

    # K-means only: threads for the assignment step
    workers: int = 1

    # RGBA only: pixels with alpha below this are ignored
    alpha_threshold: int = TRANSPARENT_ALPHA_THRESHOLD

    def __post_init__(self) -> None:
        if not isinstance(self.method, QuantizationMethod):
            raise InvalidParameterError(f"Unknown quantization method: {self.method!r}")
        if self.n_colors < 1:
            raise InvalidParameterError(f"Color count must be >= 1, got {self.n_colors}")
        if self.max_iterations < 1:
            raise InvalidParameterError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )
        if self.tolerance < 0:
            raise InvalidParameterError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.workers < 1:
            raise InvalidParameterError(f"workers must be >= 1, got {self.workers}")
        if not 0 <= self.alpha_threshold <= 256:
            raise InvalidParameterError(
                f"alpha_threshold must be 0-256, got {self.alpha_threshold}"
            )


def quantize(
    samples: Union[NDArray[np.uint8], Iterable],
    config: Optional[ExtractionConfig] = None,
) -> Palette:
    """Run the configured quantizer over already-sampled colors."""
    cfg = config or ExtractionConfig()
    if cfg.method is QuantizationMethod.MEDIAN_CUT:
        return median_cut_quantize(samples, cfg.n_colors)
    return kmeans_quantize(
        samples,
        cfg.n_colors,
        max_iterations=cfg.max_iterations,
        tolerance=cfg.tolerance,
        workers=cfg.workers,
    )


def extract_palette(
    image: Union[str, Path, PixelBuffer],
    config: Optional[ExtractionConfig] = None,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    layout: Optional[ChannelLayout] = None,
) -> Palette:
    """
    Extract a weighted palette from an image.

    Args:
        image: One of:
            - Path to an image file (str or Path), decoded with Pillow
            - (H, W, 3) or (H, W, 4) uint8 array
            - Flat bytes / 1-D array, with width, height and layout given
        config: Quantization settings (defaults if None)
        width, height, layout: Declared shape for flat buffers

    Returns:
        Palette ordered by descending weight.

    Raises:
        InvalidParameterError: Bad configuration (raised before sampling)
        MalformedImageError: Buffer inconsistent with its declared shape

    Example:
        >>> from colorbuddy import extract_palette, ExtractionConfig
        >>> palette = extract_palette("photo.png", ExtractionConfig(n_colors=5))
        >>> palette[0].color.hex
        '#3a5f8c'
    """
    cfg = config or ExtractionConfig()

    if isinstance(image, (str, Path)):
        pixels: PixelBuffer = load_image(image)
    else:
        pixels = image

    samples = sample_pixels(pixels, width, height, layout, cfg.alpha_threshold)
    logger.debug("sampled %d pixels (%s, n=%d)", len(samples), cfg.method, cfg.n_colors)
    return quantize(samples, cfg)


def load_image(path: Union[str, Path]) -> NDArray[np.uint8]:
    """
    Decode an image file into an (H, W, 3) or (H, W, 4) uint8 array.

    Images with transparency are kept as RGBA, everything else becomes
    RGB. An embedded ICC profile is converted to sRGB so the colors match
    what color pickers show.

    Raises:
        OSError: If Pillow cannot open or decode the file.
        MalformedImageError: If the decoded image has no pixels, or exceeds
            Pillow's decompression-bomb limit.
    """
    from PIL import Image

    try:
        with Image.open(path) as img:
            has_alpha = img.mode in ("RGBA", "LA", "PA") or (
                img.mode == "P" and "transparency" in img.info
            )
            icc_profile = img.info.get("icc_profile")
            img = img.convert("RGBA" if has_alpha else "RGB")
    except Image.DecompressionBombError as exc:
        raise MalformedImageError(f"Image too large to decode: {path}: {exc}") from exc

    if icc_profile:
        img = _to_srgb(img, icc_profile)

    pixels = np.array(img, dtype=np.uint8)
    if pixels.size == 0:
        raise MalformedImageError(f"Image has no pixels: {path}")
    return pixels


def _to_srgb(img, icc_profile: bytes):
    """Convert an image with an embedded profile to sRGB (alpha untouched)."""
    from PIL import ImageCms

    alpha = img.getchannel("A") if img.mode == "RGBA" else None
    rgb = img.convert("RGB")
    try:
        embedded = ImageCms.ImageCmsProfile(io.BytesIO(icc_profile))
        srgb = ImageCms.createProfile("sRGB")
        rgb = ImageCms.profileToProfile(rgb, embedded, srgb)
    except (OSError, ImageCms.PyCMSError) as exc:
        # Unusable profile: keep the raw values
        logger.debug("ICC conversion skipped: %s", exc)
        return img
    if alpha is not None:
        rgb.putalpha(alpha)
    return rgb
