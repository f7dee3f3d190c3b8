# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Pixel sampling.

Linearizes a decoded pixel buffer into color samples in row-major order.
When the buffer carries an alpha channel, effectively transparent pixels
are dropped so they never influence the palette.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Union

import numpy as np
from numpy.typing import NDArray

from colorbuddy.errors import MalformedImageError
from colorbuddy.schema import ChannelLayout, Color

# Pixels with alpha below this are treated as fully transparent.
TRANSPARENT_ALPHA_THRESHOLD = 8

PixelBuffer = Union[NDArray[np.uint8], bytes, bytearray, memoryview]


def as_image_array(
    pixels: PixelBuffer,
    width: Optional[int] = None,
    height: Optional[int] = None,
    layout: Optional[ChannelLayout] = None,
) -> NDArray[np.uint8]:
    """
    Validate a pixel buffer and view it as an (H, W, C) uint8 array.

    Args:
        pixels: Either an (H, W, C) uint8 array, or a flat buffer (bytes or
            1-D array) whose shape is given by width, height and layout.
        width: Declared width (required for flat buffers)
        height: Declared height (required for flat buffers)
        layout: Declared channel layout (required for flat buffers)

    Returns:
        (H, W, C) array with C == 3 or 4. No copy is made when possible.

    Raises:
        MalformedImageError: If the buffer is inconsistent with the
            declared dimensions, or has an unsupported dtype/shape.
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    elif isinstance(pixels, np.ndarray):
        arr = pixels
    else:
        raise TypeError(f"Expected numpy array or bytes, got {type(pixels)}")

    if arr.dtype != np.uint8:
        raise MalformedImageError(f"Expected uint8 pixels, got {arr.dtype}")

    if arr.ndim == 3:
        h, w, c = arr.shape
        if c not in (3, 4):
            raise MalformedImageError(
                f"Expected (H, W, 3) or (H, W, 4) array, got shape {arr.shape}"
            )
        if (width is not None and width != w) or (height is not None and height != h):
            raise MalformedImageError(
                f"Array is {w}x{h} but {width}x{height} was declared"
            )
        if layout is not None and layout.channels != c:
            raise MalformedImageError(
                f"Array has {c} channels but layout {layout.value} was declared"
            )
        return arr

    if arr.ndim != 1:
        raise MalformedImageError(f"Unsupported pixel buffer shape {arr.shape}")
    if width is None or height is None or layout is None:
        raise MalformedImageError(
            "Flat pixel buffers need width, height and layout"
        )
    expected = width * height * layout.channels
    if arr.size != expected:
        raise MalformedImageError(
            f"Pixel buffer has {arr.size} bytes, expected {expected} "
            f"for {width}x{height} {layout.value}"
        )
    return arr.reshape(height, width, layout.channels)


def sample_pixels(
    pixels: PixelBuffer,
    width: Optional[int] = None,
    height: Optional[int] = None,
    layout: Optional[ChannelLayout] = None,
    alpha_threshold: int = TRANSPARENT_ALPHA_THRESHOLD,
) -> NDArray[np.uint8]:
    """
    Flatten a pixel buffer into an (N, C) array of samples, row-major.

    For RGBA buffers, pixels with alpha < alpha_threshold are skipped.
    The result may be empty if every pixel is transparent.
    """
    image = as_image_array(pixels, width, height, layout)
    flat = image.reshape(-1, image.shape[2])
    if flat.shape[1] == 4:
        flat = flat[flat[:, 3] >= alpha_threshold]
    return flat


def iter_samples(
    pixels: PixelBuffer,
    width: Optional[int] = None,
    height: Optional[int] = None,
    layout: Optional[ChannelLayout] = None,
    alpha_threshold: int = TRANSPARENT_ALPHA_THRESHOLD,
) -> Iterator[Color]:
    """
    Lazily yield one Color per surviving pixel, row-major.

    The buffer is validated up front, so a malformed buffer fails on
    creation rather than part-way through iteration.
    """
    image = as_image_array(pixels, width, height, layout)
    return _iter_rows(image, alpha_threshold)


def _iter_rows(image: NDArray[np.uint8], alpha_threshold: int) -> Iterator[Color]:
    has_alpha = image.shape[2] == 4
    for row in image:
        for px in row:
            if has_alpha and px[3] < alpha_threshold:
                continue
            yield Color.from_channels(px.tolist())


def as_sample_array(samples: Union[NDArray[np.uint8], Iterable]) -> NDArray[np.uint8]:
    """
    Coerce samples to an (N, C) uint8 array.

    Accepts an (N, C) array, or any iterable of Colors or channel tuples
    (e.g. the output of iter_samples).
    """
    if isinstance(samples, np.ndarray):
        arr = samples
    else:
        rows = [s.channels if isinstance(s, Color) else tuple(s) for s in samples]
        if not rows:
            return np.empty((0, 3), dtype=np.uint8)
        arr = np.asarray(rows, dtype=np.uint8)

    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        raise MalformedImageError(f"Expected (N, 3) or (N, 4) samples, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        raise MalformedImageError(f"Expected uint8 samples, got {arr.dtype}")
    return arr


def color_histogram(
    samples: NDArray[np.uint8],
) -> tuple[NDArray[np.uint8], NDArray[np.int64]]:
    """
    Collapse samples into distinct colors with their sample counts.

    Returns:
        (colors, counts): colors is (M, C), sorted lexicographically by
        channel; counts is (M,) and sums to len(samples).
    """
    colors, counts = np.unique(samples, axis=0, return_counts=True)
    return colors, counts.astype(np.int64)
