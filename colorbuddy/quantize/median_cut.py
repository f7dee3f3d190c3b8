# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Median-cut quantization.

Recursively splits the color-space box with the widest channel range at
its median until the requested number of buckets exists, then represents
each bucket by the mean of its samples.

Buckets hold distinct colors plus their sample counts rather than one
row per pixel; the split points and means are identical to working on
the raw samples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from colorbuddy.errors import InvalidParameterError
from colorbuddy.schema import (
    Color,
    Palette,
    QuantizationMethod,
    WeightedColor,
    palette_sort_key,
)
from colorbuddy.quantize.sampler import as_sample_array, color_histogram

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ColorBucket:
    """
    A box in color space.

    Attributes:
        colors: (M, C) distinct colors in the bucket
        counts: (M,) sample count per color
        created: Creation order; lower wins ties when choosing a bucket to split
        mins, maxs: Cached per-channel bounds of `colors`
    """
    colors: NDArray[np.uint8]
    counts: NDArray[np.int64]
    created: int
    mins: NDArray[np.uint8] = field(init=False)
    maxs: NDArray[np.uint8] = field(init=False)

    def __post_init__(self) -> None:
        if len(self.colors) == 0:
            raise ValueError("ColorBucket cannot be empty")
        self.mins = self.colors.min(axis=0)
        self.maxs = self.colors.max(axis=0)

    @property
    def ranges(self) -> NDArray[np.int64]:
        return self.maxs.astype(np.int64) - self.mins.astype(np.int64)

    @property
    def size(self) -> int:
        return int(self.counts.sum())

    @property
    def can_split(self) -> bool:
        return len(self.colors) >= 2

    def mean_color(self) -> Color:
        """Channel-wise mean of the member samples, rounded half up."""
        total = self.size
        sums = (self.colors.astype(np.int64) * self.counts[:, np.newaxis]).sum(axis=0)
        # exact integer half-up rounding of sums / total
        means = (2 * sums + total) // (2 * total)
        return Color.from_channels(means.tolist())


def select_bucket(buckets: list[ColorBucket]) -> Optional[tuple[int, int]]:
    """
    Choose the next bucket and channel to cut.

    The bucket whose widest channel range is largest wins; ties go to the
    earliest-created bucket. Within a bucket, ties between channels go to
    the lowest channel index (R, G, B, A).

    Returns:
        (index into buckets, channel), or None if no bucket can be split.
    """
    best: Optional[tuple[int, int]] = None
    best_key: Optional[tuple[int, int]] = None
    for i, bucket in enumerate(buckets):
        if not bucket.can_split:
            continue
        ranges = bucket.ranges
        channel = int(np.argmax(ranges))
        key = (-int(ranges[channel]), bucket.created)
        if best_key is None or key < best_key:
            best, best_key = (i, channel), key
    return best


def split_bucket(
    bucket: ColorBucket,
    channel: int,
    next_id: int,
) -> tuple[ColorBucket, ColorBucket]:
    """
    Sort a bucket along `channel` and cut it at the median sample.

    The cut is moved to the nearest boundary between distinct channel
    values (the earlier boundary on a tie), so every distinct color ends
    up in exactly one half and both halves are non-empty.
    """
    colors = bucket.colors
    n_channels = colors.shape[1]
    secondary = [c for c in range(n_channels) if c != channel]
    # np.lexsort treats the last key as primary
    keys = [colors[:, c] for c in reversed(secondary)] + [colors[:, channel]]
    order = np.lexsort(keys)
    colors = colors[order]
    counts = bucket.counts[order]

    values = colors[:, channel]
    boundaries = np.nonzero(values[1:] != values[:-1])[0] + 1
    if len(boundaries) == 0:
        raise ValueError(f"Bucket has no range on channel {channel}")

    cumulative = np.cumsum(counts)
    median = int(cumulative[-1]) // 2
    offsets = cumulative[boundaries - 1]
    cut = int(boundaries[int(np.argmin(np.abs(offsets - median)))])

    left = ColorBucket(colors[:cut], counts[:cut], created=next_id)
    right = ColorBucket(colors[cut:], counts[cut:], created=next_id + 1)
    return left, right


def median_cut_quantize(
    samples: Union[NDArray[np.uint8], Iterable],
    n_colors: int,
) -> Palette:
    """
    Reduce samples to at most n_colors representative colors.

    Args:
        samples: (N, C) uint8 array or iterable of Colors / channel tuples
        n_colors: Target color count (>= 1)

    Returns:
        Palette with min(n_colors, distinct colors) entries at most,
        ordered by descending weight then ascending channel values.
        Weights sum to the number of samples. An empty sample set gives
        an empty palette.

    Raises:
        InvalidParameterError: If n_colors < 1.
    """
    if n_colors < 1:
        raise InvalidParameterError(f"Color count must be >= 1, got {n_colors}")

    data = as_sample_array(samples)
    if len(data) == 0:
        logger.warning("median-cut: no samples to quantize")
        return Palette(entries=(), method=QuantizationMethod.MEDIAN_CUT)

    colors, counts = color_histogram(data)
    buckets = [ColorBucket(colors, counts, created=0)]
    next_id = 1
    splits = 0

    while len(buckets) < n_colors:
        selected = select_bucket(buckets)
        if selected is None:
            break
        index, channel = selected
        left, right = split_bucket(buckets[index], channel, next_id)
        buckets[index:index + 1] = [left, right]
        next_id += 2
        splits += 1

    logger.debug(
        "median-cut: %d samples, %d distinct colors -> %d buckets after %d splits",
        len(data), len(colors), len(buckets), splits,
    )

    entries = sorted(
        (WeightedColor(color=b.mean_color(), weight=b.size) for b in buckets),
        key=palette_sort_key,
    )
    return Palette(
        entries=tuple(entries),
        method=QuantizationMethod.MEDIAN_CUT,
        iterations=splits,
    )
