# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
K-means quantization.

Lloyd iterations over the color histogram (distinct colors weighted by
sample count), which is equivalent to clustering every sample.

Seeding is deterministic: samples are ordered by Rec. 601 luma (ties
broken by channel values) and the sample at the centre of each of N
equal strata becomes an initial centroid. Identical input therefore
always gives an identical palette.

The assignment step can be fanned out across a thread pool. Each worker
returns labels plus per-cluster partial sums for its slice of colors and
the partials are reduced before the update step. Partial sums are sums of
integers held in float64, so the result does not depend on the worker
count.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import nullcontext
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

KMEANS_MAX_ITERATIONS = 100
# Largest per-channel centroid shift (8-bit units) still counted as converged
KMEANS_TOLERANCE = 1e-3

_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

# Rows per distance block; bounds the (rows, k, C) temporary
_BLOCK_ROWS = 4096


def seed_centroids(
    colors: NDArray[np.uint8],
    counts: NDArray[np.int64],
    k: int,
) -> NDArray[np.float64]:
    """
    Pick k initial centroids from the luma-sorted sample sequence.

    Centroid i is the sample at index ((2i + 1) * total) // (2k), i.e. the
    centre of the i-th of k equal strata. When k exceeds the number of
    distinct colors some centroids coincide.

    Args:
        colors: (M, C) distinct colors
        counts: (M,) sample count per color
        k: Number of centroids

    Returns:
        (k, C) float64 array
    """
    luma = colors[:, :3].astype(np.float64) @ _LUMA_WEIGHTS
    n_channels = colors.shape[1]
    # np.lexsort treats the last key as primary: luma, then R, G, B[, A]
    keys = [colors[:, c] for c in reversed(range(n_channels))] + [luma]
    order = np.lexsort(keys)

    sorted_colors = colors[order]
    cumulative = np.cumsum(counts[order])
    total = int(cumulative[-1])

    positions = ((2 * np.arange(k, dtype=np.int64) + 1) * total) // (2 * k)
    idx = np.searchsorted(cumulative, positions, side="right")
    return sorted_colors[idx].astype(np.float64)


def _assign_chunk(
    colors: NDArray[np.float64],
    counts: NDArray[np.int64],
    centroids: NDArray[np.float64],
) -> tuple[NDArray[np.int64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Assign colors to their nearest centroid and accumulate partial sums.

    Ties go to the lowest centroid index (np.argmin returns the first).

    Returns:
        (labels, sums, totals): labels (m,), per-cluster channel sums
        (k, C) weighted by count, and per-cluster sample totals (k,)
    """
    k, n_channels = centroids.shape
    labels = np.empty(len(colors), dtype=np.int64)
    for start in range(0, len(colors), _BLOCK_ROWS):
        block = colors[start:start + _BLOCK_ROWS]
        dists = np.sum(
            (block[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2,
            axis=2,
        )
        labels[start:start + len(block)] = np.argmin(dists, axis=1)

    weights = counts.astype(np.float64)
    sums = np.empty((k, n_channels), dtype=np.float64)
    for c in range(n_channels):
        sums[:, c] = np.bincount(labels, weights=colors[:, c] * weights, minlength=k)
    totals = np.bincount(labels, weights=weights, minlength=k)
    return labels, sums, totals


def _assign(
    colors: NDArray[np.float64],
    counts: NDArray[np.int64],
    centroids: NDArray[np.float64],
    pool: Optional[Executor],
    workers: int,
) -> tuple[NDArray[np.int64], NDArray[np.float64], NDArray[np.float64]]:
    """Run the assignment step, fanned out over `pool` when one is given."""
    if pool is None or workers <= 1 or len(colors) < 2 * workers:
        return _assign_chunk(colors, counts, centroids)

    color_parts = np.array_split(colors, workers)
    count_parts = np.array_split(counts, workers)
    results = list(pool.map(
        _assign_chunk,
        color_parts,
        count_parts,
        [centroids] * workers,
    ))
    labels = np.concatenate([r[0] for r in results])
    sums = np.sum([r[1] for r in results], axis=0)
    totals = np.sum([r[2] for r in results], axis=0)
    return labels, sums, totals


def kmeans_quantize(
    samples: Union[NDArray[np.uint8], Iterable],
    n_colors: int,
    *,
    max_iterations: int = KMEANS_MAX_ITERATIONS,
    tolerance: float = KMEANS_TOLERANCE,
    workers: int = 1,
) -> Palette:
    """
    Cluster samples into at most n_colors groups.

    Args:
        samples: (N, C) uint8 array or iterable of Colors / channel tuples
        n_colors: Number of centroids (>= 1)
        max_iterations: Iteration cap; reaching it is not an error
        tolerance: Convergence threshold on the largest centroid shift
        workers: Threads used for the assignment step

    Returns:
        Palette with one entry per non-empty cluster, weight = assigned
        sample count, ordered by descending weight then ascending channel
        values. Colors that happen to coincide are not merged. An empty
        sample set gives an empty palette. ``converged`` is False when the
        cap was reached first.

    Raises:
        InvalidParameterError: If n_colors, max_iterations or workers < 1,
            or tolerance < 0.
    """
    if n_colors < 1:
        raise InvalidParameterError(f"Color count must be >= 1, got {n_colors}")
    if max_iterations < 1:
        raise InvalidParameterError(f"max_iterations must be >= 1, got {max_iterations}")
    if tolerance < 0:
        raise InvalidParameterError(f"tolerance must be >= 0, got {tolerance}")
    if workers < 1:
        raise InvalidParameterError(f"workers must be >= 1, got {workers}")

    data = as_sample_array(samples)
    if len(data) == 0:
        logger.warning("k-means: no samples to quantize")
        return Palette(entries=(), method=QuantizationMethod.KMEANS)

    colors, counts = color_histogram(data)
    points = colors.astype(np.float64)
    centroids = seed_centroids(colors, counts, n_colors)

    converged = False
    iterations = 0
    totals = np.zeros(n_colors, dtype=np.float64)

    pool_ctx = ThreadPoolExecutor(max_workers=workers) if workers > 1 else nullcontext()
    with pool_ctx as pool:
        for iterations in range(1, max_iterations + 1):
            _, sums, totals = _assign(points, counts, centroids, pool, workers)

            updated = centroids.copy()
            nonempty = totals > 0
            updated[nonempty] = sums[nonempty] / totals[nonempty, np.newaxis]

            shift = float(np.max(np.abs(updated - centroids)))
            centroids = updated
            if shift <= tolerance:
                converged = True
                break

    if converged:
        logger.debug(
            "k-means: converged after %d iterations (%d distinct colors, k=%d)",
            iterations, len(colors), n_colors,
        )
    else:
        logger.warning(
            "k-means: iteration cap of %d reached without convergence; "
            "returning best current centroids",
            max_iterations,
        )

    entries = []
    for centroid, total in zip(centroids, totals):
        if total <= 0:
            continue
        channels = np.clip(np.floor(centroid + 0.5), 0, 255).astype(np.int64)
        entries.append(WeightedColor(
            color=Color.from_channels(channels.tolist()),
            weight=int(total),
        ))
    entries.sort(key=palette_sort_key)

    return Palette(
        entries=tuple(entries),
        method=QuantizationMethod.KMEANS,
        iterations=iterations,
        converged=converged,
    )
