# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""
Palette composition.

Turns a palette into pixels: a horizontal strip of equal-width color
bands, either appended below a copy of the source image (overlay) or
emitted on its own (standalone).

All buffers are (H, W, C) uint8 arrays; encoding them to a file format
is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from colorbuddy.errors import InvalidParameterError, MalformedImageError
from colorbuddy.schema import (
    DEFAULT_PALETTE_HEIGHT,
    DEFAULT_STANDALONE_WIDTH,
    Color,
    Palette,
    PaletteGeometry,
    PaletteHeight,
    PaletteMode,
)


@dataclass(frozen=True)
class GeometryRequest:
    """Requested strip size and output mode."""

    # Strip height: absolute pixels or a percentage of the source height
    height: PaletteHeight = PaletteHeight.pixels(DEFAULT_PALETTE_HEIGHT)

    # Strip width in pixels; None means source width (overlay) or
    # DEFAULT_STANDALONE_WIDTH (standalone)
    width: Optional[int] = None

    mode: PaletteMode = PaletteMode.OVERLAY

    def __post_init__(self) -> None:
        if not isinstance(self.height, PaletteHeight):
            raise InvalidParameterError(f"Expected PaletteHeight, got {type(self.height)}")
        if self.width is not None and self.width < 1:
            raise InvalidParameterError(f"Palette width must be >= 1, got {self.width}")


def resolve_geometry(
    request: GeometryRequest,
    source_width: Optional[int] = None,
    source_height: Optional[int] = None,
) -> PaletteGeometry:
    """
    Resolve a geometry request to pixel dimensions.

    Percentage heights are rounded half up; both dimensions are clamped
    to at least 1 pixel.

    Raises:
        InvalidParameterError: If a source dimension the request depends
            on is missing.
    """
    if request.width is not None:
        width = request.width
    elif request.mode is PaletteMode.OVERLAY:
        if source_width is None:
            raise InvalidParameterError("Overlay geometry needs the source width")
        width = source_width
    else:
        width = DEFAULT_STANDALONE_WIDTH

    if request.height.is_percentage and source_height is None:
        raise InvalidParameterError(
            f"Height {request.height} is relative and needs the source height"
        )
    height = request.height.resolve(source_height or 0)

    return PaletteGeometry(width=max(1, width), height=max(1, height))


def band_edges(width: int, n_bands: int) -> NDArray[np.int64]:
    """
    Column boundaries for n_bands contiguous bands spanning `width`.

    The first (width % n_bands) bands are one pixel wider, so the bands
    always cover the full width. Every band is at least one pixel wide.

    Returns:
        (n_bands + 1,) array starting at 0 and ending at width

    Raises:
        InvalidParameterError: If n_bands < 1 or width < n_bands.
    """
    if n_bands < 1:
        raise InvalidParameterError(f"Band count must be >= 1, got {n_bands}")
    if width < n_bands:
        raise InvalidParameterError(
            f"Strip width {width} is too narrow for {n_bands} colors"
        )
    base, extra = divmod(width, n_bands)
    widths = np.full(n_bands, base, dtype=np.int64)
    widths[:extra] += 1
    return np.concatenate(([0], np.cumsum(widths)))


def render_strip(
    palette: Palette,
    geometry: PaletteGeometry,
    channels: Optional[int] = None,
) -> NDArray[np.uint8]:
    """
    Render the palette as a (height, width, C) strip, one band per entry.

    Args:
        palette: Non-empty palette; bands follow palette order
        geometry: Resolved strip size
        channels: 3 or 4; defaults to the palette colors' layout. RGB
            colors drawn into a 4-channel strip are opaque.

    Raises:
        InvalidParameterError: If the palette is empty, or the strip is
            narrower than one pixel per entry.
    """
    if len(palette) == 0:
        raise InvalidParameterError("Cannot render an empty palette")

    edges = band_edges(geometry.width, len(palette))
    n_channels = channels or palette.layout.channels
    strip = np.zeros((geometry.height, geometry.width, n_channels), dtype=np.uint8)
    for i, wc in enumerate(palette):
        strip[:, edges[i]:edges[i + 1]] = _color_values(wc.color, n_channels)
    return strip


def overlay_palette(
    source: NDArray[np.uint8],
    palette: Palette,
    request: Optional[GeometryRequest] = None,
    background: Optional[Color] = None,
) -> NDArray[np.uint8]:
    """
    Append a palette strip below a copy of the source image.

    The canvas is max(source width, strip width) wide and source height +
    strip height tall, with the source's channel layout. Areas covered by
    neither the source nor the strip take the background color (zeros,
    i.e. transparent for RGBA, by default).

    Returns:
        New (H, W, C) array; the source is not modified.
    """
    src_h, src_w, n_channels = _image_shape(source)
    req = request or GeometryRequest(mode=PaletteMode.OVERLAY)
    geometry = resolve_geometry(req, src_w, src_h)
    strip = render_strip(palette, geometry, channels=n_channels)

    canvas_w = max(src_w, geometry.width)
    canvas = np.zeros((src_h + geometry.height, canvas_w, n_channels), dtype=np.uint8)
    if background is not None:
        canvas[:] = _color_values(background, n_channels)

    canvas[:src_h, :src_w] = source
    canvas[src_h:, :geometry.width] = strip
    return canvas


def standalone_palette(
    palette: Palette,
    request: Optional[GeometryRequest] = None,
    source_width: Optional[int] = None,
    source_height: Optional[int] = None,
) -> NDArray[np.uint8]:
    """Render the palette strip as its own image buffer."""
    req = request or GeometryRequest(mode=PaletteMode.STANDALONE)
    geometry = resolve_geometry(req, source_width, source_height)
    return render_strip(palette, geometry)


def compose(
    source: NDArray[np.uint8],
    palette: Palette,
    request: Optional[GeometryRequest] = None,
) -> NDArray[np.uint8]:
    """Dispatch on request.mode (overlay by default)."""
    req = request or GeometryRequest()
    if req.mode is PaletteMode.STANDALONE:
        src_h, src_w, _ = _image_shape(source)
        return standalone_palette(palette, req, src_w, src_h)
    return overlay_palette(source, palette, req)


def _image_shape(source: NDArray[np.uint8]) -> tuple[int, int, int]:
    if source.ndim != 3 or source.shape[2] not in (3, 4):
        raise MalformedImageError(
            f"Expected (H, W, 3) or (H, W, 4) array, got shape {source.shape}"
        )
    if source.dtype != np.uint8:
        raise MalformedImageError(f"Expected uint8 array, got {source.dtype}")
    h, w, c = source.shape
    return h, w, c


def _color_values(color: Color, n_channels: int) -> Sequence[int]:
    if n_channels == 4:
        return color.with_alpha(255).channels
    return color.channels[:3]
