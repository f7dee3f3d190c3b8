# Copyright (c) 2026 Color Buddy
# SPDX-License-Identifier: MIT

"""Palette strip rendering (overlay and standalone)."""

from colorbuddy.render.composer import (
    GeometryRequest,
    band_edges,
    compose,
    overlay_palette,
    render_strip,
    resolve_geometry,
    standalone_palette,
)

__all__ = [
    "GeometryRequest",
    "resolve_geometry",
    "band_edges",
    "render_strip",
    "overlay_palette",
    "standalone_palette",
    "compose",
]
